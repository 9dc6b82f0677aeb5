# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Behavioural tests for :mod:`modcatalog.catalog`."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from modcatalog.catalog import ModuleCatalog
from modcatalog.config import BoostOptions, CatalogSettings, ConfigError
from modcatalog.errors import (
    CycleError,
    DuplicateNameError,
    IllegalDependencyError,
    MissingDependencyError,
    ModularityError,
)
from modcatalog.models import ActivationMode, GroupDescriptor, ModuleDescriptor

ModuleFactory = Callable[..., ModuleDescriptor]


def _assert_dependency_order(ordered: tuple[ModuleDescriptor, ...]) -> None:
    position = {module.name: index for index, module in enumerate(ordered)}
    for module in ordered:
        for dependency in module.required_dependencies:
            if dependency in position:
                assert position[dependency] < position[module.name]


def test_modules_flattens_groupless_then_grouped(make_module: ModuleFactory) -> None:
    catalog = ModuleCatalog([make_module("A")])
    catalog.add_group(ActivationMode.EAGER, "bundle", make_module("B"), make_module("C"), name="G")
    catalog.add_module(make_module("D"))

    assert [module.name for module in catalog.modules] == ["A", "D", "B", "C"]
    assert [module.name for module in catalog.groupless_modules] == ["A", "D"]
    assert len(catalog.groups) == 1
    assert len(catalog.items) == 3
    assert "B" in catalog
    assert catalog.get("C") is catalog.groups[0].modules[1]


def test_add_group_applies_group_metadata(make_module: ModuleFactory) -> None:
    member = make_module("B")
    catalog = ModuleCatalog().add_group(ActivationMode.ON_DEMAND, "bundles/reports", member)

    assert member.activation_mode is ActivationMode.ON_DEMAND
    assert member.ref == "bundles/reports"
    assert catalog.modules == (member,)


def test_add_builds_descriptor_and_chains() -> None:
    catalog = ModuleCatalog().add("Core", "core.Module").add("Orders", "orders.Module", "Core")

    orders = catalog.get("Orders")
    assert orders is not None
    assert orders.depends_on == ["Core"]
    assert orders.activation_mode is ActivationMode.EAGER


def test_duplicate_names_fail_uniqueness(make_module: ModuleFactory) -> None:
    catalog = ModuleCatalog([make_module("A"), make_module("B"), make_module("A")])

    with pytest.raises(DuplicateNameError) as excinfo:
        catalog.validate()

    assert excinfo.value.module_name == "A"
    assert not catalog.validated


def test_duplicate_between_group_and_groupless(make_module: ModuleFactory) -> None:
    catalog = ModuleCatalog([make_module("A")])
    catalog.add_group(ActivationMode.EAGER, None, make_module("A"))

    with pytest.raises(DuplicateNameError, match="A"):
        catalog.validate()


def test_cycle_is_reported(make_module: ModuleFactory) -> None:
    catalog = ModuleCatalog([make_module("A", "B"), make_module("B", "C"), make_module("C", "A")])

    with pytest.raises(CycleError) as excinfo:
        catalog.validate()

    assert set(excinfo.value.cycle) == {"A", "B", "C"}


def test_optional_edges_do_not_form_cycles(make_module: ModuleFactory) -> None:
    catalog = ModuleCatalog([make_module("A", "B"), make_module("B", optional=("A",))])

    catalog.validate()

    assert catalog.validated


def test_uniqueness_runs_before_acyclicity(make_module: ModuleFactory) -> None:
    catalog = ModuleCatalog([make_module("A", "B"), make_module("B", "A"), make_module("B")])

    with pytest.raises(DuplicateNameError):
        catalog.validate()


def test_groupless_dependency_from_group_is_legal(make_module: ModuleFactory) -> None:
    catalog = ModuleCatalog([make_module("A")])
    catalog.add_group(ActivationMode.EAGER, None, make_module("B", "A"), name="G")

    catalog.validate()

    assert catalog.validated


def test_dependency_between_groups_is_illegal(make_module: ModuleFactory) -> None:
    catalog = ModuleCatalog()
    catalog.add_group(ActivationMode.EAGER, None, make_module("B", "C"), name="G1")
    catalog.add_group(ActivationMode.EAGER, None, make_module("C"), name="G2")

    with pytest.raises(IllegalDependencyError) as excinfo:
        catalog.validate()

    assert excinfo.value.module_name == "B"
    assert excinfo.value.reason == "cross-group"


def test_groupless_module_cannot_depend_on_group_member(make_module: ModuleFactory) -> None:
    catalog = ModuleCatalog([make_module("A", "B")])
    catalog.add_group(ActivationMode.EAGER, None, make_module("B"))

    with pytest.raises(IllegalDependencyError) as excinfo:
        catalog.validate()

    assert excinfo.value.module_name == "A"


def test_dependency_within_group_is_legal(make_module: ModuleFactory) -> None:
    catalog = ModuleCatalog()
    catalog.add_group(ActivationMode.EAGER, None, make_module("B", "C"), make_module("C"))

    catalog.validate()

    assert catalog.validated


def test_eager_module_cannot_depend_on_on_demand(make_module: ModuleFactory) -> None:
    catalog = ModuleCatalog([make_module("A", "B"), make_module("B", mode=ActivationMode.ON_DEMAND)])

    with pytest.raises(IllegalDependencyError) as excinfo:
        catalog.validate()

    assert excinfo.value.module_name == "A"
    assert excinfo.value.reason == "activation-mode"


def test_on_demand_may_depend_on_on_demand(make_module: ModuleFactory) -> None:
    catalog = ModuleCatalog(
        [
            make_module("A", "B", mode=ActivationMode.ON_DEMAND),
            make_module("B", mode=ActivationMode.ON_DEMAND),
        ]
    )

    catalog.validate()

    assert catalog.validated


def test_transitive_on_demand_dependency_is_rejected(make_module: ModuleFactory) -> None:
    catalog = ModuleCatalog(
        [
            make_module("A", "B"),
            make_module("B", "C"),
            make_module("C", mode=ActivationMode.ON_DEMAND),
        ]
    )

    with pytest.raises(IllegalDependencyError) as excinfo:
        catalog.validate()

    assert excinfo.value.module_name in {"A", "B"}


def test_partition_check_runs_before_activation_check(make_module: ModuleFactory) -> None:
    catalog = ModuleCatalog()
    catalog.add_group(ActivationMode.EAGER, None, make_module("B", "C"))
    catalog.add_group(ActivationMode.ON_DEMAND, None, make_module("C"))

    with pytest.raises(IllegalDependencyError) as excinfo:
        catalog.validate()

    assert excinfo.value.reason == "cross-group"


def test_missing_required_dependency_is_reported(make_module: ModuleFactory) -> None:
    catalog = ModuleCatalog([make_module("A", "Ghost")])

    with pytest.raises(MissingDependencyError) as excinfo:
        catalog.validate()

    assert excinfo.value.module_name == "A"
    assert excinfo.value.dependency == "Ghost"


def test_missing_optional_dependency_is_accepted(make_module: ModuleFactory) -> None:
    catalog = ModuleCatalog([make_module("A", optional=("Ghost",))])

    catalog.validate()

    assert [module.name for module in catalog.complete_list_with_dependencies(catalog.modules)] == ["A"]


def test_missing_dependency_policy_can_be_relaxed(make_module: ModuleFactory) -> None:
    settings = CatalogSettings(require_dependencies=False)
    module = make_module("A", "Ghost")
    catalog = ModuleCatalog([module], settings=settings)

    catalog.validate()

    assert catalog.get_dependent_modules(module) == ()
    assert catalog.complete_list_with_dependencies([module]) == (module,)


def test_relaxed_policy_ignores_missing_names_of_group_members(make_module: ModuleFactory) -> None:
    member = make_module("B", "Ghost")
    catalog = ModuleCatalog([make_module("A")], settings=CatalogSettings(require_dependencies=False))
    catalog.add_group(ActivationMode.EAGER, "bundle", member, name="G")

    catalog.validate()

    assert catalog.validated
    assert catalog.get_dependent_modules(member) == ()
    assert catalog.complete_list_with_dependencies([member]) == (member,)


@pytest.mark.parametrize(
    "names",
    [
        (("A", ()), ("B", ("A",))),
        (("A", ("B",)), ("B", ("A",))),
        (("A", ("A",)),),
        (("A", ()), ("A", ())),
    ],
)
def test_validate_is_idempotent(make_module: ModuleFactory, names: tuple[tuple[str, tuple[str, ...]], ...]) -> None:
    catalog = ModuleCatalog([make_module(name, *deps) for name, deps in names])

    outcomes: list[tuple[type[BaseException] | None, str | None]] = []
    for _ in range(2):
        try:
            catalog.validate()
        except ModularityError as exc:
            outcomes.append((type(exc), exc.module_name))
        else:
            outcomes.append((None, None))

    assert outcomes[0] == outcomes[1]


def test_complete_list_with_dependencies_expands_and_orders(make_module: ModuleFactory) -> None:
    a, b, c, d = make_module("A", "B"), make_module("B", "C"), make_module("C"), make_module("D")
    catalog = ModuleCatalog([a, b, c, d])

    ordered = catalog.complete_list_with_dependencies([a])

    assert set(ordered) == {a, b, c}
    assert ordered == (c, b, a)
    _assert_dependency_order(ordered)


def test_complete_list_with_diamond(make_module: ModuleFactory) -> None:
    catalog = ModuleCatalog(
        [
            make_module("App", "Auth", "Catalog"),
            make_module("Auth", "Core"),
            make_module("Catalog", "Core"),
            make_module("Core"),
            make_module("Unrelated"),
        ]
    )
    seed = [module for module in catalog.modules if module.name == "App"]

    ordered = catalog.complete_list_with_dependencies(seed)

    assert {module.name for module in ordered} == {"App", "Auth", "Catalog", "Core"}
    assert ordered[0].name == "Core"
    assert ordered[-1].name == "App"
    _assert_dependency_order(ordered)


def test_complete_list_respects_boost_between_independent_modules(make_module: ModuleFactory) -> None:
    modules = [make_module("A"), make_module("B"), make_module("C")]
    catalog = ModuleCatalog(modules, boost=BoostOptions(boosts={"C": 1}))

    ordered = catalog.complete_list_with_dependencies(modules)

    assert [module.name for module in ordered] == ["C", "A", "B"]


def test_catalog_accepts_plain_mapping_boost(make_module: ModuleFactory) -> None:
    modules = [make_module("A"), make_module("B")]
    catalog = ModuleCatalog(modules, boost={"B": 5})

    ordered = catalog.complete_list_with_dependencies(modules)

    assert catalog.settings.boost.boosts == {"B": 5.0}
    assert [module.name for module in ordered] == ["B", "A"]


def test_catalog_accepts_priority_list_boost(make_module: ModuleFactory) -> None:
    modules = [make_module("A"), make_module("B"), make_module("C")]
    catalog = ModuleCatalog(modules, boost=["C", "B"])

    ordered = catalog.complete_list_with_dependencies(modules)

    assert [module.name for module in ordered] == ["C", "B", "A"]


def test_catalog_boost_overrides_settings(make_module: ModuleFactory) -> None:
    settings = CatalogSettings(boost=BoostOptions(boosts={"A": 1}))
    catalog = ModuleCatalog([make_module("A"), make_module("B")], boost={"B": 2}, settings=settings)

    assert catalog.settings.boost.boosts == {"B": 2.0}
    assert settings.boost.boosts == {"A": 1.0}


@pytest.mark.parametrize("boost", [5, True, "B", {"B": "high"}])
def test_catalog_rejects_malformed_boost(boost: object) -> None:
    with pytest.raises(ConfigError):
        ModuleCatalog(boost=boost)  # type: ignore[arg-type]


def test_complete_list_requires_valid_catalog(make_module: ModuleFactory) -> None:
    a = make_module("A", "B")
    catalog = ModuleCatalog([a, make_module("B", "A")])

    with pytest.raises(CycleError):
        catalog.complete_list_with_dependencies([a])


def test_complete_list_rejects_none() -> None:
    with pytest.raises(TypeError):
        ModuleCatalog().complete_list_with_dependencies(None)  # type: ignore[arg-type]


def test_get_dependent_modules_validates_first(make_module: ModuleFactory) -> None:
    a = make_module("A", "B")
    catalog = ModuleCatalog([a, make_module("B")])

    dependencies = catalog.get_dependent_modules(a)

    assert [module.name for module in dependencies] == ["B"]
    assert catalog.validated


def test_mutation_after_validation_revalidates(make_module: ModuleFactory) -> None:
    catalog = ModuleCatalog([make_module("A")])
    catalog.validate()

    catalog.add_module(make_module("B", "A"))
    assert catalog.validated

    with pytest.raises(DuplicateNameError):
        catalog.add_module(make_module("A"))
    assert not catalog.validated
    assert len(catalog.modules) == 3


def test_mutation_only_clears_flag_when_revalidation_disabled(make_module: ModuleFactory) -> None:
    catalog = ModuleCatalog([make_module("A")], settings=CatalogSettings(revalidate_on_change=False))
    catalog.validate()

    catalog.add_module(make_module("A"))

    assert not catalog.validated
    with pytest.raises(DuplicateNameError):
        catalog.validate()


def test_mutation_before_validation_does_not_validate(make_module: ModuleFactory) -> None:
    catalog = ModuleCatalog([make_module("A", "Ghost")])

    catalog.add_module(make_module("A"))

    assert not catalog.validated


def test_initialize_loads_once_and_validates(make_module: ModuleFactory) -> None:
    calls: list[int] = []

    def loader(target: ModuleCatalog) -> None:
        calls.append(1)
        target.add_module(make_module("A"))
        target.add_group(ActivationMode.EAGER, None, make_module("B", "A"))

    catalog = ModuleCatalog(loader=loader)
    catalog.initialize()
    catalog.initialize()

    assert calls == [1]
    assert catalog.is_loaded
    assert catalog.validated
    assert [module.name for module in catalog.modules] == ["A", "B"]


def test_reload_clears_and_repopulates(make_module: ModuleFactory) -> None:
    names = [["A"], ["A", "B"]]

    def loader(target: ModuleCatalog) -> None:
        for name in names.pop(0):
            target.add_module(make_module(name))

    catalog = ModuleCatalog(loader=loader)
    catalog.initialize()
    catalog.reload()

    assert [module.name for module in catalog.modules] == ["A", "B"]
    assert catalog.validated


def test_initialize_propagates_validation_errors(make_module: ModuleFactory) -> None:
    def loader(target: ModuleCatalog) -> None:
        target.add_module(make_module("A", "Ghost"))

    catalog = ModuleCatalog(loader=loader)

    with pytest.raises(MissingDependencyError):
        catalog.initialize()
    assert catalog.is_loaded


def test_add_item_rejects_unknown_types() -> None:
    with pytest.raises(TypeError):
        ModuleCatalog().add_item("A")  # type: ignore[arg-type]


def test_add_item_accepts_groups(make_module: ModuleFactory) -> None:
    group = GroupDescriptor(ActivationMode.ON_DEMAND, "ref", "G", [make_module("A")])

    catalog = ModuleCatalog().add_item(group)

    assert catalog.groups == (group,)
    assert catalog.modules[0].activation_mode is ActivationMode.ON_DEMAND
