# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Ordered structural checks run by :meth:`ModuleCatalog.validate`.

Each check inspects the catalog's current snapshot and raises on the first
offending module. The order of :data:`VALIDATION_PIPELINE` matters: later
checks assume the earlier ones hold (names are unique before edges are keyed
by name, the graph is acyclic before closures are inspected).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Final, TypeAlias

from .config import BoostOptions
from .errors import (
    ACTIVATION_MODE,
    CROSS_GROUP,
    DuplicateNameError,
    IllegalDependencyError,
    MissingDependencyError,
)
from .models import ActivationMode, ModuleDescriptor
from .solver import DependencySolver

if TYPE_CHECKING:
    from .catalog import ModuleCatalog

LOGGER = logging.getLogger(__name__)

CatalogCheck: TypeAlias = Callable[["ModuleCatalog"], None]


def validate_unique_modules(catalog: ModuleCatalog) -> None:
    """Ensure every module name occurs once across groups and groupless modules.

    Raises:
        DuplicateNameError: For the first name registered more than once.
    """

    seen: set[str] = set()
    for module in catalog.modules:
        if module.name in seen:
            raise DuplicateNameError(module.name)
        seen.add(module.name)


def validate_dependencies_present(catalog: ModuleCatalog) -> None:
    """Ensure every required dependency names a module in the catalog.

    Optional dependencies may be absent. The check is skipped when the
    catalog settings disable ``require_dependencies``.

    Raises:
        MissingDependencyError: For the first unresolvable required dependency.
    """

    if not catalog.settings.require_dependencies:
        return
    available = {module.name for module in catalog.modules}
    for module in catalog.modules:
        for dependency in module.required_dependencies:
            if dependency not in available:
                raise MissingDependencyError(module.name, dependency)


def validate_dependency_graph(catalog: ModuleCatalog) -> None:
    """Ensure required dependencies are acyclic by solving the full graph.

    Raises:
        CycleError: When the required dependency edges contain a cycle.
    """

    solve_dependencies(catalog.modules, boost=catalog.settings.boost)


def validate_cross_group_dependencies(catalog: ModuleCatalog) -> None:
    """Ensure no dependency crosses from one partition into another.

    A groupless module can only depend on other groupless modules. A module
    within a group can depend on modules of the same group and on groupless
    modules.

    Raises:
        IllegalDependencyError: For the first module depending on a catalog
            module outside its partition.
    """

    available = {module.name for module in catalog.modules}
    groupless = catalog.groupless_modules
    _validate_partition(available, groupless)
    for group in catalog.groups:
        _validate_partition(available, (*groupless, *group.modules))


def validate_activation_modes(catalog: ModuleCatalog) -> None:
    """Ensure eager modules never depend on on-demand modules.

    Only direct required dependencies are inspected; because every module is
    checked, an eager module reaching an on-demand module through a chain of
    eager modules is reported at the last eager link of that chain.

    Raises:
        IllegalDependencyError: For the first eager module with an on-demand dependency.
    """

    by_name = {module.name: module for module in catalog.modules}
    for module in catalog.modules:
        if module.activation_mode is not ActivationMode.EAGER:
            continue
        for dependency in module.required_dependencies:
            target = by_name.get(dependency)
            if target is not None and target.activation_mode is ActivationMode.ON_DEMAND:
                raise IllegalDependencyError(
                    module.name,
                    f"Module {module.name} is marked for eager activation when the application starts, "
                    f"but it depends on module {target.name}, which is marked for on-demand activation. "
                    "Mark the dependency for eager activation or make this module on-demand as well.",
                    reason=ACTIVATION_MODE,
                )


VALIDATION_PIPELINE: Final[tuple[CatalogCheck, ...]] = (
    validate_unique_modules,
    validate_dependencies_present,
    validate_dependency_graph,
    validate_cross_group_dependencies,
    validate_activation_modes,
)


def run_pipeline(catalog: ModuleCatalog, checks: Sequence[CatalogCheck] = VALIDATION_PIPELINE) -> None:
    """Run ``checks`` in order, stopping at the first one that raises.

    Args:
        catalog: Catalog under validation.
        checks: Ordered checks to run.
    """

    for check in checks:
        LOGGER.debug("running catalog check %s", check.__name__)
        check(catalog)


def solve_dependencies(
    modules: Iterable[ModuleDescriptor],
    *,
    boost: BoostOptions | Mapping[str, float] | None = None,
) -> tuple[str, ...]:
    """Return module names in load order using a fresh solver.

    Every module is registered as a node and every required dependency as an
    edge. Optional dependencies never become edges.

    Args:
        modules: Modules to order.
        boost: Priority hints forwarded to :class:`DependencySolver`.

    Returns:
        tuple[str, ...]: Names in dependency order; empty when ``modules`` is empty.

    Raises:
        CycleError: When the required dependency edges contain a cycle.
    """

    solver = DependencySolver(boost)
    for module in modules:
        solver.add_node(module.name)
        for dependency in module.required_dependencies:
            solver.add_edge(module.name, dependency)
    if solver.node_count == 0:
        return ()
    return solver.solve()


def _validate_partition(available: set[str], partition: Sequence[ModuleDescriptor]) -> None:
    """Raise when a module of ``partition`` depends on a catalog module outside it.

    Args:
        available: Every module name in the catalog.
        partition: Modules allowed to depend on each other.

    Raises:
        IllegalDependencyError: For the first module with an outside dependency.
    """

    names = {module.name for module in partition}
    for module in partition:
        # names missing from the whole catalog belong to the missing-dependency check
        outside = [dep for dep in module.depends_on if dep not in names and dep in available]
        if outside:
            raise IllegalDependencyError(
                module.name,
                f"Module {module.name} depends on other modules that don't belong to the same group: "
                f"{', '.join(outside)}.",
                reason=CROSS_GROUP,
            )


__all__ = [
    "VALIDATION_PIPELINE",
    "CatalogCheck",
    "run_pipeline",
    "solve_dependencies",
    "validate_activation_modes",
    "validate_cross_group_dependencies",
    "validate_dependencies_present",
    "validate_dependency_graph",
    "validate_unique_modules",
]
