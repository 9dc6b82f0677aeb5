# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Mutable module catalog with validation and dependency expansion."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import TypeAlias

from .config import BoostOptions, CatalogSettings
from .models import ActivationMode, CatalogItem, GroupDescriptor, ModuleDescriptor, flatten_items
from .validation import run_pipeline, solve_dependencies

LOGGER = logging.getLogger(__name__)

CatalogLoader: TypeAlias = Callable[["ModuleCatalog"], None]


class ModuleCatalog:
    """Holds the modules an application can activate and keeps them consistent.

    Items are appended as either groupless :class:`ModuleDescriptor` values or
    :class:`GroupDescriptor` partitions. Structural problems are not rejected
    at insertion; :meth:`validate` reports them, in a fixed order:

    * duplicated module names,
    * missing required dependencies,
    * dependency cycles,
    * dependencies crossing group boundaries,
    * eager modules depending on on-demand modules.

    Every insertion clears the validity flag. When the catalog had already
    been validated it is re-validated straight away, so an invalid state
    surfaces from the mutation that introduced it.
    """

    def __init__(
        self,
        modules: Iterable[ModuleDescriptor] = (),
        *,
        boost: BoostOptions | Mapping[str, float] | Sequence[str] | None = None,
        settings: CatalogSettings | None = None,
        loader: CatalogLoader | None = None,
    ) -> None:
        """Create a catalog.

        Args:
            modules: Initial groupless modules.
            boost: Priority hints for ordering, either as :class:`BoostOptions`,
                a ``name -> boost`` mapping or a priority list of names.
                Overrides ``settings.boost``.
            settings: Behavioural switches; defaults apply when omitted.
            loader: Discovery hook invoked by :meth:`load` to populate the catalog.

        Raises:
            ConfigError: If ``boost`` cannot be converted to :class:`BoostOptions`.
        """

        resolved = settings.model_copy(deep=True) if settings is not None else CatalogSettings()
        if boost is not None:
            resolved.boost = BoostOptions.from_mapping(boost)
        self._settings = resolved
        self._loader = loader
        self._items: list[CatalogItem] = []
        self._validated = False
        self._loaded = False
        for module in modules:
            self.add_module(module)

    # ------------------------------------------------------------------
    # Views

    @property
    def settings(self) -> CatalogSettings:
        """Return the behavioural switches in effect."""

        return self._settings

    @property
    def items(self) -> tuple[CatalogItem, ...]:
        """Return catalog items in insertion order."""

        return tuple(self._items)

    @property
    def modules(self) -> tuple[ModuleDescriptor, ...]:
        """Return every module, groupless ones first, then group members."""

        return flatten_items(self._items)

    @property
    def groups(self) -> tuple[GroupDescriptor, ...]:
        """Return group items in insertion order."""

        return tuple(item for item in self._items if isinstance(item, GroupDescriptor))

    @property
    def groupless_modules(self) -> tuple[ModuleDescriptor, ...]:
        """Return modules appended outside any group."""

        return tuple(item for item in self._items if isinstance(item, ModuleDescriptor))

    @property
    def validated(self) -> bool:
        """Return whether the current contents passed :meth:`validate`."""

        return self._validated

    @property
    def is_loaded(self) -> bool:
        """Return whether :meth:`load` has run since the last reload."""

        return self._loaded

    def __len__(self) -> int:
        """Return the number of modules, counting group members."""

        return len(self.modules)

    def __contains__(self, name: object) -> bool:
        """Return whether a module named ``name`` is registered."""

        return any(module.name == name for module in self.modules)

    def get(self, name: str) -> ModuleDescriptor | None:
        """Return the first module registered under ``name``, if any."""

        return next((module for module in self.modules if module.name == name), None)

    # ------------------------------------------------------------------
    # Mutation

    def add_module(self, module: ModuleDescriptor) -> ModuleCatalog:
        """Append a groupless ``module``.

        Args:
            module: Descriptor to append.

        Returns:
            ModuleCatalog: The catalog, for chaining.

        Raises:
            ModularityError: When the catalog was validated and the addition
                makes it invalid. The module stays in the catalog.
        """

        self._append(module)
        return self

    def add(
        self,
        name: str,
        type_ref: str,
        *depends_on: str,
        activation_mode: ActivationMode = ActivationMode.EAGER,
        ref: str | None = None,
    ) -> ModuleCatalog:
        """Build a groupless module from its parts and append it.

        Args:
            name: Unique module name.
            type_ref: Reference to the implementing unit.
            *depends_on: Names of the modules this module requires.
            activation_mode: When the module must be ready.
            ref: Location of the implementing unit.

        Returns:
            ModuleCatalog: The catalog, for chaining.
        """

        module = ModuleDescriptor(
            name=name,
            type_ref=type_ref,
            depends_on=list(depends_on),
            activation_mode=activation_mode,
            ref=ref,
        )
        return self.add_module(module)

    def add_group(
        self,
        activation_mode: ActivationMode,
        ref: str | None,
        *modules: ModuleDescriptor,
        name: str | None = None,
    ) -> ModuleCatalog:
        """Create a group holding ``modules`` and append it.

        Members take the group's activation mode and ref.

        Args:
            activation_mode: Activation mode shared by the members.
            ref: Placement reference shared by the members.
            *modules: Member descriptors.
            name: Optional group name used in diagnostics.

        Returns:
            ModuleCatalog: The catalog, for chaining.
        """

        group = GroupDescriptor(activation_mode=activation_mode, ref=ref, name=name, modules=list(modules))
        self._append(group)
        return self

    def add_item(self, item: CatalogItem) -> ModuleCatalog:
        """Append an already-built module or group descriptor."""

        if not isinstance(item, (ModuleDescriptor, GroupDescriptor)):
            raise TypeError(f"unsupported catalog item: {item!r}")
        self._append(item)
        return self

    def clear(self) -> None:
        """Remove every item; the catalog must be validated again afterwards."""

        self._items.clear()
        self._validated = False

    # ------------------------------------------------------------------
    # Lifecycle

    def load(self) -> None:
        """Populate the catalog through the discovery hook, if one was given."""

        if self._loader is not None:
            LOGGER.debug("loading module catalog via %r", self._loader)
            self._loader(self)
        self._loaded = True

    def initialize(self) -> None:
        """Load the catalog once and validate it.

        Raises:
            ModularityError: When validation fails.
        """

        if not self._loaded:
            self.load()
        self.validate()

    def reload(self) -> None:
        """Discard every item, then load and validate again."""

        self._loaded = False
        self.clear()
        self.initialize()

    def validate(self) -> None:
        """Run the validation pipeline and mark the catalog valid on success.

        Raises:
            DuplicateNameError: When a module name is registered twice.
            MissingDependencyError: When a required dependency is not registered.
            CycleError: When required dependencies form a cycle.
            IllegalDependencyError: When a dependency crosses a group boundary
                or an eager module depends on an on-demand one.
        """

        self._validated = False
        run_pipeline(self)
        self._validated = True
        LOGGER.debug("module catalog validated (%d modules)", len(self.modules))

    # ------------------------------------------------------------------
    # Queries

    def get_dependent_modules(self, module: ModuleDescriptor) -> tuple[ModuleDescriptor, ...]:
        """Return catalog modules named in ``module.depends_on``.

        Names not present in the catalog do not appear in the result; when
        required dependencies are enforced they cannot reach this point.

        Args:
            module: Module whose dependencies are requested.

        Returns:
            tuple[ModuleDescriptor, ...]: Dependencies in catalog order.
        """

        self._ensure_validated()
        return self._dependent_modules(module)

    def complete_list_with_dependencies(
        self,
        modules: Iterable[ModuleDescriptor],
    ) -> tuple[ModuleDescriptor, ...]:
        """Return ``modules`` plus everything they depend on, in load order.

        Args:
            modules: Seed modules.

        Returns:
            tuple[ModuleDescriptor, ...]: Transitive closure of ``modules``
            sorted so dependencies come before dependents.

        Raises:
            TypeError: If ``modules`` is ``None``.
            ModularityError: When the catalog is not valid.
        """

        if modules is None:
            raise TypeError("modules must not be None")
        self._ensure_validated()

        complete: list[ModuleDescriptor] = []
        seen: set[int] = set()
        pending: deque[ModuleDescriptor] = deque()
        for module in modules:
            if id(module) not in seen:
                seen.add(id(module))
                pending.append(module)
        while pending:
            module = pending.popleft()
            for dependency in self._dependent_modules(module):
                if id(dependency) not in seen:
                    seen.add(id(dependency))
                    pending.append(dependency)
            complete.append(module)
        return self.sort(complete)

    def sort(self, modules: Iterable[ModuleDescriptor]) -> tuple[ModuleDescriptor, ...]:
        """Return ``modules`` ordered so that dependencies come first."""

        candidates = tuple(modules)
        by_name = {module.name: module for module in candidates}
        ordered = solve_dependencies(candidates, boost=self._settings.boost)
        return tuple(by_name[name] for name in ordered if name in by_name)

    # ------------------------------------------------------------------
    # Internal helpers

    def _append(self, item: CatalogItem) -> None:
        """Store ``item`` and signal the change."""

        self._items.append(item)
        self._items_changed()

    def _items_changed(self) -> None:
        """Invalidate the catalog and re-validate it when it was valid before."""

        was_validated = self._validated
        self._validated = False
        if was_validated and self._settings.revalidate_on_change:
            self.validate()

    def _ensure_validated(self) -> None:
        """Validate the catalog unless it is already known to be valid."""

        if not self._validated:
            self.validate()

    def _dependent_modules(self, module: ModuleDescriptor) -> tuple[ModuleDescriptor, ...]:
        """Return catalog modules named by ``module`` without validating first."""

        wanted = set(module.depends_on)
        return tuple(candidate for candidate in self.modules if candidate.name in wanted)


__all__ = ["CatalogLoader", "ModuleCatalog"]
