# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Descriptors stored in a module catalog."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import TypeAlias


class ActivationMode(str, Enum):
    """When a module must be ready for use."""

    EAGER = "eager"
    ON_DEMAND = "on_demand"

    @classmethod
    def from_string(cls, value: str) -> ActivationMode:
        """Return the mode matching ``value`` (case and separator insensitive).

        Args:
            value: Textual mode such as ``"eager"``, ``"on-demand"`` or ``"OnDemand"``.

        Returns:
            ActivationMode: Enum member associated with ``value``.

        Raises:
            ValueError: If ``value`` does not name a known mode.
        """

        normalized = value.strip().lower().replace("-", "_")
        aliases = {"ondemand": cls.ON_DEMAND, "when_available": cls.EAGER, "whenavailable": cls.EAGER}
        if normalized in aliases:
            return aliases[normalized]
        return cls(normalized)


class ModuleState(str, Enum):
    """Lifecycle tag maintained by the activation collaborator."""

    NOT_STARTED = "not_started"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(slots=True, eq=False)
class ModuleDescriptor:
    """A node in the dependency graph.

    Descriptors compare by identity: two descriptors sharing a name are still
    distinct catalog entries, which is what the uniqueness check reports.
    """

    name: str
    type_ref: str = ""
    depends_on: list[str] = field(default_factory=list)
    activation_mode: ActivationMode = ActivationMode.EAGER
    optional_dependencies: frozenset[str] = frozenset()
    ref: str | None = None
    version: str | None = None
    state: ModuleState = ModuleState.NOT_STARTED
    errors: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Normalise ``depends_on`` to a list and the optional names to a frozenset."""

        self.depends_on = list(self.depends_on)
        self.optional_dependencies = frozenset(self.optional_dependencies)

    @property
    def required_dependencies(self) -> tuple[str, ...]:
        """Return non-optional dependency names, de-duplicated in declaration order."""

        return tuple(dict.fromkeys(dep for dep in self.depends_on if dep not in self.optional_dependencies))

    @property
    def has_errors(self) -> bool:
        """Return ``True`` when external loading reported problems."""

        return bool(self.errors)

    def is_optional(self, dependency: str) -> bool:
        """Return whether ``dependency`` is declared optional for this module."""

        return dependency in self.optional_dependencies


@dataclass(slots=True, eq=False)
class GroupDescriptor:
    """Named partition of modules sharing activation mode and placement."""

    activation_mode: ActivationMode = ActivationMode.EAGER
    ref: str | None = None
    name: str | None = None
    modules: list[ModuleDescriptor] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Re-add the initial members so they take the group settings."""

        members = list(self.modules)
        self.modules = []
        self.extend(members)

    def add(self, module: ModuleDescriptor) -> None:
        """Append ``module`` and apply the group's activation mode and ref to it."""

        module.activation_mode = self.activation_mode
        module.ref = self.ref
        self.modules.append(module)

    def extend(self, modules: Iterable[ModuleDescriptor]) -> None:
        """Add each of ``modules`` in order."""

        for module in modules:
            self.add(module)

    def __iter__(self) -> Iterator[ModuleDescriptor]:
        """Iterate over the members in insertion order."""

        return iter(self.modules)

    def __len__(self) -> int:
        """Return the number of members."""

        return len(self.modules)


CatalogItem: TypeAlias = ModuleDescriptor | GroupDescriptor


def flatten_items(items: Iterable[CatalogItem]) -> tuple[ModuleDescriptor, ...]:
    """Return groupless modules followed by every group's members.

    Args:
        items: Catalog items in insertion order.

    Returns:
        tuple[ModuleDescriptor, ...]: Flattened modules. Nothing is
        de-duplicated; repeated entries are left for validation to report.
    """

    groupless: list[ModuleDescriptor] = []
    grouped: list[ModuleDescriptor] = []
    for item in items:
        match item:
            case ModuleDescriptor():
                groupless.append(item)
            case GroupDescriptor(modules=members):
                grouped.extend(members)
    return (*groupless, *grouped)


__all__ = [
    "ActivationMode",
    "CatalogItem",
    "GroupDescriptor",
    "ModuleDescriptor",
    "ModuleState",
    "flatten_items",
]
