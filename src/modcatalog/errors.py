# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Exceptions raised while validating and ordering a module catalog."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final, Literal

IllegalDependencyReason = Literal["cross-group", "activation-mode"]
CROSS_GROUP: Final[IllegalDependencyReason] = "cross-group"
ACTIVATION_MODE: Final[IllegalDependencyReason] = "activation-mode"


class ModularityError(RuntimeError):
    """Base class for structural errors detected in a module catalog."""

    def __init__(self, module_name: str | None, message: str) -> None:
        """Create the error for ``module_name`` with a human-readable ``message``.

        Args:
            module_name: Name of the offending module, when one can be singled out.
            message: Description suitable for presentation to an operator.
        """

        super().__init__(message)
        self.module_name = module_name
        self.message = message


class DuplicateNameError(ModularityError):
    """Raised when the same module name is registered more than once."""

    def __init__(self, module_name: str) -> None:
        """Create the error for the duplicated ``module_name``."""

        super().__init__(
            module_name,
            f"A duplicated module with name {module_name} has been found by the loader.",
        )


class CycleError(ModularityError):
    """Raised when required dependencies form a cycle.

    ``cycle`` lists the distinct members in depends-on order: every entry
    depends on the one that follows it and the last entry depends on the first.
    """

    def __init__(self, cycle: Sequence[str]) -> None:
        """Create the error for ``cycle``.

        Args:
            cycle: Cycle members in depends-on order.

        Raises:
            ValueError: If ``cycle`` is empty.
        """

        members = tuple(cycle)
        if not members:
            raise ValueError("cycle must contain at least one module name")
        path = " -> ".join((*members, members[0]))
        super().__init__(members[0], f"At least one cyclic dependency has been found: {path}")
        self.cycle = members


class IllegalDependencyError(ModularityError):
    """Raised when a dependency crosses a boundary it must not cross."""

    def __init__(self, module_name: str, message: str, *, reason: IllegalDependencyReason) -> None:
        """Create the error for ``module_name`` tagged with the broken ``reason``."""

        super().__init__(module_name, message)
        self.reason = reason


class MissingDependencyError(ModularityError):
    """Raised when a required dependency is not present in the catalog."""

    def __init__(self, module_name: str, dependency: str) -> None:
        """Create the error for ``module_name`` requiring the absent ``dependency``."""

        super().__init__(
            module_name,
            f"Module {module_name} depends on module {dependency}, which is not registered in the catalog.",
        )
        self.dependency = dependency


class ManifestError(ValueError):
    """Raised when a module manifest document is malformed."""


__all__ = [
    "ACTIVATION_MODE",
    "CROSS_GROUP",
    "CycleError",
    "DuplicateNameError",
    "IllegalDependencyError",
    "IllegalDependencyReason",
    "ManifestError",
    "MissingDependencyError",
    "ModularityError",
]
