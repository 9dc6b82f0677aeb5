# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Activation planning built on top of a validated catalog."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .catalog import ModuleCatalog
from .models import ModuleDescriptor, ModuleState

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ActivationPlan:
    """Modules to activate, in order, and the ones held back because of errors."""

    ready: tuple[ModuleDescriptor, ...]
    skipped: tuple[ModuleDescriptor, ...]

    def names(self) -> tuple[str, ...]:
        """Return the names of the ready modules in activation order."""

        return tuple(module.name for module in self.ready)

    def __bool__(self) -> bool:
        """Return ``True`` when at least one module is ready."""

        return bool(self.ready)


def plan_activation(catalog: ModuleCatalog) -> ActivationPlan:
    """Return the activation order for modules that have not started yet.

    The catalog is initialised first when it is not validated. Modules in
    :attr:`ModuleState.NOT_STARTED` are expanded with their dependencies and
    sorted; modules whose ``errors`` are non-empty are kept out of ``ready``.

    Args:
        catalog: Catalog to plan from.

    Returns:
        ActivationPlan: Ordered ready modules and the skipped ones.

    Raises:
        ModularityError: When the catalog is invalid.
    """

    if not catalog.validated:
        catalog.initialize()
    pending = [module for module in catalog.modules if module.state is ModuleState.NOT_STARTED]
    ordered = catalog.complete_list_with_dependencies(pending)
    ready: list[ModuleDescriptor] = []
    skipped: list[ModuleDescriptor] = []
    for module in ordered:
        if module.has_errors:
            LOGGER.warning("module %s has loading errors and will not be activated: %s", module.name, module.errors)
            skipped.append(module)
        else:
            ready.append(module)
    return ActivationPlan(ready=tuple(ready), skipped=tuple(skipped))


__all__ = ["ActivationPlan", "plan_activation"]
