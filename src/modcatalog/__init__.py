# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Module catalog validation and dependency ordering."""

from __future__ import annotations

from .activation import ActivationPlan, plan_activation
from .catalog import CatalogLoader, ModuleCatalog
from .config import BoostOptions, CatalogSettings, ConfigError, load_settings
from .discovery import EntryPointLoader, ManifestDirectoryLoader, chain_loaders, modules_loader
from .errors import (
    CycleError,
    DuplicateNameError,
    IllegalDependencyError,
    ManifestError,
    MissingDependencyError,
    ModularityError,
)
from .manifest import ManifestDependency, ModuleManifest, parse_manifest
from .models import ActivationMode, CatalogItem, GroupDescriptor, ModuleDescriptor, ModuleState
from .solver import DependencySolver

__all__ = [
    "ActivationMode",
    "ActivationPlan",
    "BoostOptions",
    "CatalogItem",
    "CatalogLoader",
    "CatalogSettings",
    "ConfigError",
    "CycleError",
    "DependencySolver",
    "DuplicateNameError",
    "EntryPointLoader",
    "GroupDescriptor",
    "IllegalDependencyError",
    "ManifestDependency",
    "ManifestDirectoryLoader",
    "ManifestError",
    "MissingDependencyError",
    "ModularityError",
    "ModuleCatalog",
    "ModuleDescriptor",
    "ModuleManifest",
    "ModuleState",
    "chain_loaders",
    "load_settings",
    "modules_loader",
    "parse_manifest",
    "plan_activation",
]
