# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Manifest documents describing modules, converted into catalog descriptors."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from packaging.version import InvalidVersion, Version
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ManifestError
from .models import ActivationMode, ModuleDescriptor


def _normalise_version(value: str | None) -> str | None:
    """Return ``value`` in canonical PEP 440 form.

    Raises:
        ValueError: If ``value`` is not a valid version string.
    """

    if value is None:
        return None
    try:
        return str(Version(value))
    except InvalidVersion as exc:
        raise ValueError(f"invalid version '{value}'") from exc


class ManifestDependency(BaseModel):
    """Dependency entry declared by a module manifest."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1)
    version: str | None = None
    optional: bool = False

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: str | None) -> str | None:
        """Normalise the declared version."""

        return _normalise_version(value)


class ModuleManifest(BaseModel):
    """Module manifest as published next to a module's implementation."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str = Field(min_length=1)
    type_ref: str = Field(default="", alias="type")
    version: str | None = None
    activation: ActivationMode = ActivationMode.EAGER
    ref: str | None = None
    group: str | None = None
    dependencies: tuple[ManifestDependency, ...] = ()

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: str | None) -> str | None:
        """Normalise the declared version."""

        return _normalise_version(value)

    @field_validator("activation", mode="before")
    @classmethod
    def _coerce_activation(cls, value: Any) -> Any:
        """Accept textual activation modes such as ``"on-demand"``."""

        if isinstance(value, str):
            return ActivationMode.from_string(value)
        return value

    @field_validator("dependencies", mode="before")
    @classmethod
    def _coerce_dependencies(cls, value: Any) -> Any:
        """Expand bare dependency names into required dependency entries."""

        if isinstance(value, list | tuple):
            return tuple({"id": entry} if isinstance(entry, str) else entry for entry in value)
        return value

    def to_descriptor(self) -> ModuleDescriptor:
        """Return a :class:`ModuleDescriptor` carrying this manifest's data."""

        return ModuleDescriptor(
            name=self.id,
            type_ref=self.type_ref,
            depends_on=[dependency.id for dependency in self.dependencies],
            activation_mode=self.activation,
            optional_dependencies=frozenset(dep.id for dep in self.dependencies if dep.optional),
            ref=self.ref,
            version=self.version,
        )


def parse_manifest(data: Mapping[str, Any], *, source: Path | str | None = None) -> ModuleManifest:
    """Validate ``data`` as a module manifest.

    Args:
        data: Raw manifest mapping.
        source: Optional origin used in error messages.

    Returns:
        ModuleManifest: Validated manifest.

    Raises:
        ManifestError: If ``data`` is not a valid manifest.
    """

    if not isinstance(data, Mapping):
        raise ManifestError(f"{source or '<manifest>'}: expected a mapping")
    try:
        return ModuleManifest.model_validate(dict(data))
    except ValidationError as exc:
        raise ManifestError(f"{source or '<manifest>'}: {exc}") from exc


__all__ = ["ManifestDependency", "ModuleManifest", "parse_manifest"]
