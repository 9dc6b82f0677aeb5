# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for catalog validation and load ordering."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

_TOOL_TABLE: Final[str] = "tool"
_SECTION: Final[str] = "modcatalog"


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class BoostOptions(BaseModel):
    """Priority hints used to break ties between dependency-equivalent modules."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    boosts: dict[str, float] = Field(default_factory=dict)

    def boost_for(self, name: str) -> float:
        """Return the boost configured for ``name`` (``0`` when absent)."""

        return self.boosts.get(name, 0.0)

    @classmethod
    def from_sequence(cls, names: Sequence[str]) -> BoostOptions:
        """Build boosts from a priority list where earlier names rank higher.

        Args:
            names: Module names ordered from most to least preferred. Repeated
                names keep their first (highest) position.

        Returns:
            BoostOptions: Options assigning descending boosts to ``names``.
        """

        boosts: dict[str, float] = {}
        total = len(names)
        for index, name in enumerate(names):
            boosts.setdefault(name, float(total - index))
        return cls(boosts=boosts)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | Sequence[str] | BoostOptions | None) -> BoostOptions:
        """Build boosts from either a ``name -> boost`` mapping or a priority list.

        Args:
            data: Mapping of module names to boosts, a priority list of module
                names, an existing :class:`BoostOptions`, or ``None``.

        Returns:
            BoostOptions: Validated boost options.

        Raises:
            ConfigError: If ``data`` has an unsupported shape or invalid values.
        """

        if data is None:
            return cls()
        if isinstance(data, BoostOptions):
            return data.model_copy(deep=True)
        if isinstance(data, str) or not isinstance(data, (Mapping, Sequence)):
            raise ConfigError(
                f"boost must be a table or a list of module names, not {type(data).__name__}",
            )
        try:
            if isinstance(data, Mapping):
                return cls(boosts=dict(data))
            return cls.from_sequence(list(data))
        except ValidationError as exc:
            raise ConfigError(f"invalid boost options: {exc}") from exc


class CatalogSettings(BaseModel):
    """Behavioural switches for :class:`modcatalog.catalog.ModuleCatalog`."""

    model_config = ConfigDict(validate_assignment=True)

    require_dependencies: bool = True
    revalidate_on_change: bool = True
    boost: BoostOptions = Field(default_factory=BoostOptions)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> CatalogSettings:
        """Return settings parsed from a plain mapping.

        Args:
            data: Mapping such as the ``[tool.modcatalog]`` table of a TOML file.

        Returns:
            CatalogSettings: Validated settings.

        Raises:
            ConfigError: If ``data`` contains invalid values.
        """

        payload = dict(data)
        raw_boost = payload.pop("boost", None)
        try:
            boost = BoostOptions.from_mapping(raw_boost)
            return cls(boost=boost, **payload)
        except ValidationError as exc:
            raise ConfigError(f"invalid catalog settings: {exc}") from exc


def load_settings(path: Path) -> CatalogSettings:
    """Load :class:`CatalogSettings` from a TOML document.

    The ``[tool.modcatalog]`` table is used when present so the settings can
    live in ``pyproject.toml``; otherwise the document root is read.

    Args:
        path: Path to the TOML file.

    Returns:
        CatalogSettings: Parsed settings.

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values.
    """

    try:
        with path.open("rb") as stream:
            document = tomllib.load(stream)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: failed to parse TOML") from exc

    tool_table: Any = document.get(_TOOL_TABLE, {})
    if not isinstance(tool_table, Mapping):
        raise ConfigError(f"{path}: [{_TOOL_TABLE}] must be a table")
    section: Any = tool_table.get(_SECTION)
    if section is None:
        section = document
    if not isinstance(section, Mapping):
        raise ConfigError(f"{path}: [{_TOOL_TABLE}.{_SECTION}] must be a table")
    return CatalogSettings.from_mapping(section)


__all__ = ["BoostOptions", "CatalogSettings", "ConfigError", "load_settings"]
