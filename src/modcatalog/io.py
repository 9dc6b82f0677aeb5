# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""I/O helpers for reading module manifest documents."""

from __future__ import annotations

import json
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from .errors import ManifestError

JSON_SUFFIXES: Final[frozenset[str]] = frozenset({".json"})
TOML_SUFFIXES: Final[frozenset[str]] = frozenset({".toml"})


def load_document(path: Path) -> Mapping[str, Any]:
    """Load a JSON or TOML manifest from disk.

    Args:
        path: Filesystem path to the document; the suffix selects the parser.

    Returns:
        Mapping[str, Any]: Parsed document.

    Raises:
        FileNotFoundError: If the document does not exist.
        ManifestError: If the document cannot be parsed, uses an unsupported
            suffix, or is not an object at the top level.
    """

    if not path.exists():
        raise FileNotFoundError(path)
    suffix = path.suffix.lower()
    if suffix in JSON_SUFFIXES:
        with path.open("r", encoding="utf-8") as stream:
            try:
                payload = json.load(stream)
            except json.JSONDecodeError as exc:
                raise ManifestError(f"{path}: failed to parse manifest JSON") from exc
    elif suffix in TOML_SUFFIXES:
        with path.open("rb") as stream:
            try:
                payload = tomllib.load(stream)
            except tomllib.TOMLDecodeError as exc:
                raise ManifestError(f"{path}: failed to parse manifest TOML") from exc
    else:
        raise ManifestError(f"{path}: unsupported manifest format '{path.suffix}'")
    if not isinstance(payload, Mapping):
        raise ManifestError(f"{path}: expected a JSON object")
    return payload


__all__ = ["load_document"]
