# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Discovery hooks that populate a :class:`ModuleCatalog`.

Each hook is a callable accepting the catalog and appending descriptors to
it. The catalog invokes its hook from :meth:`ModuleCatalog.load`, and again
after clearing itself on :meth:`ModuleCatalog.reload`, so hooks always
repopulate from scratch.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from importlib import metadata
from importlib.metadata import EntryPoint, EntryPoints
from pathlib import Path
from typing import TYPE_CHECKING, Final, TypeAlias, cast

from .io import load_document
from .manifest import ModuleManifest, parse_manifest
from .models import CatalogItem, GroupDescriptor

if TYPE_CHECKING:
    from .catalog import CatalogLoader, ModuleCatalog

LOGGER = logging.getLogger(__name__)

MODULES_ENTRY_POINT_GROUP: Final[str] = "modcatalog.modules"
DEFAULT_MANIFEST_PATTERN: Final[str] = "*/module.json"

ModuleFactory: TypeAlias = Callable[[], Iterable[CatalogItem]]
_EntryPointSource: TypeAlias = EntryPoints | Mapping[str, Sequence[EntryPoint]]


@dataclass(slots=True)
class ManifestDirectoryLoader:
    """Populate a catalog from manifest files found under ``root``.

    Manifests naming a ``group`` are collected into one
    :class:`GroupDescriptor` per group name; the group's activation mode and
    ref come from its first member (in sorted path order).
    """

    root: Path
    pattern: str = DEFAULT_MANIFEST_PATTERN

    def manifest_paths(self) -> tuple[Path, ...]:
        """Return manifest paths under ``root`` in a stable order."""

        if not self.root.is_dir():
            return ()
        return tuple(sorted(path for path in self.root.glob(self.pattern) if path.is_file()))

    def load_manifests(self) -> tuple[ModuleManifest, ...]:
        """Parse every manifest under ``root``.

        Raises:
            ManifestError: If a document is unreadable or invalid.
        """

        return tuple(parse_manifest(load_document(path), source=path) for path in self.manifest_paths())

    def __call__(self, catalog: ModuleCatalog) -> None:
        """Append every manifest under ``root``, groupless modules first."""

        manifests = self.load_manifests()
        groups: dict[str, GroupDescriptor] = {}
        for manifest in manifests:
            descriptor = manifest.to_descriptor()
            if manifest.group is None:
                catalog.add_module(descriptor)
                continue
            group = groups.get(manifest.group)
            if group is None:
                group = GroupDescriptor(
                    activation_mode=manifest.activation,
                    ref=manifest.ref,
                    name=manifest.group,
                )
                groups[manifest.group] = group
            group.add(descriptor)
        for group in groups.values():
            catalog.add_item(group)
        LOGGER.debug(
            "loaded %d manifests (%d groups) from %s",
            len(manifests),
            len(groups),
            self.root,
        )


@dataclass(slots=True)
class EntryPointLoader:
    """Populate a catalog from factories published as entry points.

    Each entry point in ``group`` must load a zero-argument callable
    returning catalog items. Entry points that fail to import are logged and
    skipped; errors raised while adding items propagate.
    """

    group: str = MODULES_ENTRY_POINT_GROUP

    def factories(self) -> tuple[ModuleFactory, ...]:
        """Return module factories discovered in the entry-point ``group``."""

        entries = _select_entry_points(cast(_EntryPointSource, metadata.entry_points()), self.group)
        factories: list[ModuleFactory] = []
        for entry in entries:
            try:
                factories.append(cast(ModuleFactory, entry.load()))
            except (AttributeError, ImportError, ValueError, RuntimeError) as exc:
                LOGGER.warning("skipping module entry point %s: %s", getattr(entry, "name", entry), exc)
        return tuple(factories)

    def __call__(self, catalog: ModuleCatalog) -> None:
        """Append the items produced by every discovered factory."""

        for factory in self.factories():
            for item in factory():
                catalog.add_item(item)


def modules_loader(items: Iterable[CatalogItem]) -> CatalogLoader:
    """Return a hook that appends a fixed set of ``items`` on every load."""

    snapshot = tuple(items)

    def _load(catalog: ModuleCatalog) -> None:
        """Append the captured items."""

        for item in snapshot:
            catalog.add_item(item)

    return _load


def chain_loaders(*loaders: CatalogLoader) -> CatalogLoader:
    """Return a hook running ``loaders`` one after another."""

    def _load(catalog: ModuleCatalog) -> None:
        """Run each loader against ``catalog``."""

        for loader in loaders:
            loader(catalog)

    return _load


def _select_entry_points(entries: _EntryPointSource, group: str) -> Iterable[EntryPoint]:
    """Return entry points registered under ``group``.

    Args:
        entries: Result of :func:`importlib.metadata.entry_points`, either the
            selectable ``EntryPoints`` object or a legacy group mapping.
        group: Entry-point group name.

    Returns:
        Iterable[EntryPoint]: Matching entry points, empty when none exist.
    """

    if isinstance(entries, Mapping):
        return entries.get(group, ())
    if hasattr(entries, "select"):
        return entries.select(group=group)
    return ()


__all__ = [
    "DEFAULT_MANIFEST_PATTERN",
    "MODULES_ENTRY_POINT_GROUP",
    "EntryPointLoader",
    "ManifestDirectoryLoader",
    "ModuleFactory",
    "chain_loaders",
    "modules_loader",
]
