# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Dependency solver producing deterministic load orders for named modules."""

from __future__ import annotations

import graphlib
import heapq
import logging
from collections.abc import Mapping, Sequence
from graphlib import TopologicalSorter

from .config import BoostOptions
from .errors import CycleError

LOGGER = logging.getLogger(__name__)

_Rank = tuple[float, int, str]


class DependencySolver:
    """Topologically sort module names so dependencies precede dependents.

    Nodes are opaque names and edges are "depends-on" relations. When several
    nodes are eligible at the same time the one with the larger boost is
    emitted first; equal boosts keep node registration order so the result is
    reproducible for identical input.
    """

    def __init__(self, boost: BoostOptions | Mapping[str, float] | None = None) -> None:
        """Create an empty solver.

        Args:
            boost: Optional priority hints keyed by module name.
        """

        if isinstance(boost, BoostOptions):
            self._boosts: Mapping[str, float] = dict(boost.boosts)
        else:
            self._boosts = dict(boost or {})
        self._index: dict[str, int] = {}
        self._dependencies: dict[str, list[str]] = {}

    @property
    def node_count(self) -> int:
        """Return the number of registered nodes."""

        return len(self._index)

    def add_node(self, name: str) -> None:
        """Register ``name`` as a node; repeated registrations are ignored."""

        if name not in self._index:
            self._index[name] = len(self._index)
            self._dependencies[name] = []

    def add_edge(self, dependent: str, dependency: str) -> None:
        """Record that ``dependent`` depends on ``dependency``.

        Both names are registered when unknown, which lets callers record a
        dependency on a module that later turns out to be missing.

        Args:
            dependent: Module that requires ``dependency``.
            dependency: Module that must be ordered before ``dependent``.
        """

        self.add_node(dependent)
        self.add_node(dependency)
        edges = self._dependencies[dependent]
        if dependency not in edges:
            edges.append(dependency)

    def solve(self) -> tuple[str, ...]:
        """Return every node ordered so that dependencies come first.

        Returns:
            tuple[str, ...]: All registered names in load order.

        Raises:
            CycleError: If the dependency edges form a cycle.
        """

        sorter: TopologicalSorter[str] = TopologicalSorter()
        for name, dependencies in self._dependencies.items():
            sorter.add(name, *dependencies)
        try:
            sorter.prepare()
        except graphlib.CycleError as exc:
            cycle = self._depends_on_cycle(exc.args[1])
            LOGGER.debug("dependency cycle detected: %s", cycle)
            raise CycleError(cycle) from exc

        ready: list[_Rank] = []
        ordered: list[str] = []
        while sorter.is_active():
            for name in sorter.get_ready():
                heapq.heappush(ready, self._rank(name))
            _, _, name = heapq.heappop(ready)
            ordered.append(name)
            sorter.done(name)
        LOGGER.debug("solved %d modules: %s", len(ordered), ordered)
        return tuple(ordered)

    def _rank(self, name: str) -> _Rank:
        """Return the heap key for ``name``: higher boost first, then registration order."""

        return (-self._boosts.get(name, 0.0), self._index[name], name)

    def _depends_on_cycle(self, raw: Sequence[str]) -> tuple[str, ...]:
        """Convert graphlib's cycle report into depends-on order.

        graphlib walks successor links and closes the loop by repeating the
        first node, so the report is reversed and trimmed. The result starts
        at the earliest registered member.
        """

        members = list(reversed(list(raw)[:-1])) or list(raw)
        start = min(range(len(members)), key=lambda pos: self._index.get(members[pos], len(self._index)))
        return tuple(members[start:] + members[:start])


__all__ = ["DependencySolver"]
