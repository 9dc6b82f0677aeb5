# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from modcatalog.models import ActivationMode, ModuleDescriptor

ModuleFactory = Callable[..., ModuleDescriptor]


@pytest.fixture
def make_module() -> ModuleFactory:
    """Return a factory building descriptors from a name and dependency names."""

    def _make(
        name: str,
        *depends_on: str,
        mode: ActivationMode = ActivationMode.EAGER,
        optional: tuple[str, ...] = (),
    ) -> ModuleDescriptor:
        return ModuleDescriptor(
            name=name,
            type_ref=f"plugins.{name.lower()}.Module",
            depends_on=[*depends_on, *optional],
            activation_mode=mode,
            optional_dependencies=frozenset(optional),
        )

    return _make
