# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Rich renderables for load orders and catalog errors."""

from __future__ import annotations

from collections.abc import Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .activation import ActivationPlan
from .errors import CycleError, IllegalDependencyError, MissingDependencyError, ModularityError
from .models import ModuleDescriptor


def render_load_order(modules: Sequence[ModuleDescriptor], *, title: str = "Load order") -> Table:
    """Return a table listing ``modules`` in the given order.

    Args:
        modules: Modules already sorted for activation.
        title: Table title.

    Returns:
        Table: Rich table with one row per module.
    """

    table = Table(title=title, box=box.SIMPLE, pad_edge=False, expand=False)
    table.add_column("#", justify="right", style="dim", no_wrap=True)
    table.add_column("Module", style="cyan", no_wrap=True)
    table.add_column("Activation", no_wrap=True)
    table.add_column("Depends on")
    table.add_column("State", no_wrap=True)
    for index, module in enumerate(modules, start=1):
        dependencies = Text()
        for position, dependency in enumerate(module.depends_on):
            if position:
                dependencies.append(", ")
            style = "dim italic" if module.is_optional(dependency) else ""
            dependencies.append(dependency, style=style)
        table.add_row(
            str(index),
            module.name,
            module.activation_mode.value,
            dependencies,
            module.state.value,
        )
    return table


def render_error(error: ModularityError) -> Panel:
    """Return a panel describing ``error`` for an operator."""

    body = Text(error.message)
    match error:
        case CycleError(cycle=cycle):
            body.append("\n\nCycle: ", style="bold")
            body.append(" -> ".join((*cycle, cycle[0])), style="yellow")
        case MissingDependencyError(dependency=dependency):
            body.append("\n\nMissing: ", style="bold")
            body.append(dependency, style="yellow")
        case IllegalDependencyError(reason=reason):
            body.append("\n\nRule: ", style="bold")
            body.append(reason, style="yellow")
        case _:
            pass
    title = type(error).__name__
    if error.module_name:
        title = f"{title}: {error.module_name}"
    return Panel(body, title=title, border_style="red", expand=False)


def emit_plan(plan: ActivationPlan, console: Console | None = None) -> None:
    """Print the ready modules of ``plan`` and any skipped ones."""

    target = console or Console()
    target.print(render_load_order(plan.ready))
    if plan.skipped:
        skipped = Table(title="Skipped (loading errors)", box=box.SIMPLE, pad_edge=False, expand=False)
        skipped.add_column("Module", style="red", no_wrap=True)
        skipped.add_column("Errors")
        for module in plan.skipped:
            skipped.add_row(module.name, "; ".join(module.errors))
        target.print(skipped)


__all__ = ["emit_plan", "render_error", "render_load_order"]
