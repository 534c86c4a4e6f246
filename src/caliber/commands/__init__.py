"""Subcommand modules for caliber.

Provides register_commands() which uses deferred imports to keep
``caliber --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group.

    2 groups (have subcommands) + 5 standalone commands.
    """
    # --- Groups ---
    from caliber.commands.day import day
    from caliber.commands.tags import tags

    cli.add_command(day)
    cli.add_command(tags)

    # --- Standalone commands ---
    from caliber.commands.filter import filter_cmd
    from caliber.commands.hint import hint
    from caliber.commands.init_cmd import init_cmd
    from caliber.commands.later import agenda, later

    cli.add_command(filter_cmd)
    cli.add_command(later)
    cli.add_command(agenda)
    cli.add_command(hint)
    cli.add_command(init_cmd)
