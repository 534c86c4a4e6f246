"""Click command and group classes that carry usage examples.

``--help`` stays short; ``--examples`` prints the worked invocations
attached with ``examples=...`` and exits before any argument checks.
"""

from __future__ import annotations

from typing import Any

import click


def _print_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    examples = getattr(ctx.command, "examples", None) or ""
    click.echo(f"Examples for '{ctx.command_path}':\n")
    click.echo(examples.rstrip("\n"))
    ctx.exit(0)


class _ExamplesMixin:
    """Adds the eager ``--examples`` flag when ``examples`` text is given."""

    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    is_eager=True,
                    expose_value=False,
                    callback=_print_examples,
                    help="Show usage examples and exit.",
                )
            )


class CaliberCommand(_ExamplesMixin, click.Command):
    pass


class CaliberGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands default to :class:`CaliberCommand`."""

    command_class = CaliberCommand
