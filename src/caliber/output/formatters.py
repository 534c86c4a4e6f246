"""Pick an output mode for a ServiceResult and produce its text.

``--json`` dumps the whole result model, ``--quiet`` prints bare
markdown lines or names, and the default draws a Rich rendering.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from caliber.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from caliber.services.result import ServiceResult

OutputMode = Literal["json", "quiet", "rich"]


@dataclass(frozen=True)
class OutputSettings:
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False

    @property
    def mode(self) -> OutputMode:
        """``--json`` beats ``--quiet``."""
        if self.json_output:
            return "json"
        return "quiet" if self.quiet else "rich"


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    settings = settings or OutputSettings()
    match settings.mode:
        case "json":
            return result.model_dump_json(indent=2)
        case "quiet":
            return render_quiet(result)
        case _:
            return render_result(result, verbose=settings.verbose)
