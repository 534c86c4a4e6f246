"""InitService: create a project journal and starter configuration."""

from __future__ import annotations

import logging
from pathlib import Path

from caliber.config.discovery import CONFIG_FILENAME, user_config_path
from caliber.services.base import BaseService
from caliber.services.result import ErrorCode, ServiceResult
from caliber.services.telemetry import traced

logger = logging.getLogger(__name__)

CONFIG_TEMPLATE = """\
# caliber configuration. Every key is optional.

[journal]
# default_file = "~/notes/journal.md"
# project_file = ".caliber/journal.md"
# active = "global"

[entries]
# Group order used by `caliber day sort`.
# sort_order = ["completed", "events", "notes", "uncompleted"]
# Tags typed as #1 .. #9 (and #0 for the tenth).
# favorite_tags = ["feature", "bug", "idea"]

[filters]
# default = "!tasks"

[filters.saved]
# t = "!tasks"
# n = "!notes"
# e = "!events"
"""


class InitService(BaseService):
    """Bootstraps journal files and configuration."""

    @traced
    def init_project(self, *, write_config: bool = False, user: bool = False) -> ServiceResult:
        """Create the project journal (if missing) and optional config files.

        Args:
            write_config: Also write ``caliber.toml`` in the journal root.
            user: Also write the per-user config file.
        """
        op = "init"
        created: list[str] = []
        existing: list[str] = []
        try:
            path, made = self._journal.init_project()
            (created if made else existing).append(str(path))

            targets: list[Path] = []
            if write_config:
                targets.append(self._settings.journal_root / CONFIG_FILENAME)
            if user:
                targets.append(user_config_path())
            for target in targets:
                if target.exists():
                    existing.append(str(target))
                    continue
                self._journal.save_journal(CONFIG_TEMPLATE, target)
                created.append(str(target))
        except OSError as exc:
            return ServiceResult.failure(op, ErrorCode.IO_ERROR, f"Initialization failed: {exc}")

        logger.info("Initialized project journal at %s", path)
        return ServiceResult(
            ok=True,
            op=op,
            data={"project_journal": str(path), "created": created, "existing": existing},
        )
