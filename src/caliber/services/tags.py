"""TagService: journal-wide tag listing, rename, and delete.

Rename and delete rewrite the raw journal text, then write the whole
file back. Entries left empty by the rewrite are dropped.
"""

from __future__ import annotations

import logging

from caliber.domain.tags import (
    collect_journal_tags,
    count_tag_occurrences,
    delete_tag_occurrences,
    rename_tag_occurrences,
    validate_tag_name,
)
from caliber.services.base import BaseService
from caliber.services.result import ErrorCode, ServiceResult
from caliber.services.telemetry import traced

logger = logging.getLogger(__name__)


def _bare(tag: str) -> str:
    return tag.strip().lstrip("#")


class TagService(BaseService):
    """Tag maintenance over the active journal."""

    @traced
    def list_tags(self) -> ServiceResult:
        """Every tag in the journal with its occurrence count."""
        op = "list_tags"
        try:
            text = self._journal.load_journal()
        except OSError as exc:
            return ServiceResult.failure(op, ErrorCode.IO_ERROR, f"Journal I/O failed: {exc}")

        items = [
            {"tag": tag, "count": count_tag_occurrences(text, tag)}
            for tag in collect_journal_tags([text])
        ]
        return ServiceResult(ok=True, op=op, data={"count": len(items), "items": items})

    @traced
    def rename(self, old: str, new: str) -> ServiceResult:
        """Rename ``#old`` to ``#new`` everywhere. Invalid names change nothing."""
        op = "rename_tag"
        old_name, new_name = _bare(old), _bare(new)
        if not old_name:
            return ServiceResult.failure(op, ErrorCode.INVALID_TAG, "Tag name cannot be empty")
        error = validate_tag_name(new_name)
        if error is not None:
            return ServiceResult.failure(op, ErrorCode.INVALID_TAG, error, tag=new_name)

        try:
            text = self._journal.load_journal()
            new_text, count = rename_tag_occurrences(text, old_name, new_name)
            if count:
                self._journal.save_journal(new_text)
        except OSError as exc:
            return ServiceResult.failure(op, ErrorCode.IO_ERROR, f"Journal I/O failed: {exc}")

        warnings = [] if count else [f"No occurrences of #{old_name}"]
        logger.info("Renamed #%s to #%s (%d occurrences)", old_name, new_name, count)
        return ServiceResult(
            ok=True,
            op=op,
            data={"old": old_name, "new": new_name, "count": count},
            warnings=warnings,
        )

    @traced
    def delete(self, tag: str) -> ServiceResult:
        """Remove every ``#tag`` occurrence from the journal."""
        op = "delete_tag"
        name = _bare(tag)
        if not name:
            return ServiceResult.failure(op, ErrorCode.INVALID_TAG, "Tag name cannot be empty")

        try:
            text = self._journal.load_journal()
            new_text, count = delete_tag_occurrences(text, name)
            if count:
                self._journal.save_journal(new_text)
        except OSError as exc:
            return ServiceResult.failure(op, ErrorCode.IO_ERROR, f"Journal I/O failed: {exc}")

        warnings = [] if count else [f"No occurrences of #{name}"]
        logger.info("Deleted #%s (%d occurrences)", name, count)
        return ServiceResult(
            ok=True,
            op=op,
            data={"tag": name, "count": count},
            warnings=warnings,
        )
