"""HintService: completion hints backed by the journal and settings."""

from __future__ import annotations

from caliber.domain.hints import compute_hints, hint_to_dict
from caliber.domain.types import HintMode
from caliber.services.base import BaseService
from caliber.services.result import ErrorCode, ServiceResult


class HintService(BaseService):
    def compute(self, text: str, mode: HintMode) -> ServiceResult:
        """Hints for *text* typed in *mode*, using the journal's tags."""
        op = "hint"
        try:
            tags = self._journal_tags() if mode is not HintMode.COMMAND else []
        except OSError as exc:
            return ServiceResult.failure(op, ErrorCode.IO_ERROR, f"Journal I/O failed: {exc}")

        hint = compute_hints(text, mode, tags, sorted(self._settings.filters.saved))
        return ServiceResult(
            ok=True,
            op=op,
            data={"input": text, "mode": str(mode), "hint": hint_to_dict(hint)},
        )
