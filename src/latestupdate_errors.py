"""
LatestUpdate Errors

Warning kinds raised by the lookup stages and the correlation mismatch error
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


logger = logging.getLogger(__name__)


class LookupWarning(str, Enum):
    ENDPOINT_UNREACHABLE = "EndpointUnreachable"
    ARTICLE_NOT_FOUND = "ArticleNotFound"
    CATALOG_UNAVAILABLE = "CatalogUnavailable"
    NO_CANDIDATES_FOUND = "NoCandidatesFound"
    DOWNLOAD_RESOLUTION_FAILED = "DownloadResolutionFailed"
    NOTE_CORRELATION_MISMATCH = "NoteCorrelationMismatch"


@dataclass(frozen=True)
class Diagnostic:
    kind: LookupWarning
    message: str


class NoteCorrelationMismatch(RuntimeError):
    """Raised when note count is neither 1 nor equal to the URL count."""

    def __init__(self, note_count: int, url_count: int) -> None:
        super().__init__(
            f"Cannot pair {note_count} note(s) with {url_count} URL(s) by position."
        )
        self.note_count = note_count
        self.url_count = url_count


def report(sink: Optional[List[Diagnostic]], kind: LookupWarning, message: str) -> Diagnostic:
# Logs a non-fatal lookup shortfall and records it when a sink is given

    diagnostic = Diagnostic(kind=kind, message=message)
    logger.warning("%s: %s", kind.value, message)
    if sink is not None:
        sink.append(diagnostic)
    return diagnostic
