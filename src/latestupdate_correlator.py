"""
LatestUpdate Correlator

Pairs resolved download URLs with release notes by position
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from latestupdate_errors import NoteCorrelationMismatch


@dataclass(frozen=True)
class ResolvedDownload:
    kb: str
    note: str
    url: str

    def to_dict(self) -> Dict[str, str]:
        return {"KB": self.kb, "Note": self.note, "URL": self.url}


def correlate(kb: str, notes: Sequence[str], urls: Sequence[str]) -> Tuple[ResolvedDownload, ...]:
    """
    Pairs each URL with a note.

    A single note applies to every URL. Otherwise notes and URLs must have the
    same length and are paired by index; any other shape raises
    ``NoteCorrelationMismatch`` instead of reusing or dropping data.
    """

    if not urls:
        return ()

    if len(notes) != 1 and len(notes) != len(urls):
        raise NoteCorrelationMismatch(len(notes), len(urls))

    out: List[Optional[ResolvedDownload]] = [None] * len(urls)
    for i, url in enumerate(urls):
        note = notes[0] if len(notes) == 1 else notes[i]
        out[i] = ResolvedDownload(kb=kb, note=note, url=url)

    return tuple(out)


def without_notes(kb: str, urls: Sequence[str]) -> Tuple[ResolvedDownload, ...]:
# Fallback when notes cannot be paired: keep every URL, attach no note

    return tuple(ResolvedDownload(kb=kb, note="", url=url) for url in urls)
