"""Tests for note-to-URL correlation."""

import pytest

from latestupdate_correlator import ResolvedDownload, correlate, without_notes
from latestupdate_errors import NoteCorrelationMismatch

URLS = [
    "https://download.windowsupdate.com/a.msu",
    "https://download.windowsupdate.com/b.msu",
    "https://download.windowsupdate.com/c.msu",
]


def test_single_note_applies_to_every_url():
    records = correlate("KB4567890", ["2024-05 Cumulative Update (KB4567890)"], URLS)

    assert len(records) == 3
    assert {r.note for r in records} == {"2024-05 Cumulative Update (KB4567890)"}
    assert [r.url for r in records] == URLS
    assert {r.kb for r in records} == {"KB4567890"}


def test_equal_counts_pair_by_index():
    records = correlate("KB4567890", ["n0", "n1", "n2"], URLS)

    assert [(r.note, r.url) for r in records] == list(zip(["n0", "n1", "n2"], URLS))


def test_mismatched_counts_raise():
    with pytest.raises(NoteCorrelationMismatch) as excinfo:
        correlate("KB4567890", ["n0", "n1"], URLS)

    assert excinfo.value.note_count == 2
    assert excinfo.value.url_count == 3


def test_no_notes_with_urls_raise():
    with pytest.raises(NoteCorrelationMismatch):
        correlate("KB4567890", [], URLS)


def test_no_urls_yield_nothing():
    assert correlate("KB4567890", ["n0", "n1"], []) == ()


def test_result_is_immutable():
    records = correlate("KB4567890", ["n"], URLS[:1])

    assert isinstance(records, tuple)
    assert records[0].to_dict() == {"KB": "KB4567890", "Note": "n", "URL": URLS[0]}


def test_without_notes_keeps_every_url():
    assert without_notes("KB1", URLS[:2]) == (
        ResolvedDownload(kb="KB1", note="", url=URLS[0]),
        ResolvedDownload(kb="KB1", note="", url=URLS[1]),
    )
