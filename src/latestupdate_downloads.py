"""
LatestUpdate Downloads

Resolves catalog candidate ids to direct download URLs through the DownloadDialog endpoint
"""

from __future__ import annotations

import json
import re
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

import requests

from latestupdate_catalog import CATALOG_BASE, CandidateUpdate
from latestupdate_errors import Diagnostic, LookupWarning, report
from latestupdate_http import post_text


DOWNLOAD_DIALOG_URL = f"{CATALOG_BASE}/DownloadDialog.aspx"

DOWNLOAD_URL_PATTERN = re.compile(
    r"https?://download\.windowsupdate\.com/[^'\"\s<>]*",
    flags=re.IGNORECASE,
)

# Opt-in: the catalog also serves mirrors such as catalog.s.download.windowsupdate.com
MIRROR_URL_PATTERN = re.compile(
    r"https?://(?:[A-Za-z0-9-]+\.)*download\.windowsupdate\.com/[^'\"\s<>]*",
    flags=re.IGNORECASE,
)


def build_dialog_body(candidate_id: str) -> dict:
# The DownloadDialog endpoint expects a JSON array in the updateIDs form field

    post = {"size": 0, "updateID": candidate_id, "uidInfo": candidate_id}
    payload = json.dumps([post], separators=(",", ":"))
    return {"updateIDs": payload}


def extract_download_urls(dialog_html: str, include_mirrors: bool = False) -> List[str]:
# Every download-service URL in the response, in order of appearance

    pattern = MIRROR_URL_PATTERN if include_mirrors else DOWNLOAD_URL_PATTERN
    return [m.group(0) for m in pattern.finditer(dialog_html or "")]


def resolve_download_urls(
    session: requests.Session,
    candidate_id: str,
    include_mirrors: bool = False,
) -> List[str]:
    dialog_html = post_text(session, DOWNLOAD_DIALOG_URL, data=build_dialog_body(candidate_id))
    return extract_download_urls(dialog_html, include_mirrors=include_mirrors)


def resolve_candidate(
    session: requests.Session,
    candidate: CandidateUpdate,
    sink: Optional[List[Diagnostic]] = None,
    include_mirrors: bool = False,
) -> List[str]:
# One candidate; failures are reported and contribute no URLs

    try:
        urls = resolve_download_urls(session, candidate.id, include_mirrors=include_mirrors)
    except requests.RequestException as exc:
        report(sink, LookupWarning.DOWNLOAD_RESOLUTION_FAILED, f"{candidate.id}: {exc}")
        return []

    if not urls:
        report(sink, LookupWarning.DOWNLOAD_RESOLUTION_FAILED, f"{candidate.id}: no download URL in dialog")
    return urls


def resolve_all(
    session: requests.Session,
    candidates: Sequence[CandidateUpdate],
    max_workers: int = 1,
    sink: Optional[List[Diagnostic]] = None,
    include_mirrors: bool = False,
) -> List[str]:
    """
    Resolves every candidate and flattens the URLs in candidate order.

    With ``max_workers`` above one the POSTs overlap on the one shared session,
    which keeps the caller's headers, cookies and adapters for every request.
    URLs and diagnostics are collected per candidate and merged by candidate
    index, never in completion order.
    """

    if max_workers < 1:
        raise ValueError("max_workers must be at least 1")

    def resolve_one(candidate: CandidateUpdate) -> Tuple[List[str], List[Diagnostic]]:
        diagnostics: List[Diagnostic] = []
        found = resolve_candidate(session, candidate, diagnostics, include_mirrors=include_mirrors)
        return found, diagnostics

    if max_workers == 1 or len(candidates) < 2:
        per_candidate = [resolve_one(c) for c in candidates]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            per_candidate = list(pool.map(resolve_one, candidates))

    urls: List[str] = []
    for candidate_urls, diagnostics in per_candidate:
        urls.extend(candidate_urls)
        if sink is not None:
            sink.extend(diagnostics)
    return urls
