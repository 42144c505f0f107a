"""
LatestUpdate Pipeline

Runs the lookup stages in order and threads one explicit state object through them:
profile -> article -> catalog page -> candidates and notes -> URLs -> records
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

import requests

from latestupdate_catalog import (
    CandidateUpdate,
    CatalogPage,
    LinkTextExtractor,
    extract_notes,
    filter_candidates,
    search_catalog,
    select_extractor,
)
from latestupdate_correlator import ResolvedDownload, correlate, without_notes
from latestupdate_downloads import resolve_all
from latestupdate_errors import Diagnostic, LookupWarning, NoteCorrelationMismatch, report
from latestupdate_http import build_session
from latestupdate_locator import ArticleReference, locate_article
from latestupdate_profiles import VersionConfig, VersionProfile, resolve_profile


logger = logging.getLogger(__name__)


@dataclass
class PipelineState:
    profile: VersionProfile
    search_pattern: str
    use_alternate_extraction: bool
    extractor: LinkTextExtractor
    article: Optional[ArticleReference] = None
    page: Optional[CatalogPage] = None
    candidates: List[CandidateUpdate] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)
    urls: List[str] = field(default_factory=list)
    results: Tuple[ResolvedDownload, ...] = ()
    warnings: List[Diagnostic] = field(default_factory=list)


def start_state(config: Union[VersionConfig, VersionProfile], use_alternate_extraction: bool = False) -> PipelineState:
    # A ready-made profile skips version resolution
    profile = config if isinstance(config, VersionProfile) else resolve_profile(config)
    return PipelineState(
        profile=profile,
        search_pattern=profile.default_search_pattern,
        use_alternate_extraction=use_alternate_extraction,
        extractor=select_extractor(use_alternate_extraction),
    )


# ============================================================
# STAGES
# ============================================================

def locate_stage(state: PipelineState, session: requests.Session) -> None:
    state.article = locate_article(
        session,
        state.profile.start_endpoint_url,
        state.profile.article_filter_label,
        sink=state.warnings,
    )
    if state.article:
        logger.info("Located %s for %s", state.article.kb, state.profile.version_id)


def catalog_stage(state: PipelineState, session: requests.Session) -> None:
    if state.article is None:
        return

    state.page = search_catalog(session, state.article.article_number, sink=state.warnings)
    state.candidates = filter_candidates(
        state.page, state.search_pattern, state.extractor, sink=state.warnings
    )
    state.notes = extract_notes(state.page, state.search_pattern, state.use_alternate_extraction)
    logger.debug("Candidates: %s", [c.id for c in state.candidates])
    logger.debug("Notes: %s", state.notes)


def download_stage(
    state: PipelineState,
    session: requests.Session,
    max_workers: int = 1,
    include_mirrors: bool = False,
) -> None:
    if not state.candidates:
        return
    state.urls = resolve_all(
        session,
        state.candidates,
        max_workers=max_workers,
        sink=state.warnings,
        include_mirrors=include_mirrors,
    )


def correlate_stage(state: PipelineState, strict: bool = False) -> None:
    if state.article is None or not state.urls:
        return

    kb = state.article.kb
    try:
        state.results = correlate(kb, state.notes, state.urls)
    except NoteCorrelationMismatch as exc:
        if strict:
            raise
        report(state.warnings, LookupWarning.NOTE_CORRELATION_MISMATCH, f"{kb}: {exc}")
        state.results = without_notes(kb, state.urls)


# ============================================================
# ENTRY POINT
# ============================================================

def run_pipeline(
    config: Union[VersionConfig, VersionProfile],
    use_alternate_extraction: bool = False,
    session: Optional[requests.Session] = None,
    max_workers: int = 1,
    strict: bool = False,
    include_mirrors: bool = False,
) -> PipelineState:
    """
    Runs every stage and returns the final state, warnings included.

    Transport errors on the support endpoint and catalog search propagate.
    Everything else degrades to an empty result with a recorded warning.
    """

    state = start_state(config, use_alternate_extraction)
    if session is None:
        session = build_session()

    locate_stage(state, session)
    catalog_stage(state, session)
    download_stage(state, session, max_workers=max_workers, include_mirrors=include_mirrors)
    correlate_stage(state, strict=strict)

    return state


def get_latest_update(
    config: Union[VersionConfig, VersionProfile],
    use_alternate_extraction: bool = False,
    session: Optional[requests.Session] = None,
    max_workers: int = 1,
    strict: bool = False,
    include_mirrors: bool = False,
) -> Tuple[ResolvedDownload, ...]:
    state = run_pipeline(
        config,
        use_alternate_extraction=use_alternate_extraction,
        session=session,
        max_workers=max_workers,
        strict=strict,
        include_mirrors=include_mirrors,
    )
    return state.results
