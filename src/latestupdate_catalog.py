"""
LatestUpdate Catalog

Searches the Microsoft Update Catalog for a KB article and filters the result
page down to downloadable candidates and release-note strings
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

import requests
from bs4 import BeautifulSoup

from latestupdate_errors import Diagnostic, LookupWarning, report
from latestupdate_http import fetch_text


# ============================================================
# MICROSOFT UPDATE CATALOG ENDPOINTS
# ============================================================

CATALOG_BASE = "https://www.catalog.update.microsoft.com"
SEARCH_URL = f"{CATALOG_BASE}/Search.aspx"

LINK_ID_SUFFIX = "_link"
LINK_ID_PATTERN = re.compile(re.escape(LINK_ID_SUFFIX) + r"$")

NOTE_PATTERN = re.compile(r"\d{4}-\d{2}.*?\(KB\d{6,8}\)")


# ============================================================
# MODELS
# ============================================================

# Anchor on the results page, in both renderings
@dataclass(frozen=True)
class CatalogLink:
    id: str
    outer_html: str
    inner_text: str

# Input element on the results page
@dataclass(frozen=True)
class InputControl:
    id: str
    type: str
    value: str

@dataclass(frozen=True)
class CandidateUpdate:
    id: str


class CatalogPage:
    """
    Read-only view over a catalog search response.

    Only the projections the pipeline needs are exposed: the ordered link and
    input control collections, the inner text of every anchor, and the raw body.
    """

    def __init__(
        self,
        raw_body: str,
        links: Tuple[CatalogLink, ...] = (),
        input_controls: Tuple[InputControl, ...] = (),
        anchor_texts: Tuple[str, ...] = (),
    ) -> None:
        self._raw_body = raw_body
        self._links = tuple(links)
        self._input_controls = tuple(input_controls)
        self._anchor_texts = tuple(anchor_texts)

    @classmethod
    def from_html(cls, html: str) -> "CatalogPage":
        soup = BeautifulSoup(html or "", "html.parser")

        links: List[CatalogLink] = []
        anchor_texts: List[str] = []
        for a in soup.find_all("a"):
            text = a.get_text(" ", strip=True)
            anchor_texts.append(text)
            link_id = (a.get("id") or "").strip()
            if link_id:
                links.append(CatalogLink(id=link_id, outer_html=str(a), inner_text=text))

        controls: List[InputControl] = []
        for tag in soup.find_all("input"):
            controls.append(
                InputControl(
                    id=(tag.get("id") or "").strip(),
                    type=(tag.get("type") or "").strip(),
                    value=(tag.get("value") or "").strip(),
                )
            )

        return cls(
            raw_body=html or "",
            links=tuple(links),
            input_controls=tuple(controls),
            anchor_texts=tuple(anchor_texts),
        )

    @property
    def raw_body(self) -> str:
        return self._raw_body

    @property
    def links(self) -> Tuple[CatalogLink, ...]:
        return self._links

    @property
    def input_controls(self) -> Tuple[InputControl, ...]:
        return self._input_controls

    @property
    def anchor_texts(self) -> Tuple[str, ...]:
        return self._anchor_texts

    def is_empty(self) -> bool:
        return not self._links or not self._input_controls


# ============================================================
# LINK TEXT EXTRACTION
# ============================================================

class LinkTextExtractor:
    """Reads the text a search pattern is matched against for one link."""

    name = "base"

    def text_of(self, link: CatalogLink) -> str:
        raise NotImplementedError


class OuterMarkupExtractor(LinkTextExtractor):
    # Hosts without a parsed DOM only expose the anchor markup
    name = "outer-markup"

    def text_of(self, link: CatalogLink) -> str:
        return link.outer_html


class InnerTextExtractor(LinkTextExtractor):
    name = "inner-text"

    def text_of(self, link: CatalogLink) -> str:
        return link.inner_text


def select_extractor(use_alternate: bool) -> LinkTextExtractor:
    return OuterMarkupExtractor() if use_alternate else InnerTextExtractor()


# ============================================================
# CATALOG SEARCH
# ============================================================

def search_catalog(
    session: requests.Session,
    article_number: str,
    sink: Optional[List[Diagnostic]] = None,
) -> CatalogPage:
# Searches the catalog for KB<article_number> and wraps the result page

    html = fetch_text(session, SEARCH_URL, params={"q": f"KB{article_number}"})
    page = CatalogPage.from_html(html)

    if not html.strip():
        report(sink, LookupWarning.CATALOG_UNAVAILABLE, f"Empty catalog response for KB{article_number}")
    elif page.is_empty():
        report(
            sink,
            LookupWarning.CATALOG_UNAVAILABLE,
            f"Catalog page for KB{article_number} has {len(page.links)} link(s) "
            f"and {len(page.input_controls)} input control(s)",
        )

    return page


# ============================================================
# CANDIDATE FILTERING
# ============================================================

def available_ids(page: CatalogPage) -> List[str]:
# Ids of enabled Download buttons

    out: List[str] = []
    for control in page.input_controls:
        if control.type.lower() != "button":
            continue
        if control.value.lower() != "download":
            continue
        if control.id:
            out.append(control.id)
    return out


def matching_ids(page: CatalogPage, search_pattern: str, extractor: LinkTextExtractor) -> List[str]:
# Raw ids of KB detail links whose rendered text matches the search pattern

    pattern = re.compile(search_pattern, re.IGNORECASE | re.DOTALL)

    out: List[str] = []
    for link in page.links:
        if not LINK_ID_PATTERN.search(link.id):
            continue
        if not pattern.search(extractor.text_of(link)):
            continue
        out.append(LINK_ID_PATTERN.sub("", link.id))
    return out


def filter_candidates(
    page: CatalogPage,
    search_pattern: str,
    extractor: LinkTextExtractor,
    sink: Optional[List[Diagnostic]] = None,
) -> List[CandidateUpdate]:
    """
    Intersects the Download-enabled ids with the links matching ``search_pattern``.

    Link order is kept and repeated ids collapse to their first occurrence.
    """

    available = set(available_ids(page))

    out: List[CandidateUpdate] = []
    seen: set[str] = set()
    for raw_id in matching_ids(page, search_pattern, extractor):
        if raw_id not in available or raw_id in seen:
            continue
        seen.add(raw_id)
        out.append(CandidateUpdate(id=raw_id))

    if not out:
        report(
            sink,
            LookupWarning.NO_CANDIDATES_FOUND,
            f"No downloadable update matched {search_pattern!r} "
            f"({len(available)} available, {extractor.name} text)",
        )

    return out


# ============================================================
# RELEASE NOTES
# ============================================================

def normalise_note(text: str) -> str:
    return " ".join(text.split())


def extract_notes(page: CatalogPage, search_pattern: str, use_alternate: bool) -> List[str]:
# Release-note titles, from the raw body or from parsed anchors

    if use_alternate:
        return [normalise_note(m.group(0)) for m in NOTE_PATTERN.finditer(page.raw_body)]

    pattern = re.compile(search_pattern, re.IGNORECASE)
    return [normalise_note(text) for text in page.anchor_texts if text and pattern.search(text)]
