"""
LatestUpdate Locator

Finds the current KB article from a support content update-history endpoint
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import List, Optional

import requests

from latestupdate_errors import Diagnostic, LookupWarning, report
from latestupdate_http import fetch_text


# Sub-entries of the update history (one per released KB) sit at this depth
ARTICLE_LINK_LEVEL = 2


@dataclass(frozen=True)
class ArticleReference:
    article_number: str

    @property
    def kb(self) -> str:
        return f"KB{self.article_number}"


def parse_article_links(content: str) -> Optional[List[dict]]:
# Returns the Links array of the content asset, or None when the body is unusable

    try:
        document = json.loads(content)
    except json.JSONDecodeError:
        return None

    if not isinstance(document, dict):
        return None

    links = document.get("Links")
    if not isinstance(links, list):
        return None

    return [link for link in links if isinstance(link, dict)]


def select_article(links: List[dict], filter_label: str) -> Optional[ArticleReference]:
# First level-2 link whose text matches the filter, in document order

    pattern = re.compile(filter_label, re.IGNORECASE)

    for link in links:
        try:
            level = int(link.get("level"))
        except (TypeError, ValueError):
            continue
        if level != ARTICLE_LINK_LEVEL:
            continue

        text = str(link.get("text") or "")
        if not pattern.search(text):
            continue

        article_id = str(link.get("articleID") or "").strip()
        if not article_id:
            continue

        return ArticleReference(article_number=article_id)

    return None


def locate_article(
    session: requests.Session,
    start_url: str,
    filter_label: str,
    sink: Optional[List[Diagnostic]] = None,
) -> Optional[ArticleReference]:
    """
    Fetches the update history asset at ``start_url`` and picks the newest
    matching KB article.

    Transport errors propagate. Unparsable content and missing matches are
    reported as warnings and yield ``None``.
    """

    content = fetch_text(session, start_url)

    links = parse_article_links(content)
    if links is None:
        report(sink, LookupWarning.ENDPOINT_UNREACHABLE, f"No Links array in response from {start_url}")
        return None

    article = select_article(links, filter_label)
    if article is None:
        report(
            sink,
            LookupWarning.ARTICLE_NOT_FOUND,
            f"No level-{ARTICLE_LINK_LEVEL} link matched {filter_label!r} at {start_url}",
        )
    return article
