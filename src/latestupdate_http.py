"""
LatestUpdate HTTP

Session construction and request helpers shared by every lookup stage
"""

from __future__ import annotations

from typing import Optional

import requests


DEFAULT_TIMEOUT = 30


def build_session() -> requests.Session:
# Builds a session with stable headers

    s = requests.Session()
    s.headers.update(
        {
            "User-Agent": "latestupdate.py",
            "Accept-Language": "en-US,en;q=0.9",
        }
    )
    # Catalog titles are localised from this cookie
    s.cookies.set("display-culture", "en-US")
    return s


def checked_text(response: requests.Response) -> str:
# Body of a successful response; HTTP errors propagate to the caller

    response.raise_for_status()
    return response.text


def fetch_text(session: requests.Session, url: str, params: Optional[dict] = None) -> str:
    return checked_text(session.get(url, params=params, timeout=DEFAULT_TIMEOUT))


def post_text(session: requests.Session, url: str, data: dict) -> str:
    return checked_text(session.post(url, data=data, timeout=DEFAULT_TIMEOUT))
