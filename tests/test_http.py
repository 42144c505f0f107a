"""Tests for the shared HTTP helpers."""

import pytest
import requests

from conftest import FakeResponse, FakeSession
from latestupdate_http import build_session, checked_text, fetch_text, post_text


def test_session_headers_and_culture():
    s = build_session()

    assert s.headers["User-Agent"] == "latestupdate.py"
    assert s.cookies.get("display-culture") == "en-US"


def test_fetch_text_raises_on_http_error():
    session = FakeSession(gets={"https://x.example": FakeResponse("gone", status_code=404)})

    with pytest.raises(requests.HTTPError):
        fetch_text(session, "https://x.example")


def test_post_text_returns_body():
    session = FakeSession(posts={"abc": FakeResponse("ok")})

    assert post_text(session, "https://x.example", data={"updateIDs": '[{"updateID":"abc"}]'}) == "ok"


def test_checked_text_passes_successful_body():
    assert checked_text(FakeResponse("body")) == "body"
