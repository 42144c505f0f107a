"""Shared fakes for the lookup stages."""

from __future__ import annotations

import json

import pytest
import requests


class FakeResponse:
    def __init__(self, text: str, status_code: int = 200) -> None:
        self.text = text
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """Answers GET by URL and POST by (URL, updateIDs payload)."""

    def __init__(self, gets=None, posts=None) -> None:
        self.gets = gets or {}
        self.posts = posts or {}
        self.get_calls = []
        self.post_calls = []

    def get(self, url, params=None, timeout=None):
        self.get_calls.append((url, params))
        answer = self.gets[url]
        if isinstance(answer, Exception):
            raise answer
        return answer

    def post(self, url, data=None, timeout=None):
        self.post_calls.append((url, data))
        update_id = json.loads(data["updateIDs"])[0]["updateID"]
        answer = self.posts[update_id]
        if isinstance(answer, Exception):
            raise answer
        return answer


def catalog_row(update_id: str, title: str, downloadable: bool = True) -> str:
    value = "Download" if downloadable else "Unavailable"
    button = f'<input id="{update_id}" class="flatBlueButtonDownload" type="button" value="{value}" />'
    return (
        f'<tr id="{update_id}_R1">'
        f'<td><a id="{update_id}_link" href="javascript:void(0);" '
        f'onclick="goToDetails(&quot;{update_id}&quot;);">\n    {title}\n</a></td>'
        f"<td>{button}</td>"
        "</tr>"
    )


def catalog_html(*rows: str) -> str:
    return (
        "<html><body>"
        '<a id="ctl00_headerLink" href="/">Microsoft Update Catalog</a>'
        '<input id="ctl00_searchBox" type="text" value="" />'
        '<table id="ctl00_catalogBody_updateMatches">'
        + "".join(rows)
        + "</table></body></html>"
    )


@pytest.fixture
def history_json():
    return json.dumps(
        {
            "Links": [
                {"level": 1, "text": "Windows 10 update history", "articleID": "4000816"},
                {"level": 2, "text": "May 14, 2024 - KB4567890 (OS Build 17134.2000)", "articleID": "4567890"},
                {"level": 2, "text": "April 9, 2024 - KB4500001 (OS Build 17134.1999)", "articleID": "4500001"},
            ]
        }
    )
