"""Shared fixtures for uncss tests. Nothing here touches the network."""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import pytest
import requests

from uncss.loader import Document, PageLoadError
from uncss.log import set_verbose
from uncss.stylesheet import Stylesheet


class FakeResponse:
    def __init__(self, url: str, status: int, body: str, content_type: str):
        self.url = url
        self.status_code = status
        self.text = body
        self.headers = {"content-type": content_type}
        self.encoding = "utf-8"
        self.apparent_encoding = "utf-8"

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} for url: {self.url}", response=self)


class FakeSession:
    """Serves canned bodies by URL; unknown URLs fail like a refused connection."""

    def __init__(self, pages: Dict[str, Tuple[int, str, str]]):
        self.pages = pages
        self.requested: List[str] = []

    def get(self, url, timeout=None, headers=None):
        self.requested.append(url)
        if url not in self.pages:
            raise requests.ConnectionError(f"connection refused: {url}")
        status, body, ctype = self.pages[url]
        return FakeResponse(url, status, body, ctype)


def html_page(body: str, head: str = "") -> Tuple[int, str, str]:
    return (200, f"<html><head>{head}</head><body>{body}</body></html>", "text/html; charset=utf-8")


def css_file(text: str, status: int = 200) -> Tuple[int, str, str]:
    return (status, text, "text/css; charset=utf-8")


def make_loader(pages: Dict[str, Tuple[str, Dict[Optional[str], str]]]):
    """Document loader over {url: (html, {stylesheet_url: css})}.

    A fresh Document is built on every call, like a real fetch.
    """

    def load(url: str) -> Document:
        if url not in pages:
            raise PageLoadError(url, "fetch failed (not found)")
        html, sheets = pages[url]
        stylesheets = [Stylesheet.from_text(css, url=sheet_url) for sheet_url, css in sheets.items()]
        return Document.from_html(html, url=url, stylesheets=stylesheets, inline_styles=False)

    return load


@pytest.fixture(autouse=True)
def _verbose_logging():
    set_verbose(True)
    yield
    set_verbose(True)
