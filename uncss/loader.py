from __future__ import annotations

import posixpath
from typing import Iterable, List, Optional, Union
from urllib.parse import urljoin, urlparse

import requests
import soupsieve
from bs4 import BeautifulSoup, ParserRejectedMarkup

from uncss.config import Settings
from uncss.log import log, warn
from uncss.selectors import compile_query
from uncss.stylesheet import Stylesheet


class PageLoadError(Exception):
    """A page could not be turned into a Document (bad URL, fetch or parse failure)."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


def validate_url(raw: str) -> str:
    url = (raw or "").strip()
    try:
        p = urlparse(url)
    except ValueError as e:
        raise PageLoadError(url, f"malformed URL ({e})") from e
    if p.scheme not in ("http", "https") or not p.netloc:
        raise PageLoadError(url, "malformed URL (expected http(s)://host/...)")
    return url


def should_load(url: str, excluded: Iterable[str] = ()) -> bool:
    """Resource filter for sub-requests made while loading a page.

    Extensionless paths are allowed, .css files are allowed unless their
    file name is excluded, anything else with an extension is skipped.
    """
    path = urlparse(url).path
    if "." not in path:
        return True
    if path.lower().endswith(".css"):
        name = posixpath.basename(path)
        return name.lower() not in {n.lower() for n in excluded}
    return False


def _response_text(resp) -> str:
    # requests falls back to ISO-8859-1 when the server sends no charset
    ctype = (resp.headers.get("content-type") or "").lower()
    if "charset=" not in ctype:
        resp.encoding = resp.apparent_encoding or "utf-8"
    return resp.text


def _is_stylesheet_link(tag) -> bool:
    rel = tag.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return "stylesheet" in [r.lower() for r in rel] and bool(tag.get("href"))


class Document:
    """A parsed page plus the stylesheets attached to it, in document order."""

    def __init__(self, soup: BeautifulSoup, url: Optional[str] = None, stylesheets: Optional[List[Stylesheet]] = None):
        self.soup = soup
        self.url = url
        self.stylesheets: List[Stylesheet] = list(stylesheets or [])

    @classmethod
    def from_html(cls, html: str, url: Optional[str] = None, stylesheets: Optional[List[Stylesheet]] = None, inline_styles: bool = True) -> "Document":
        soup = BeautifulSoup(html or "", "html.parser")
        doc = cls(soup, url=url, stylesheets=stylesheets)
        if inline_styles:
            for tag in soup.find_all("style"):
                doc.stylesheets.append(Stylesheet.from_text(tag.string or "", url=None))
        return doc

    def query_first(self, selector: Union[str, soupsieve.SoupSieve]):
        """First element matching selector, or None."""
        if isinstance(selector, str):
            selector = compile_query(selector)
        return selector.select_one(self.soup)


class PageLoader:
    """Fetch a page and its linked stylesheets with requests.

    A fresh requests.Session is opened per load unless one is injected,
    so concurrent loads never share a session.
    """

    def __init__(self, settings: Optional[Settings] = None, session=None):
        self.settings = settings or Settings()
        self._session = session

    def __call__(self, url: str) -> Document:
        return self.load(url)

    def load(self, url: str) -> Document:
        url = validate_url(url)
        if self._session is not None:
            return self._load(self._session, url)
        with requests.Session() as session:
            return self._load(session, url)

    def _get(self, session, url: str):
        log(f"Requesting: {url}")
        resp = session.get(url, timeout=self.settings.timeout, headers={"User-Agent": self.settings.user_agent})
        resp.raise_for_status()
        return resp

    def _load(self, session, url: str) -> Document:
        try:
            resp = self._get(session, url)
            html = _response_text(resp)
        except requests.RequestException as e:
            raise PageLoadError(url, f"fetch failed ({e})") from e
        try:
            soup = BeautifulSoup(html, "html.parser")
        except ParserRejectedMarkup as e:
            raise PageLoadError(url, f"parse failed ({e})") from e

        base_url = resp.url or url
        base = soup.find("base", href=True)
        if base is not None:
            try:
                base_url = urljoin(base_url, base["href"].strip())
            except ValueError as e:
                warn(f"{url}: ignoring <base href=\"{base['href']}\"> ({e})")

        doc = Document(soup, url=url)
        for tag in soup.find_all(["link", "style"]):
            if tag.name == "style":
                doc.stylesheets.append(Stylesheet.from_text(tag.string or "", url=None))
                continue
            if not _is_stylesheet_link(tag):
                continue
            href = tag["href"].strip()
            try:
                css_url = urljoin(base_url, href)
                allowed = should_load(css_url, self.settings.excluded_stylesheets)
            except ValueError as e:
                warn(f"{url}: stylesheet {href} skipped (malformed URL: {e})")
                continue
            if not allowed:
                log(f"Skipping stylesheet: {css_url}")
                continue
            try:
                css_resp = self._get(session, css_url)
                css_text = _response_text(css_resp)
            except requests.RequestException as e:
                warn(f"{url}: stylesheet {css_url} skipped ({e})")
                continue
            doc.stylesheets.append(Stylesheet.from_text(css_text, url=css_url))
        return doc
