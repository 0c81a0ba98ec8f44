"""Tests for URL validation, the resource filter and PageLoader."""

from __future__ import annotations

import pytest

from conftest import FakeSession, css_file, html_page
from uncss.config import Settings
from uncss.loader import Document, PageLoader, PageLoadError, should_load, validate_url
from uncss.stylesheet import Stylesheet

SITE = "https://example.com"


class TestShouldLoad:
    @pytest.mark.parametrize(
        "url",
        [
            f"{SITE}/",
            f"{SITE}/about",
            f"{SITE}/css/site.css",
            f"{SITE}/CSS/SITE.CSS",
            f"{SITE}/styles?theme=dark",
            f"{SITE}/assets/site.css?v=3",
        ],
    )
    def test_allowed(self, url):
        assert should_load(url)

    @pytest.mark.parametrize("url", [f"{SITE}/img/logo.png", f"{SITE}/app.js", f"{SITE}/fonts/x.woff2"])
    def test_denied(self, url):
        assert not should_load(url)

    def test_excluded_stylesheet_name(self):
        url = f"{SITE}/vendor/bootstrap.min.css"
        assert should_load(url)
        assert not should_load(url, excluded=["bootstrap.min.css"])
        assert not should_load(url, excluded=["Bootstrap.Min.CSS"])
        assert should_load(f"{SITE}/site.css", excluded=["bootstrap.min.css"])


class TestValidateUrl:
    def test_accepts_http_and_https(self):
        assert validate_url(" https://example.com/page ") == "https://example.com/page"
        assert validate_url("http://localhost:8000/") == "http://localhost:8000/"

    @pytest.mark.parametrize("raw", ["not a url", "example.com/page", "ftp://example.com/", "http://", "http://[::1"])
    def test_rejects_malformed(self, raw):
        with pytest.raises(PageLoadError) as exc_info:
            validate_url(raw)
        assert "malformed" in exc_info.value.reason


class TestDocument:
    def test_query_first(self):
        doc = Document.from_html("<div class='a'><span id='x'>hi</span></div>")
        assert doc.query_first(".a > #x").get_text() == "hi"
        assert doc.query_first(".missing") is None

    def test_inline_styles_collected(self):
        doc = Document.from_html("<style>.a { color: red }</style><p class='a'></p>")
        assert [s.url for s in doc.stylesheets] == [None]

    def test_inline_styles_can_be_skipped(self):
        sheet = Stylesheet.from_text(".b{}", url=f"{SITE}/b.css")
        doc = Document.from_html("<style>.a{}</style>", stylesheets=[sheet], inline_styles=False)
        assert doc.stylesheets == [sheet]


class TestPageLoader:
    def test_collects_linked_and_inline_stylesheets_in_document_order(self):
        session = FakeSession(
            {
                f"{SITE}/blog/": html_page(
                    "<p class='a'>x</p>",
                    head=(
                        '<link rel="stylesheet" href="../css/site.css">'
                        "<style>.inline { color: red }</style>"
                        '<link rel="icon" href="/favicon.ico">'
                        '<link rel="stylesheet" href="/vendor/bootstrap.min.css">'
                        '<link rel="stylesheet" href="/fonts.woff2">'
                    ),
                ),
                f"{SITE}/css/site.css": css_file(".a { color: red }"),
            }
        )
        loader = PageLoader(Settings(excluded_stylesheets=("bootstrap.min.css",)), session=session)
        doc = loader.load(f"{SITE}/blog/")

        assert [s.url for s in doc.stylesheets] == [f"{SITE}/css/site.css", None]
        assert session.requested == [f"{SITE}/blog/", f"{SITE}/css/site.css"]
        assert doc.query_first(".a") is not None

    def test_base_href_resolves_links(self):
        session = FakeSession(
            {
                f"{SITE}/page": html_page("", head='<base href="/static/"><link rel="stylesheet" href="main.css">'),
                f"{SITE}/static/main.css": css_file(".m{}"),
            }
        )
        doc = PageLoader(session=session).load(f"{SITE}/page")
        assert [s.url for s in doc.stylesheets] == [f"{SITE}/static/main.css"]

    def test_missing_stylesheet_is_skipped_with_warning(self, capsys):
        session = FakeSession(
            {
                f"{SITE}/": html_page("", head='<link rel="stylesheet" href="/gone.css"><link rel="stylesheet" href="/ok.css">'),
                f"{SITE}/gone.css": css_file("", status=404),
                f"{SITE}/ok.css": css_file(".ok{}"),
            }
        )
        doc = PageLoader(session=session).load(f"{SITE}/")
        assert [s.url for s in doc.stylesheets] == [f"{SITE}/ok.css"]
        err = capsys.readouterr().err
        assert "[WARN]" in err
        assert "gone.css" in err

    def test_malformed_link_href_is_skipped_with_warning(self, capsys):
        session = FakeSession(
            {
                f"{SITE}/": html_page(
                    "", head='<link rel="stylesheet" href="http://[oops/x.css"><link rel="stylesheet" href="/ok.css">'
                ),
                f"{SITE}/ok.css": css_file(".ok{}"),
            }
        )
        doc = PageLoader(session=session).load(f"{SITE}/")
        assert [s.url for s in doc.stylesheets] == [f"{SITE}/ok.css"]
        assert session.requested == [f"{SITE}/", f"{SITE}/ok.css"]
        err = capsys.readouterr().err
        assert "[WARN]" in err
        assert "http://[oops/x.css" in err

    def test_malformed_base_href_is_ignored(self, capsys):
        session = FakeSession(
            {
                f"{SITE}/blog/": html_page("", head='<base href="http://[oops/"><link rel="stylesheet" href="site.css">'),
                f"{SITE}/blog/site.css": css_file(".s{}"),
            }
        )
        doc = PageLoader(session=session).load(f"{SITE}/blog/")
        assert [s.url for s in doc.stylesheets] == [f"{SITE}/blog/site.css"]
        assert "ignoring <base" in capsys.readouterr().err

    def test_requests_are_logged(self, capsys):
        session = FakeSession({f"{SITE}/": html_page("")})
        PageLoader(session=session).load(f"{SITE}/")
        assert f"[LOG] Requesting: {SITE}/" in capsys.readouterr().err

    def test_http_error_raises_page_load_error(self):
        session = FakeSession({f"{SITE}/": (500, "boom", "text/html")})
        with pytest.raises(PageLoadError) as exc_info:
            PageLoader(session=session).load(f"{SITE}/")
        assert "fetch failed" in exc_info.value.reason

    def test_connection_error_raises_page_load_error(self):
        with pytest.raises(PageLoadError):
            PageLoader(session=FakeSession({})).load(f"{SITE}/down")

    def test_malformed_url_never_hits_the_network(self):
        session = FakeSession({})
        with pytest.raises(PageLoadError):
            PageLoader(session=session).load("not a url")
        assert session.requested == []

    def test_callable(self):
        session = FakeSession({f"{SITE}/": html_page("<b class='x'></b>")})
        loader = PageLoader(session=session)
        assert loader(f"{SITE}/").query_first(".x") is not None
