from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from uncss.loader import Document, PageLoader, PageLoadError
from uncss.log import log, warn
from uncss.registry import Rule, RuleRegistry
from uncss.selectors import InvalidSelector, compile_query, decompose, normalize, parse_selector, selector_text

DocumentLoader = Callable[[str], Document]


@dataclass
class PageSummary:
    url: str
    stylesheets: int = 0
    rules: int = 0
    selectors: int = 0
    queries: int = 0
    claimed: int = 0
    skipped: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def analyze_document(doc: Document, url: str, registry: RuleRegistry, summary: Optional[PageSummary] = None) -> PageSummary:
    """Register every atomic selector of doc's stylesheets and claim the ones doc matches."""
    summary = summary or PageSummary(url=url)
    for sheet in doc.stylesheets:
        summary.stylesheets += 1
        for css_rule in sheet.style_rules():
            summary.rules += 1
            rule_text = selector_text(css_rule.prelude)
            for atom in decompose(parse_selector(css_rule.prelude)):
                summary.selectors += 1
                query = normalize(atom.text)
                try:
                    compiled = compile_query(query)
                except InvalidSelector as e:
                    warn(f"{sheet.label}: skipping selector {atom.text!r} ({e.reason})")
                    summary.skipped += 1
                    continue

                rule = registry.get_or_insert(Rule(sheet.url, atom.text, query=query, rule_text=rule_text))
                if registry.is_used(rule):
                    continue

                summary.queries += 1
                if doc.query_first(compiled) is not None:
                    if registry.claim(rule, url):
                        summary.claimed += 1
                    # the CSS rule is used; its other selectors need no query on this page
                    break
    return summary


def analyze_page(url: str, registry: RuleRegistry, load_document: Optional[DocumentLoader] = None) -> PageSummary:
    load_document = load_document or PageLoader()
    summary = PageSummary(url=url)
    try:
        doc = load_document(url)
    except PageLoadError as e:
        warn(f"Skipping page {e}")
        summary.error = e.reason
        return summary

    analyze_document(doc, url, registry, summary)
    log(
        f"Analyzed {url}: stylesheets={summary.stylesheets} rules={summary.rules} "
        f"selectors={summary.selectors} queries={summary.queries} claimed={summary.claimed}"
    )
    return summary
