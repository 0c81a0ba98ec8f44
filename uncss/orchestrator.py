from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from uncss.analyzer import DocumentLoader, PageSummary, analyze_page
from uncss.loader import PageLoader
from uncss.log import log
from uncss.registry import RuleRecord, RuleRegistry


def clean_urls(urls: Iterable[str]) -> List[str]:
    """Strip, drop blanks, dedupe keeping first-seen order."""
    return list(dict.fromkeys(u.strip() for u in urls if u and u.strip()))


def _sort_key(record: RuleRecord):
    # inline stylesheets (no URL) sort first
    return (record.rule.stylesheet_url or "", record.rule.selector)


def collect_unused(records: Iterable[RuleRecord]) -> List[RuleRecord]:
    return sorted((r for r in records if not r.used), key=_sort_key)


@dataclass
class Report:
    records: List[RuleRecord] = field(default_factory=list)
    unused: List[RuleRecord] = field(default_factory=list)
    pages: List[PageSummary] = field(default_factory=list)

    @property
    def failed_urls(self) -> List[str]:
        return [p.url for p in self.pages if not p.ok]

    @property
    def used_count(self) -> int:
        return len(self.records) - len(self.unused)


def run(
    urls: Iterable[str],
    registry: Optional[RuleRegistry] = None,
    load_document: Optional[DocumentLoader] = None,
    max_workers: Optional[int] = None,
) -> Report:
    """Analyze every URL concurrently against one shared registry and reduce it."""
    registry = registry if registry is not None else RuleRegistry()
    load_document = load_document or PageLoader()
    targets = clean_urls(urls)

    pages: List[PageSummary] = []
    if targets:
        # no cap by default: one worker per page
        workers = max_workers or len(targets)
        log(f"Analyzing {len(targets)} page(s) with {workers} worker(s)")
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(analyze_page, url, registry, load_document) for url in targets]
            pages = [f.result() for f in futures]

    records = sorted(registry.records(), key=_sort_key)
    return Report(records=records, unused=collect_unused(records), pages=pages)
