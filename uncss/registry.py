from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Rule:
    """One atomic selector of one stylesheet.

    Identity is (stylesheet_url, selector); query and rule_text ride along
    for matching and reporting but never take part in equality.
    """

    stylesheet_url: Optional[str]
    selector: str
    query: str = field(default="", compare=False)
    rule_text: str = field(default="", compare=False)

    @property
    def key(self) -> Tuple[Optional[str], str]:
        return (self.stylesheet_url, self.selector)


class Usage:
    """First page URL a rule matched on. Set at most once."""

    __slots__ = ("_lock", "_url")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._url: Optional[str] = None

    @property
    def url(self) -> Optional[str]:
        return self._url

    @property
    def used(self) -> bool:
        return self._url is not None

    def claim(self, url: str) -> bool:
        if not url:
            raise ValueError("usage url must be non-empty")
        with self._lock:
            if self._url is not None:
                return False
            self._url = url
            return True


@dataclass(frozen=True)
class RuleRecord:
    rule: Rule
    usage_url: Optional[str]

    @property
    def used(self) -> bool:
        return self.usage_url is not None

    def to_dict(self) -> dict:
        return {
            "stylesheet_url": self.rule.stylesheet_url,
            "selector": self.rule.selector,
            "rule_text": self.rule.rule_text,
            "usage_url": self.usage_url,
            "used": self.used,
        }


class RuleRegistry:
    """Rules seen across all pages, shared by every page worker.

    The registry lock only guards the dict insertion in get_or_insert.
    Claiming usage locks the single rule being claimed.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: Dict[Rule, Tuple[Rule, Usage]] = {}

    def get_or_insert(self, candidate: Rule) -> Rule:
        entry = self._entries.get(candidate)
        if entry is not None:
            return entry[0]
        with self._lock:
            entry = self._entries.get(candidate)
            if entry is None:
                entry = (candidate, Usage())
                self._entries[candidate] = entry
        return entry[0]

    def _usage(self, rule: Rule) -> Usage:
        try:
            return self._entries[rule][1]
        except KeyError:
            raise KeyError(f"rule not registered: {rule.key!r}") from None

    def is_used(self, rule: Rule) -> bool:
        return self._usage(rule).used

    def usage_url(self, rule: Rule) -> Optional[str]:
        return self._usage(rule).url

    def claim(self, rule: Rule, url: str) -> bool:
        """Record url as the page rule matched on; True only for the winner."""
        return self._usage(rule).claim(url)

    def records(self) -> List[RuleRecord]:
        with self._lock:
            entries = list(self._entries.values())
        return [RuleRecord(rule, usage.url) for rule, usage in entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, rule: object) -> bool:
        return rule in self._entries
