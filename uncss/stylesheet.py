from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

import tinycss2

from uncss.log import warn

# At-rules whose block holds ordinary style rules. @keyframes, @font-face,
# @page and friends carry descriptors or keyframe selectors instead.
GROUPING_AT_RULES = {"media", "supports", "layer", "container", "document", "-moz-document", "scope"}


@dataclass
class Stylesheet:
    url: Optional[str]  # None for inline <style>
    rules: List = field(default_factory=list)

    @classmethod
    def from_text(cls, css_text: str, url: Optional[str] = None) -> "Stylesheet":
        rules = tinycss2.parse_stylesheet(css_text or "", skip_comments=True, skip_whitespace=True)
        return cls(url=url, rules=rules)

    @property
    def label(self) -> str:
        return self.url or "inline"

    def style_rules(self) -> Iterator:
        return iter_style_rules(self.rules, origin=self.label)


def iter_style_rules(nodes, origin: str = "inline") -> Iterator:
    """Yield every qualified (style) rule, descending into grouping at-rules."""
    for node in nodes:
        if node.type == "qualified-rule":
            yield node
        elif node.type == "at-rule":
            name = node.lower_at_keyword
            if name in GROUPING_AT_RULES and node.content is not None:
                inner = tinycss2.parse_rule_list(node.content, skip_comments=True, skip_whitespace=True)
                yield from iter_style_rules(inner, origin=origin)
        elif node.type == "error":
            warn(f"{origin}: CSS parse error at {node.source_line}:{node.source_column}: {node.message}")
