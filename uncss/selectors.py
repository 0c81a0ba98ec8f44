from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple, Union

import soupsieve
import tinycss2

# States and generated content a static DOM query can never reach.
# Order matters: "::after" must go before ":after".
STRIPPED_PSEUDOS = (
    "::after",
    ":after",
    "::before",
    ":before",
    ":active",
    ":focus",
    ":hover",
)


class InvalidSelector(ValueError):
    """A selector soupsieve cannot compile for querying."""

    def __init__(self, selector: str, reason: str):
        super().__init__(f"{selector!r}: {reason}")
        self.selector = selector
        self.reason = reason


@dataclass(frozen=True)
class AtomicSelector:
    text: str


@dataclass(frozen=True)
class SelectorList:
    items: Tuple["Selector", ...]


Selector = Union[AtomicSelector, SelectorList]


def selector_text(tokens) -> str:
    """Serialize a prelude (token list), whitespace runs collapsed to one space."""
    out = []
    for tok in tokens:
        if tok.type == "whitespace":
            out.append(" ")
        else:
            out.append(tok.serialize())
    return "".join(out).strip()


def parse_selector(source: Union[str, Sequence]) -> Selector:
    """Split a selector prelude on top-level commas.

    Accepts selector text or a tinycss2 prelude. Commas nested inside
    functional pseudo-classes like :is(.a, .b) stay in their selector.
    """
    if isinstance(source, str):
        tokens = tinycss2.parse_component_value_list(source, skip_comments=True)
    else:
        tokens = [t for t in source if t.type != "comment"]

    groups: List[List] = [[]]
    for tok in tokens:
        if tok.type == "literal" and tok.value == ",":
            groups.append([])
        else:
            groups[-1].append(tok)

    atoms = [AtomicSelector(text) for text in (selector_text(g) for g in groups) if text]
    if len(atoms) == 1:
        return atoms[0]
    return SelectorList(tuple(atoms))


def decompose(selector: Selector) -> Iterator[AtomicSelector]:
    """Yield the atomic selectors of selector in source order.

    ".a, .b, .c" yields ".a", ".b" and ".c".
    """
    if isinstance(selector, SelectorList):
        for item in selector.items:
            yield from decompose(item)
    else:
        yield selector


def normalize(text: str) -> str:
    prev = None
    while prev != text:
        prev = text
        for pseudo in STRIPPED_PSEUDOS:
            text = text.replace(pseudo, "")
    return text.strip()


def _has_namespace_prefix(text: str) -> bool:
    # "|" outside [attr|=val] brackets is a namespace separator
    tokens = tinycss2.parse_component_value_list(text, skip_comments=True)
    return any(t.type == "literal" and t.value == "|" for t in tokens)


def compile_query(text: str) -> soupsieve.SoupSieve:
    if not text:
        raise InvalidSelector(text, "empty after normalization")
    if _has_namespace_prefix(text):
        # parsed HTML carries no namespace prefixes to match against
        raise InvalidSelector(text, "namespaced selectors are not supported")
    try:
        return soupsieve.compile(text)
    except soupsieve.SelectorSyntaxError as e:
        raise InvalidSelector(text, str(e).splitlines()[0]) from e
    except NotImplementedError as e:
        # soupsieve rejects pseudo-elements other than the stripped ones
        raise InvalidSelector(text, str(e)) from e
