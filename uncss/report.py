from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Iterable, List, Union

from uncss.registry import RuleRecord

INLINE_LABEL = "inline"


def format_line(record: RuleRecord) -> str:
    return f"{record.rule.stylesheet_url or INLINE_LABEL}: {record.rule.selector}"


def print_unused(records: Iterable[RuleRecord], stream=None) -> int:
    stream = stream or sys.stdout
    n = 0
    for record in records:
        print(format_line(record), file=stream)
        n += 1
    return n


def dump_records(records: Iterable[RuleRecord]) -> List[dict]:
    return [r.to_dict() for r in records]


def write_dump(records: Iterable[RuleRecord], path: Union[str, Path]) -> Path:
    """Write every rule, used or not, as indented JSON. OSError propagates."""
    out = Path(path)
    if out.parent and not out.parent.exists():
        out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(dump_records(records), ensure_ascii=False, indent=2), encoding="utf-8")
    return out
