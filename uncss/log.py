from __future__ import annotations

import sys
import threading

_verbose = True
_lock = threading.Lock()


def set_verbose(flag: bool) -> None:
    global _verbose
    _verbose = bool(flag)


def _emit(tag: str, msg: str) -> None:
    # worker threads print concurrently; keep lines whole
    with _lock:
        print(f"[{tag}] {msg}", file=sys.stderr, flush=True)


def log(msg: str) -> None:
    if _verbose:
        _emit("LOG", msg)


def warn(msg: str) -> None:
    _emit("WARN", msg)


def error(msg: str) -> None:
    _emit("ERROR", msg)
