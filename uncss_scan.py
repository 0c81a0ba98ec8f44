#!/usr/bin/env python3
"""
Find unused CSS rules across one or more pages.

This is a thin wrapper around uncss/cli.py so you can run it from a checkout:

  python uncss_scan.py https://example.com/ https://example.com/about

Flags pass-through to the underlying tool:
  --output PATH              JSON dump of every rule (default output.json)
  --no-dump                  Console report only
  --timeout SECONDS          Per-request timeout (default 30)
  --max-workers N            Cap concurrent pages (default 0 = one per URL)
  --exclude-stylesheet NAME  Stylesheet file name never fetched (repeatable)
  --user-agent UA            User-Agent header
  --quiet                    Hide [LOG] progress lines
"""

import sys
import os


def main():
    # Ensure repo root is on sys.path so we can import uncss.*
    repo_root = os.path.dirname(os.path.abspath(__file__))
    sys.path.insert(0, repo_root)
    from uncss.cli import main as tool_main
    return tool_main()


if __name__ == "__main__":
    sys.exit(main())
