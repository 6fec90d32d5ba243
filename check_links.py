#!/usr/bin/env python3
"""
Crawl a website from a base URL and report every broken link.
"""
from deadlinks.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
