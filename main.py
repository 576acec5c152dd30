#!/usr/bin/env python3
"""
AI Tools Directory Crawler
Collects AI tool listings from public directories into a JSON Lines dataset
"""

from aitools_crawler.runner import cli

if __name__ == "__main__":
    cli()
