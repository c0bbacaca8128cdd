#!/usr/bin/env python3
"""Resolve titles against the live upstream catalog. Useful for curating overrides.

Usage:
    uv run python scripts/resolve_lookup.py "one-piece-100"
    uv run python scripts/resolve_lookup.py "Shangri-La" "attack-on-titan-2nd-season"
"""

import argparse
import logging
import sys

import httpx

from animeproxy.config import settings
from animeproxy.matching.normalizer import normalize_query
from animeproxy.matching.resolver import FallbackSearch
from animeproxy.upstream import UpstreamClient


def main():
    parser = argparse.ArgumentParser(
        description="Show upstream candidates and the resolved match for titles"
    )
    parser.add_argument("titles", nargs="+", help="Slugs or free-text titles")
    parser.add_argument(
        "--base-url", default=settings.upstream_base_url, help="Upstream API origin"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s - %(levelname)s - %(message)s",
    )

    with httpx.Client(timeout=settings.upstream_timeout_seconds) as client:
        upstream = UpstreamClient(client, args.base_url)
        resolver = FallbackSearch(upstream)

        for raw in args.titles:
            query = normalize_query(raw)
            print(f"\n{'=' * 60}")
            print(f"Input: {raw}")
            print(f"Query: {query}")
            print("=" * 60)

            candidates = upstream.search(query)
            if not candidates:
                print("  No direct results")
            for candidate in candidates:
                print(f"  ID: {candidate.id:>40}  {candidate.title}")

            resolved = resolver.resolve(query, query)
            if resolved:
                print(f"  -> {resolved.title} ({resolved.id})")
            else:
                print("  -> no verified match")


if __name__ == "__main__":
    sys.exit(main() or 0)
