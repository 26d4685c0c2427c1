"""Run one ingestion cycle from the command line.

Usage:
  python scripts/fetch_news.py -n 5
  python scripts/fetch_news.py --provider news_api --no-summary --no-persist

Reads configuration from .env via pydantic settings. Prints the article count,
the top N items (title + URL) and the summary when one was produced.
"""

from __future__ import annotations

import argparse
import asyncio
import os
from typing import List

from dotenv import load_dotenv

from ingestion.services.container import build_services
from ingestion.services.deduplicator import dedupe_and_sort
from ingestion.settings import get_settings
from ingestion.tasks.collect import EmptyResultError, collect_articles, run_ingestion_cycle
from ingestion.utils.logging import configure_logging


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="News ingestion smoke run")
    parser.add_argument("-n", "--top", type=int, default=5, help="Print top N items (default: 5)")
    parser.add_argument("--provider", choices=["gdelt", "news_api"], help="Override NEWS_PROVIDER")
    parser.add_argument("--no-summary", action="store_true", help="Skip the summarization stage")
    parser.add_argument("--no-persist", action="store_true", help="Fetch only; do not write to the database")
    args = parser.parse_args(argv)

    load_dotenv()
    if args.provider:
        os.environ["NEWS_PROVIDER"] = args.provider
    if args.no_summary:
        os.environ["SUMMARY_ENABLED"] = "false"

    cfg = get_settings()
    configure_logging(cfg.log_level, json_enabled=cfg.log_json)
    services = build_services(cfg)
    print("Config:", {"provider": cfg.news_provider, "queries": len(cfg.search_queries), "db": cfg.database_url})

    try:
        if args.no_persist:
            fetched = asyncio.run(
                collect_articles(services.connector, cfg.search_queries, services.relevance_filter)
            )
            articles, summary = dedupe_and_sort(fetched), None
        else:
            services.ensure_schema()
            result = asyncio.run(run_ingestion_cycle(services))
            articles = result.articles
            summary = result.analysis.summary if result.analysis else None
    except EmptyResultError as exc:
        print(f"Empty result: {exc}")
        return 2

    print(f"Collected {len(articles)} articles.")
    for idx, article in enumerate(articles[: args.top], start=1):
        print(f"{idx}. [{article.language}] {article.title[:120]}\n   {article.url}")
    if summary:
        print("\n" + summary)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
