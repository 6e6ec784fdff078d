#!/usr/bin/env python
"""CLI for the GEO visibility citation engine."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import BaseModel, field_validator

from geo_visibility.config import create_from_config, get_default_config_path, load_config
from geo_visibility.data import CheckCycleResult, PlanTier
from geo_visibility.events import LoggingEventSink
from geo_visibility.store import InMemoryCheckStore
from geo_visibility.url import clean_domain

logger = logging.getLogger(__name__)


class CLIArgs(BaseModel):
    """Validated CLI arguments."""

    domain: str
    config: Path
    plan: PlanTier = PlanTier.FREE
    category: str | None = None
    custom_queries: list[str] = []
    query: str | None = None
    site_id: str | None = None
    log: bool = False
    log_dir: str = "logs"

    @field_validator("domain")
    @classmethod
    def domain_must_be_valid(cls, v: str) -> str:
        cleaned = clean_domain(v)
        if not cleaned or "." not in cleaned:
            raise ValueError(f"Invalid domain: {v!r}")
        return cleaned

    @field_validator("config")
    @classmethod
    def config_must_exist(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"Config file not found: {v}")
        return v


def print_result(result: CheckCycleResult) -> None:
    """Log per-provider results, the summary, and ranked opportunities."""
    logger.info(f"\nResults for {result.domain}:\n")
    for r in result.results:
        if r.error:
            status = f"ERROR ({r.error})"
        elif r.cited:
            status = f"CITED (confidence {r.confidence:.2f})"
        else:
            status = "not cited"
        logger.info(f"[{r.platform}] {r.query}")
        logger.info(f"   {status}")

    logger.info("\n--- Summary ---")
    logger.info(f"Cited: {result.cited_count}/{len(result.results)}")
    logger.info(f"APIs called: {result.apis_called}")
    logger.info(f"Visibility: {result.visibility_percent}%")
    if result.running_score is not None:
        logger.info(f"Running score: {result.running_score}")
    if result.new_citations:
        logger.info(f"New citations: {result.new_citations}")
    for listing in result.trust_listings:
        if listing.error:
            logger.info(f"{listing.source_name}: unknown ({listing.error})")
        else:
            state = "listed" if listing.is_listed else "not listed"
            suffix = f" {listing.profile_url}" if listing.profile_url else ""
            logger.info(f"{listing.source_name}: {state}{suffix}")
    for error in result.persistence_errors:
        logger.info(f"Persistence error: {error}")

    if result.opportunities:
        logger.info("\n--- Opportunities ---")
        for i, opp in enumerate(result.opportunities, 1):
            logger.info(f"{i}. [{opp.impact}] {opp.query}")
            logger.info(f"   {opp.impact_reason} (buyer intent {opp.buyer_intent:.1f})")
            if opp.cited_domains:
                logger.info(f"   Cited instead: {', '.join(opp.cited_domains)}")
            if opp.trust_sources:
                logger.info(f"   Trust sources: {', '.join(opp.trust_sources)}")


async def run(args: CLIArgs) -> None:
    """Execute one check cycle with the given configuration.

    Args:
        args: Validated CLI arguments.
    """
    config = load_config(args.config)
    engine, run_logger = create_from_config(
        config,
        store=InMemoryCheckStore() if args.site_id else None,
        event_sink=LoggingEventSink() if args.site_id else None,
        log_override=args.log if args.log else None,
        log_dir_override=args.log_dir if args.log_dir != "logs" else None,
    )

    logger.info(f"Checking citations for: {args.domain}")
    logger.info(f"Config: {args.config}")

    result = await engine.run_check(
        args.domain,
        site_id=args.site_id,
        plan=args.plan,
        category=args.category,
        custom_queries=args.custom_queries,
        single_query=args.query,
    )
    print_result(result)

    if run_logger and run_logger.last_log_path:
        logger.info(f"\nRun log written to: {run_logger.last_log_path}")


def main() -> None:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Check whether AI assistants cite a domain, and where they don't."
    )
    parser.add_argument(
        "domain",
        help="Domain to check (e.g. acme.io)",
    )
    parser.add_argument(
        "--plan",
        "-p",
        type=str,
        default="free",
        choices=[t.value for t in PlanTier],
        help="Subscription tier deciding the query quota (default: free)",
    )
    parser.add_argument(
        "--category",
        type=str,
        default=None,
        help="Product category for template queries (e.g. crm, analytics)",
    )
    parser.add_argument(
        "--custom-query",
        action="append",
        default=[],
        dest="custom_queries",
        help="Custom query to check; may be given more than once",
    )
    parser.add_argument(
        "--query",
        "-q",
        type=str,
        default=None,
        help="Re-check a single query on every provider instead of a full sweep",
    )
    parser.add_argument(
        "--site-id",
        type=str,
        default=None,
        help="Site ID; enables in-memory persistence, gap history and events",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default: $GEO_VISIBILITY_CONFIG or configs/default.yaml)",
    )
    parser.add_argument(
        "--log",
        action="store_true",
        default=False,
        help="Enable stage logging to a JSON file",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default="logs",
        help="Directory for log files (default: logs/)",
    )

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    ns = parser.parse_args()
    config_path: Path = ns.config if ns.config else get_default_config_path()

    try:
        args = CLIArgs(
            domain=ns.domain,
            config=config_path,
            plan=ns.plan,
            category=ns.category,
            custom_queries=ns.custom_queries,
            query=ns.query,
            site_id=ns.site_id,
            log=ns.log,
            log_dir=ns.log_dir,
        )
    except Exception as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
