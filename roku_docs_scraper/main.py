"""
Main entry point for the Roku documentation scraper.

Commands:
    scrape   discover and fetch every documentation page into the raw tree
    html2md  convert the raw tree into Markdown
    all      scrape, then html2md
"""

import argparse
import logging
import sys

from roku_docs_scraper.config import ScraperConfig, load_seed_targets
from roku_docs_scraper.content_processor import convert_raw_tree
from roku_docs_scraper.crawler import run_crawl
from roku_docs_scraper.logger import setup_logging, summarize_report


def build_parser():
    parser = argparse.ArgumentParser(
        prog="roku-docs-scraper",
        description="Mirror the Roku developer documentation for offline use",
    )
    parser.add_argument("--env-file", help="Load settings from this .env file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--output-dir", help="Root folder for all output (default: output)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    scrape = subparsers.add_parser("scrape", help="Discover and fetch every documentation page")
    all_cmd = subparsers.add_parser("all", help="Scrape, then convert to Markdown")
    for sub in (scrape, all_cmd):
        sub.add_argument("--max-concurrent", type=int, help="Maximum browsers open at once")
        sub.add_argument("--seeds", help="JSON file with the seed pages to discover links from")
        sub.add_argument("--settle-delay", type=float, help="Seconds to wait for client-side rendering")
        sub.add_argument(
            "--include-seed-urls",
            action="store_true",
            default=None,
            help="Also fetch each seed page itself",
        )
        sub.add_argument(
            "--no-headless",
            dest="headless",
            action="store_false",
            default=None,
            help="Show the browser windows",
        )

    subparsers.add_parser("html2md", help="Convert the raw HTML tree into Markdown")
    return parser


def build_config(args):
    overrides = {
        "output_dir": args.output_dir,
        "max_concurrent": getattr(args, "max_concurrent", None),
        "settle_delay": getattr(args, "settle_delay", None),
        "include_seed_urls": getattr(args, "include_seed_urls", None),
        "headless": getattr(args, "headless", None),
    }
    seeds = getattr(args, "seeds", None)
    if seeds:
        overrides["seed_targets"] = load_seed_targets(seeds)
    return ScraperConfig(args.env_file, **overrides)


def scrape(config):
    logger = logging.getLogger(__name__)
    logger.info("Starting Roku documentation scraper")
    report = run_crawl(config)
    summarize_report(report, config.output_dir)
    if report.failures:
        logger.error(f"❌ {len(report.failures)} pages failed, see failed_urls.log")
    else:
        logger.info("Scraping completed successfully")
    return report.exit_code


def html2md(config):
    report = convert_raw_tree(config.raw_output_dir, config.markdown_output_dir, config.storage_extension)
    return report.exit_code


def main(argv=None):
    """
    Parse arguments, run the requested command and return its exit status.

    Returns:
        int: 0 on success, 1 if any page failed, 2 on configuration errors.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
    except (ValueError, OSError) as e:
        parser.error(str(e))

    logger = setup_logging(config.output_dir, args.verbose)
    if config.env_file_loaded:
        logger.info(f"Loaded environment variables from {config.env_file}")
    elif config.env_file:
        logger.warning(f"Environment file not found: {config.env_file}")
    logger.debug(f"Configuration: {config.as_dict()}")

    if args.command == "scrape":
        return scrape(config)
    if args.command == "html2md":
        return html2md(config)

    scrape_status = scrape(config)
    return max(scrape_status, html2md(config))


if __name__ == "__main__":
    sys.exit(main())
