import logging
import os

from roku_docs_scraper.file_utils import save_summary

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def setup_logging(output_dir, verbose=False):
    """
    Set up logging configuration.

    Configures logging to output to both a file in the output folder and the
    console with appropriate formatting and log level.

    Args:
        output_dir (str): Folder that receives scraper.log.
        verbose (bool, optional): Log at DEBUG instead of INFO. Defaults to False.

    Returns:
        Logger: A configured logger instance.
    """
    os.makedirs(output_dir, exist_ok=True)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(os.path.join(output_dir, "scraper.log"), encoding="utf-8"),
            logging.StreamHandler(),
        ],
        force=True,
    )
    return logging.getLogger(__name__)


def summarize_report(report, output_dir):
    """
    Log the outcome of a scrape run and save the summary files.

    Args:
        report (CrawlReport): The finished run's report.
        output_dir (str): Folder that receives summary.log and the URL logs.

    Returns:
        str or None: The path to summary.log.
    """
    logger = logging.getLogger(__name__)

    logger.info("\n📊 Crawl Summary:")
    logger.info(f"  - Raw links discovered: {report.raw_link_count}")
    logger.info(f"  - Unique documentation URLs: {report.canonical_count}")
    logger.info(f"  - Skipped (out of scope): {report.out_of_scope}")
    logger.info(f"  - Skipped (malformed): {report.malformed}")
    logger.info(f"  - Pages written: {len(report.written)}")
    logger.info(f"  - Error pages: {len(report.error_markers)}")
    logger.info(f"  - Failed pages: {len(report.failures)}")

    for seed_url, error in report.failed_seeds.items():
        logger.warning(f"    • Seed failed: {seed_url} ({error})")
    for outcome in report.failures:
        logger.warning(f"    • {outcome.url} [{outcome.stage}]")

    return save_summary(output_dir, report)
