import concurrent.futures
import logging

from roku_docs_scraper.admission import AdmissionController
from roku_docs_scraper.browser_utils import BrowserFactory
from roku_docs_scraper.dedup import assign_output_paths, deduplicate
from roku_docs_scraper.discovery import discover_links
from roku_docs_scraper.file_utils import ArtifactWriter
from roku_docs_scraper.models import CrawlReport, PageOutcome
from roku_docs_scraper.page_handlers import crawl_url

logger = logging.getLogger(__name__)


def _fetch_task(url, session_factory, admission, writer, config):
    try:
        return crawl_url(url, session_factory, admission, writer, config)
    except Exception as e:
        logger.error(f"[Unexpected Error] {url} — {e}")
        return PageOutcome.failure(url, "unexpected", str(e))


def fetch_all(urls, session_factory, writer, config):
    """
    Fetch every canonical URL on a pool of ``max_concurrent`` worker threads,
    gated by the admission cap.

    Returns only after every submitted URL has finished.

    Args:
        urls (iterable): Canonical URLs. Order is irrelevant.
        session_factory (callable): Returns a new browser session.
        writer (callable): Persists an OutputArtifact.
        config (ScraperConfig): Run configuration.

    Returns:
        list: One PageOutcome per URL.
    """
    admission = AdmissionController(config.max_concurrent)
    outcomes = []

    with concurrent.futures.ThreadPoolExecutor(
        max_workers=config.max_concurrent, thread_name_prefix="fetch"
    ) as executor:
        futures = [
            executor.submit(_fetch_task, url, session_factory, admission, writer, config)
            for url in urls
        ]
        for future in concurrent.futures.as_completed(futures):
            outcomes.append(future.result())

    logger.info(f"Fetched {len(outcomes)} pages (peak {admission.peak} concurrent sessions)")
    return outcomes


def run_crawl(config, session_factory=None, writer=None):
    """
    Run both phases: discover links from the seeds, then fetch every unique page.

    Args:
        config (ScraperConfig): Run configuration.
        session_factory (callable, optional): Returns a new browser session.
            Defaults to a Chrome BrowserFactory.
        writer (callable, optional): Persists an OutputArtifact. Defaults to
            an ArtifactWriter rooted at the raw output folder.

    Returns:
        CrawlReport: Counters, failed seeds and every page outcome.
    """
    session_factory = session_factory or BrowserFactory(config)
    writer = writer or ArtifactWriter(config.raw_output_dir)

    discovery = discover_links(config.seed_targets, session_factory, config)
    dedup = deduplicate(discovery.raw_links, config.base_origin)
    paths, rejected = assign_output_paths(dedup.urls, config.docs_prefix, config.storage_extension)

    report = CrawlReport(
        raw_link_count=len(discovery.raw_links),
        canonical_count=len(dedup.urls),
        out_of_scope=dedup.out_of_scope,
        malformed=dedup.malformed,
        failed_seeds=dict(discovery.failed_seeds),
    )

    logger.info(f"\n📦 Fetching {len(paths)} pages with up to {config.max_concurrent} browsers")
    report.outcomes = rejected + fetch_all(paths, session_factory, writer, config)
    return report
