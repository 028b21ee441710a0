"""
Link discovery from the seed index pages.

One thread per seed opens its own browser session, waits for the seed's
navigation menu to render and collects every anchor href on the page. Each
thread reports through a queue; the results are merged only after every
thread has been joined, so the fetch phase never starts on a partial union.
"""

import logging
import queue
import threading

from selenium.common.exceptions import TimeoutException, WebDriverException

from roku_docs_scraper.models import DiscoveryResult, SeedResult

logger = logging.getLogger(__name__)


def discover_seed(seed, session_factory, config):
    """
    Collect the raw links of a single seed page.

    Args:
        seed (SeedTarget): The seed page and its readiness selector.
        session_factory (callable): Returns a new browser session.
        config (ScraperConfig): Run configuration.

    Returns:
        SeedResult: The links found, or the error that stopped this seed.
    """
    logger.info(f"Started scraping seed url: {seed.url}")
    session = None
    try:
        session = session_factory()
        session.navigate(seed.url)
        session.wait_visible(seed.readiness_selector, config.discovery_timeout)
        hrefs = session.evaluate(config.anchor_script) or []
    except TimeoutException as te:
        logger.error(f"[Discovery Timeout] {seed.url} — {te}")
        return SeedResult(seed=seed, error=f"timeout: {te}")
    except WebDriverException as wde:
        logger.error(f"[WebDriver Error] {seed.url} — {wde}")
        return SeedResult(seed=seed, error=f"navigation: {wde}")
    finally:
        if session is not None:
            session.close()

    links = [href for href in hrefs if isinstance(href, str)]
    if config.include_seed_urls:
        links.append(seed.url)

    logger.info(f"Finished scraping seed url: {seed.url} ({len(links)} links)")
    return SeedResult(seed=seed, links=links)


def _discovery_task(result_queue, seed, session_factory, config):
    try:
        result = discover_seed(seed, session_factory, config)
    except Exception as e:
        logger.error(f"[Discovery Error] {seed.url} — {e}")
        result = SeedResult(seed=seed, error=f"unexpected: {e}")
    result_queue.put(result)


def discover_links(seeds, session_factory, config):
    """
    Run discovery for every seed in parallel and merge the results.

    A seed that times out or fails to load contributes no links; the other
    seeds are unaffected.

    Args:
        seeds (list): SeedTarget entries.
        session_factory (callable): Returns a new browser session.
        config (ScraperConfig): Run configuration.

    Returns:
        DiscoveryResult: All raw links plus the failed seeds and their errors.
    """
    result_queue = queue.Queue()
    threads = []

    for seed in seeds:
        t = threading.Thread(
            target=_discovery_task,
            args=(result_queue, seed, session_factory, config),
            name=f"discover-{len(threads)}",
        )
        t.start()
        threads.append(t)

    for t in threads:
        t.join()

    discovery = DiscoveryResult()
    while not result_queue.empty():
        seed_result = result_queue.get_nowait()
        if seed_result.ok:
            discovery.raw_links.extend(seed_result.links)
        else:
            discovery.failed_seeds[seed_result.seed.url] = seed_result.error

    logger.info(
        f"📦 Discovery complete — {len(discovery.raw_links)} raw links from "
        f"{len(seeds) - len(discovery.failed_seeds)}/{len(seeds)} seeds"
    )
    return discovery
