"""
Per-URL fetch worker.

A worker walks one canonical URL through
Start -> Navigated -> ContentReady | ErrorDetected -> Extracted -> Written -> Done,
or ends in Failed when navigation, a wait or the write goes wrong. Failures
are returned as PageOutcome records and never propagate to sibling workers.
"""

import logging
import time

from selenium.common.exceptions import TimeoutException, WebDriverException

from roku_docs_scraper.file_utils import WriteError, build_artifact
from roku_docs_scraper.models import PageOutcome
from roku_docs_scraper.url_utils import MalformedURLError, derive_output_path

logger = logging.getLogger(__name__)


def has_error_marker(class_attribute, marker):
    return marker in class_attribute.split()


def fetch_page(session, url, config):
    """
    Drive an open browser session through the page readiness protocol.

    The site renders client-side with no single "loaded" signal, so after the
    content container shows up the worker waits ``settle_delay`` seconds
    before trusting the DOM. A container tagged with the error marker yields a
    placeholder instead of content.

    Args:
        session (BrowserSession): An open session owned by this worker.
        url (str): Canonical URL to fetch.
        config (ScraperConfig): Run configuration.

    Returns:
        PageOutcome: CONTENT with the article markup, or ERROR_MARKER.

    Raises:
        TimeoutException: If a bounded wait expires.
        WebDriverException: If navigation or DOM access fails.
    """
    session.navigate(url)
    logger.debug(f"Navigated: {url}")

    session.wait_visible(config.content_selector, config.content_timeout)
    if config.settle_delay:
        time.sleep(config.settle_delay)

    classes = session.read_attribute(config.container_selector, "class")
    if has_error_marker(classes, config.error_marker):
        logger.warning(f"Site reported an error page: {url}")
        return PageOutcome.error_marker(url, config.error_placeholder)

    session.wait_visible(config.heading_selector, config.heading_timeout)
    html = session.read_inner_html(config.content_selector)
    return PageOutcome.content(url, html)


def crawl_url(url, session_factory, admission, writer, config):
    """
    Fetch one canonical URL and persist its artifact.

    The admission slot is held from before the session opens until the
    session is closed, so at most ``max_concurrent`` sessions exist at once.

    Args:
        url (str): Canonical URL.
        session_factory (callable): Returns a new browser session.
        admission (AdmissionController): Session cap shared by all workers.
        writer (callable): Persists an OutputArtifact and returns its path.
        config (ScraperConfig): Run configuration.

    Returns:
        PageOutcome: The terminal outcome for this URL.
    """
    try:
        relative_path = derive_output_path(url, config.docs_prefix, config.storage_extension)
    except MalformedURLError as e:
        logger.error(f"[Path Error] {url} — {e}")
        return PageOutcome.failure(url, "path", str(e))

    with admission.slot():
        logger.info(f"Started: {url}")
        session = None
        try:
            session = session_factory()
            outcome = fetch_page(session, url, config)
        except TimeoutException as te:
            logger.error(f"[Timeout Error] {url} — {te}")
            return PageOutcome.failure(url, "timeout", str(te))
        except WebDriverException as wde:
            logger.error(f"[WebDriver Error] {url} — {wde}")
            return PageOutcome.failure(url, "navigation", str(wde))
        finally:
            if session is not None:
                session.close()

    artifact = build_artifact(url, relative_path, outcome.body)
    try:
        outcome.path = writer(artifact)
    except WriteError as e:
        logger.error(f"[Write Error] {url} — {e}")
        return PageOutcome.failure(url, "write", str(e))

    logger.info(f"Finished: {url}")
    return outcome
