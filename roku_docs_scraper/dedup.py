import logging

from roku_docs_scraper.config import BASE_ORIGIN
from roku_docs_scraper.models import DedupResult, PageOutcome
from roku_docs_scraper.url_utils import MalformedURLError, canonicalize, derive_output_path, is_in_scope

logger = logging.getLogger(__name__)


def deduplicate(raw_links, base_origin=BASE_ORIGIN):
    """
    Collapse discovered links into the set of canonical, in-scope URLs.

    Out-of-scope links are dropped silently; malformed ones are dropped and
    logged. Runs single-threaded after the discovery barrier, so the set needs
    no lock.

    Args:
        raw_links (iterable): Link strings exactly as extracted from seed pages.
        base_origin (str): Origin prefix that in-scope links start with.

    Returns:
        DedupResult: The canonical URL set plus drop counters.
    """
    result = DedupResult()
    for link in raw_links:
        if not is_in_scope(link, base_origin):
            result.out_of_scope += 1
            continue
        try:
            result.urls.add(canonicalize(link))
        except MalformedURLError as e:
            logger.warning(f"Skipping malformed URL: {e}")
            result.malformed += 1

    logger.info(
        f"🔗 {len(result.urls)} unique documentation URLs "
        f"({result.out_of_scope} out of scope, {result.malformed} malformed)"
    )
    return result


def assign_output_paths(urls, docs_prefix, storage_extension):
    """
    Give every canonical URL its own artifact path.

    Distinct canonical URLs can still map to one file, e.g. ``docs/a.md`` and
    ``docs/a`` both become ``a.html``. URLs are claimed in sorted order, so the
    first one keeps the path on every run and the rest are rejected.

    Args:
        urls (iterable): Canonical URLs.
        docs_prefix (str): Base URL ending in ``/docs/``.
        storage_extension (str): Extension of the stored artifact, with the dot.

    Returns:
        tuple: (dict of URL to relative path for the URLs to fetch,
        list of PageOutcome failures with stage ``path``).
    """
    claimed = {}
    rejected = []
    for url in sorted(urls):
        try:
            relative_path = derive_output_path(url, docs_prefix, storage_extension)
        except MalformedURLError as e:
            logger.error(f"[Path Error] {url} — {e}")
            rejected.append(PageOutcome.failure(url, "path", str(e)))
            continue

        owner = claimed.get(relative_path)
        if owner is not None:
            logger.error(f"[Path Error] {url} — collides with {owner}")
            rejected.append(PageOutcome.failure(url, "path", f"collides with {owner}"))
            continue
        claimed[relative_path] = url

    return {url: path for path, url in claimed.items()}, rejected
