"""
URL scope checks and canonicalization for developer.roku.com documentation links.

These helpers are not a general URL parser. They assume the fixed shape
``origin/[locale/]docs/...`` that the site uses for documentation pages.
"""

import posixpath

from roku_docs_scraper.config import BASE_ORIGIN, DOCS_SEGMENT


class MalformedURLError(ValueError):
    """Raised when a URL does not have the ``origin/[locale/]docs/...`` shape."""


def is_in_scope(url, base_origin=BASE_ORIGIN):
    """
    Check whether a raw link points at the documentation section of the site.

    Args:
        url (str): The raw link as extracted from an anchor.
        base_origin (str): Origin prefix the link must start with.

    Returns:
        bool: True if the link is non-empty, on the base origin and contains /docs/.
    """
    if not url:
        return False
    if not url.startswith(base_origin):
        return False
    return f"/{DOCS_SEGMENT}/" in url


def canonicalize(url):
    """
    Strip the locale segment and the fragment from a documentation URL.

    Splitting ``https://developer.roku.com/en-gb/docs/x`` on ``/`` puts either
    ``docs`` or a locale code such as ``en-gb`` at index 3. A locale code is
    removed; after that, index 3 must be ``docs``. Everything from the first
    ``#`` onwards is dropped.

    Args:
        url (str): An in-scope documentation URL.

    Returns:
        str: The canonical URL.

    Raises:
        MalformedURLError: If the URL has fewer than 4 segments or an
            unexpected prefix between the origin and ``docs``.
    """
    segments = url.split("/")
    if len(segments) < 4:
        raise MalformedURLError(f"Too few path segments: {url}")

    if segments[3] != DOCS_SEGMENT:
        segments = segments[:3] + segments[4:]
        if len(segments) < 4 or segments[3] != DOCS_SEGMENT:
            raise MalformedURLError(f"Unexpected path prefix before /{DOCS_SEGMENT}/: {url}")

    canonical = "/".join(segments)
    anchor_index = canonical.find("#")
    if anchor_index != -1:
        canonical = canonical[:anchor_index]
    return canonical


def derive_output_path(canonical_url, docs_prefix, storage_extension):
    """
    Map a canonical URL to the relative path of its raw artifact.

    ``https://developer.roku.com/docs/a/b.md`` becomes ``a/b.html`` for the
    ``.html`` storage extension. Directory-style URLs are stored as ``index``.

    Args:
        canonical_url (str): Canonical documentation URL.
        docs_prefix (str): Base URL ending in ``/docs/`` to strip.
        storage_extension (str): Extension of the stored artifact, with the dot.

    Returns:
        str: A relative POSIX path.

    Raises:
        MalformedURLError: If the URL is not below ``docs_prefix`` or would
            escape the output directory.
    """
    if not canonical_url.startswith(docs_prefix):
        raise MalformedURLError(f"URL is not below {docs_prefix}: {canonical_url}")

    relative = canonical_url[len(docs_prefix):]
    if not relative or relative.endswith("/"):
        relative += "index"

    parts = relative.split("/")
    if any(part in ("", ".", "..") for part in parts):
        raise MalformedURLError(f"Unsafe path segment in {canonical_url}")

    root, _ = posixpath.splitext(relative)
    return root + storage_extension
