"""Shared fixtures: an in-memory stand-in for the browser.

``FakeSite`` is used as the session factory. Every call opens a ``FakeSession``
that serves pages from a dict and raises Selenium's own exception types, so
the discovery and fetch code paths run unchanged without Chrome.
"""

from __future__ import annotations

import threading
import time
from collections import Counter
from typing import Dict, Iterable, List, Optional

import pytest
from selenium.common.exceptions import TimeoutException, WebDriverException

from roku_docs_scraper.config import ScraperConfig
from roku_docs_scraper.models import SeedTarget

DOCS = "https://developer.roku.com/docs/"
SEED_SELECTOR = "#document-nav-menu a"


class FakePage:
    def __init__(
        self,
        html: str = "<h1>Title</h1><p>Body text</p>",
        classes: str = "content-wrapper",
        hrefs: Iterable[str] = (),
        hidden: Iterable[str] = (),
        nav_error: bool = False,
        delay: float = 0.0,
    ) -> None:
        self.html = html
        self.classes = classes
        self.hrefs = list(hrefs)
        self.hidden = set(hidden)
        self.nav_error = nav_error
        self.delay = delay


class FakeSession:
    def __init__(self, site: "FakeSite") -> None:
        self.site = site
        self.page: Optional[FakePage] = None
        self.closed = False

    def navigate(self, url: str) -> None:
        self.site.record_navigation(url)
        page = self.site.pages.get(url)
        if page is None or page.nav_error:
            raise WebDriverException(f"net::ERR_NAME_NOT_RESOLVED {url}")
        if page.delay:
            time.sleep(page.delay)
        self.page = page

    def wait_visible(self, selector: str, timeout: float) -> None:
        if selector in self.page.hidden:
            raise TimeoutException(f"waiting for {selector}")

    def evaluate(self, script: str) -> List[str]:
        return list(self.page.hrefs)

    def read_attribute(self, selector: str, name: str) -> str:
        return self.page.classes

    def read_inner_html(self, selector: str) -> str:
        return self.page.html

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self.site.session_closed()


class FakeSite:
    """Session factory that also tracks how many sessions are open at once."""

    def __init__(self, pages: Optional[Dict[str, FakePage]] = None) -> None:
        self.pages = dict(pages or {})
        self.navigations: Counter = Counter()
        self.open_sessions = 0
        self.peak_sessions = 0
        self._lock = threading.Lock()

    def __call__(self) -> FakeSession:
        with self._lock:
            self.open_sessions += 1
            self.peak_sessions = max(self.peak_sessions, self.open_sessions)
        return FakeSession(self)

    def session_closed(self) -> None:
        with self._lock:
            self.open_sessions -= 1

    def record_navigation(self, url: str) -> None:
        with self._lock:
            self.navigations[url] += 1


@pytest.fixture
def make_config(tmp_path):
    """Build a ScraperConfig writing below tmp_path with no settle delay."""

    def _make(**overrides) -> ScraperConfig:
        overrides.setdefault("output_dir", str(tmp_path / "output"))
        overrides.setdefault("settle_delay", 0)
        overrides.setdefault("max_concurrent", 3)
        overrides.setdefault("seed_targets", [SeedTarget(DOCS + "features/features-overview.md", SEED_SELECTOR)])
        return ScraperConfig(**overrides)

    return _make


@pytest.fixture
def config(make_config) -> ScraperConfig:
    return make_config()
