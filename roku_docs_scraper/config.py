"""
Configuration settings for the Roku documentation scraper.

Values are read from environment variables (optionally loaded from a .env
file) and fall back to the defaults below. Keyword overrides passed to
ScraperConfig win over both, which is how the CLI and tests adjust a run.
"""

import json
import os
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from roku_docs_scraper.models import SeedTarget

# Configuration defaults
BASE_ORIGIN = "https://developer.roku.com/"
DOCS_SEGMENT = "docs"
BASE_OUTPUT_FOLDER = "output"
RAW_SUBDIR = "raw"
MARKDOWN_SUBDIR = os.path.join("md", "docs")
MAX_CONCURRENT = 10

# Page structure of developer.roku.com
CONTENT_SELECTOR = ".markdown-body"
CONTAINER_SELECTOR = ".content > div:nth-child(2)"
HEADING_SELECTOR = ".markdown-body > h1:nth-child(1)"
ERROR_MARKER = "doc-error"
ERROR_PLACEHOLDER = "Content container has .doc-error class. Scraping aborted."
STORAGE_EXTENSION = ".html"

# Collects the href of every anchor on the page
ANCHOR_HREFS_SCRIPT = "return Array.from(document.querySelectorAll('a')).map(a => a.href);"

DEFAULT_SEED_TARGETS_PATH = os.path.join(os.path.dirname(__file__), "seed_targets.json")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def load_seed_targets(path: str = DEFAULT_SEED_TARGETS_PATH) -> List[SeedTarget]:
    """
    Load the seed catalog from a JSON file.

    The file holds a list of objects with ``url`` and ``readiness_selector`` keys.

    Args:
        path (str): Path to the JSON seed file.

    Returns:
        list: SeedTarget entries in file order.

    Raises:
        ValueError: If an entry is missing one of the required keys.
    """
    with open(path, "r", encoding="utf-8") as f:
        entries = json.load(f)

    seeds = []
    for idx, entry in enumerate(entries):
        try:
            seeds.append(SeedTarget(url=entry["url"], readiness_selector=entry["readiness_selector"]))
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid seed entry #{idx} in {path}: {e}") from e
    return seeds


class ScraperConfig:
    """
    Settings for one scraper run.

    Attributes mirror the environment variables of the same name in lower case,
    e.g. ``MAX_CONCURRENT`` becomes ``config.max_concurrent``.
    """

    def __init__(self, env_file: Optional[str] = None, **overrides: Any):
        # Reported by the caller once logging is configured
        self.env_file = env_file
        self.env_file_loaded = bool(env_file) and os.path.exists(env_file)
        if self.env_file_loaded:
            load_dotenv(env_file, override=False)

        self._initialize_config()

        for key, value in overrides.items():
            if value is None:
                continue
            if not hasattr(self, key):
                raise ValueError(f"Unknown configuration option: {key}")
            setattr(self, key, value)

        if self.seed_targets is None:
            self.seed_targets = load_seed_targets(self.seed_targets_file)

        self._validate_config()

    def _initialize_config(self) -> None:
        # Scope
        self.base_origin = os.getenv("BASE_ORIGIN", BASE_ORIGIN)

        # Output layout
        self.output_dir = os.getenv("OUTPUT_DIR", BASE_OUTPUT_FOLDER)
        self.raw_subdir = os.getenv("RAW_SUBDIR", RAW_SUBDIR)
        self.markdown_subdir = os.getenv("MARKDOWN_SUBDIR", MARKDOWN_SUBDIR)
        self.storage_extension = os.getenv("STORAGE_EXTENSION", STORAGE_EXTENSION)

        # Concurrency and timeouts (seconds)
        self.max_concurrent = int(os.getenv("MAX_CONCURRENT", str(MAX_CONCURRENT)))
        self.page_load_timeout = float(os.getenv("PAGE_LOAD_TIMEOUT", "30"))
        self.discovery_timeout = float(os.getenv("DISCOVERY_TIMEOUT", "30"))
        self.content_timeout = float(os.getenv("CONTENT_TIMEOUT", "20"))
        self.heading_timeout = float(os.getenv("HEADING_TIMEOUT", "10"))
        self.settle_delay = float(os.getenv("SETTLE_DELAY", "1.0"))

        # Page structure
        self.content_selector = os.getenv("CONTENT_SELECTOR", CONTENT_SELECTOR)
        self.container_selector = os.getenv("CONTAINER_SELECTOR", CONTAINER_SELECTOR)
        self.heading_selector = os.getenv("HEADING_SELECTOR", HEADING_SELECTOR)
        self.error_marker = os.getenv("ERROR_MARKER", ERROR_MARKER)
        self.error_placeholder = ERROR_PLACEHOLDER
        self.anchor_script = ANCHOR_HREFS_SCRIPT

        # Browser and discovery behaviour
        self.headless = _env_bool("HEADLESS", "true")
        self.include_seed_urls = _env_bool("INCLUDE_SEED_URLS", "false")
        self.seed_targets_file = os.getenv("SEED_TARGETS_FILE", DEFAULT_SEED_TARGETS_PATH)
        self.seed_targets: Optional[List[SeedTarget]] = None

    def _validate_config(self) -> None:
        """Raise ValueError when a setting cannot produce a sane run."""
        if self.max_concurrent < 1:
            raise ValueError(f"Configuration error: max_concurrent must be at least 1, got {self.max_concurrent}")

        for name in ("page_load_timeout", "discovery_timeout", "content_timeout", "heading_timeout"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"Configuration error: {name} must be positive, got {value}")

        if self.settle_delay < 0:
            raise ValueError(f"Configuration error: settle_delay must not be negative, got {self.settle_delay}")

        if not self.storage_extension.startswith("."):
            raise ValueError(f"Configuration error: storage_extension must start with '.', got {self.storage_extension!r}")

        if not self.seed_targets:
            raise ValueError("Configuration error: no seed targets configured")

    @property
    def docs_prefix(self) -> str:
        """Base URL that every canonical documentation page starts with."""
        return self.base_origin.rstrip("/") + f"/{DOCS_SEGMENT}/"

    @property
    def raw_output_dir(self) -> str:
        return os.path.join(self.output_dir, self.raw_subdir)

    @property
    def markdown_output_dir(self) -> str:
        return os.path.join(self.output_dir, self.markdown_subdir)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "BASE_ORIGIN": self.base_origin,
            "OUTPUT_DIR": self.output_dir,
            "RAW_SUBDIR": self.raw_subdir,
            "MARKDOWN_SUBDIR": self.markdown_subdir,
            "STORAGE_EXTENSION": self.storage_extension,
            "MAX_CONCURRENT": self.max_concurrent,
            "PAGE_LOAD_TIMEOUT": self.page_load_timeout,
            "DISCOVERY_TIMEOUT": self.discovery_timeout,
            "CONTENT_TIMEOUT": self.content_timeout,
            "HEADING_TIMEOUT": self.heading_timeout,
            "SETTLE_DELAY": self.settle_delay,
            "CONTENT_SELECTOR": self.content_selector,
            "CONTAINER_SELECTOR": self.container_selector,
            "HEADING_SELECTOR": self.heading_selector,
            "ERROR_MARKER": self.error_marker,
            "HEADLESS": self.headless,
            "INCLUDE_SEED_URLS": self.include_seed_urls,
            "SEED_TARGETS": [seed.url for seed in self.seed_targets],
        }

