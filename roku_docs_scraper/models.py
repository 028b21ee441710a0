"""Data models shared by the discovery, fetch and reporting stages."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set


@dataclass(frozen=True)
class SeedTarget:
    """An entry-point index page and the selector that marks its menu as rendered."""

    url: str
    readiness_selector: str


@dataclass
class SeedResult:
    """What one discovery task produced for its seed."""

    seed: SeedTarget
    links: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class DiscoveryResult:
    """Merged output of the discovery phase, built after every seed task has finished."""

    raw_links: List[str] = field(default_factory=list)
    failed_seeds: Dict[str, str] = field(default_factory=dict)


@dataclass
class DedupResult:
    urls: Set[str] = field(default_factory=set)
    out_of_scope: int = 0
    malformed: int = 0


class OutcomeKind(Enum):
    CONTENT = "content"
    ERROR_MARKER = "error_marker"
    FAILURE = "failure"


@dataclass
class PageOutcome:
    """
    Result of fetching one canonical URL.

    ``body`` holds the extracted markup for CONTENT and the placeholder text
    for ERROR_MARKER. FAILURE outcomes carry the ``stage`` that failed
    (``timeout``, ``navigation``, ``write`` or ``unexpected``) and its cause.
    """

    url: str
    kind: OutcomeKind
    body: str = ""
    stage: Optional[str] = None
    cause: Optional[str] = None
    path: Optional[str] = None

    @classmethod
    def content(cls, url: str, html: str) -> "PageOutcome":
        return cls(url=url, kind=OutcomeKind.CONTENT, body=html)

    @classmethod
    def error_marker(cls, url: str, placeholder: str) -> "PageOutcome":
        return cls(url=url, kind=OutcomeKind.ERROR_MARKER, body=placeholder)

    @classmethod
    def failure(cls, url: str, stage: str, cause: str) -> "PageOutcome":
        return cls(url=url, kind=OutcomeKind.FAILURE, stage=stage, cause=cause.strip())

    @property
    def failed(self) -> bool:
        return self.kind is OutcomeKind.FAILURE


@dataclass(frozen=True)
class OutputArtifact:
    """A raw artifact ready to be persisted: relative path plus provenance-prefixed body."""

    path: str
    body: str


@dataclass
class CrawlReport:
    """Aggregate of a full scrape run."""

    raw_link_count: int = 0
    canonical_count: int = 0
    out_of_scope: int = 0
    malformed: int = 0
    failed_seeds: Dict[str, str] = field(default_factory=dict)
    outcomes: List[PageOutcome] = field(default_factory=list)

    @property
    def failures(self) -> List[PageOutcome]:
        return [o for o in self.outcomes if o.kind is OutcomeKind.FAILURE]

    @property
    def error_markers(self) -> List[PageOutcome]:
        return [o for o in self.outcomes if o.kind is OutcomeKind.ERROR_MARKER]

    @property
    def written(self) -> List[PageOutcome]:
        return [o for o in self.outcomes if not o.failed and o.path]

    @property
    def exit_code(self) -> int:
        return 1 if self.failures else 0


@dataclass
class ConversionReport:
    converted: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0
