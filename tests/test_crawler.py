"""End-to-end tests of the two-phase pipeline against ``FakeSite``."""

from __future__ import annotations

import os
import threading

from conftest import DOCS, SEED_SELECTOR, FakePage, FakeSite

from roku_docs_scraper.crawler import fetch_all, run_crawl
from roku_docs_scraper.file_utils import ArtifactWriter
from roku_docs_scraper.logger import summarize_report
from roku_docs_scraper.models import OutcomeKind, SeedTarget

SEED = SeedTarget(DOCS + "features/features-overview.md", SEED_SELECTOR)
OTHER_SEED = SeedTarget(DOCS + "specs/specs-overview.md", SEED_SELECTOR)


def _article(name: str) -> FakePage:
    return FakePage(html=f"<h1>{name}</h1><p>About {name}.</p>")


def _read_tree(root: str) -> dict:
    files = {}
    for dirpath, _, filenames in os.walk(root):
        for filename in filenames:
            path = os.path.join(dirpath, filename)
            with open(path, "rb") as f:
                files[os.path.relpath(path, root)] = f.read()
    return files


class TestRunCrawl:
    def test_each_canonical_url_fetched_once(self, make_config) -> None:
        config = make_config(seed_targets=[SEED, OTHER_SEED])
        site = FakeSite({
            SEED.url: FakePage(hrefs=[
                DOCS + "a.md",
                "https://developer.roku.com/en-gb/docs/a.md",
                DOCS + "a.md#details",
                DOCS + "b.md",
                "https://developer.roku.com/about",
            ]),
            OTHER_SEED.url: FakePage(hrefs=[
                "https://developer.roku.com/en-us/docs/b.md#top",
                DOCS + "c.md",
            ]),
            DOCS + "a.md": _article("a"),
            DOCS + "b.md": _article("b"),
            DOCS + "c.md": _article("c"),
        })

        report = run_crawl(config, session_factory=site)

        assert report.raw_link_count == 7
        assert report.canonical_count == 3
        assert report.out_of_scope == 1
        for name in ("a", "b", "c"):
            assert site.navigations[DOCS + f"{name}.md"] == 1
        assert sorted(o.url for o in report.outcomes) == [DOCS + "a.md", DOCS + "b.md", DOCS + "c.md"]
        assert report.exit_code == 0

    def test_sessions_stay_within_cap(self, make_config) -> None:
        config = make_config(max_concurrent=3)
        urls = [DOCS + f"page-{i}.md" for i in range(25)]
        pages = {url: FakePage(delay=0.02) for url in urls}
        pages[SEED.url] = FakePage(hrefs=urls)
        site = FakeSite(pages)

        report = run_crawl(config, session_factory=site)

        assert site.peak_sessions <= 3
        assert site.open_sessions == 0
        assert len(report.outcomes) == 25
        assert all(o.kind is OutcomeKind.CONTENT for o in report.outcomes)

    def test_page_failures_do_not_abort_the_run(self, make_config) -> None:
        config = make_config()
        site = FakeSite({
            SEED.url: FakePage(hrefs=[DOCS + "ok.md", DOCS + "broken.md", DOCS + "missing.md", DOCS + "gone.md"]),
            DOCS + "ok.md": _article("ok"),
            DOCS + "broken.md": FakePage(hidden=[config.heading_selector]),
            DOCS + "gone.md": FakePage(classes="content-wrapper doc-error"),
        })

        report = run_crawl(config, session_factory=site)

        assert sorted(o.url for o in report.failures) == [DOCS + "broken.md", DOCS + "missing.md"]
        assert [o.url for o in report.error_markers] == [DOCS + "gone.md"]
        assert sorted(o.url for o in report.written) == [DOCS + "gone.md", DOCS + "ok.md"]
        assert os.path.exists(os.path.join(config.raw_output_dir, "ok.html"))
        assert report.exit_code == 1

    def test_failed_seed_keeps_other_seeds(self, make_config) -> None:
        config = make_config(seed_targets=[SEED, OTHER_SEED])
        site = FakeSite({
            SEED.url: FakePage(hrefs=[DOCS + "a.md"], hidden=[SEED_SELECTOR]),
            OTHER_SEED.url: FakePage(hrefs=[DOCS + "b.md"]),
            DOCS + "b.md": _article("b"),
        })

        report = run_crawl(config, session_factory=site)

        assert list(report.failed_seeds) == [SEED.url]
        assert [o.url for o in report.outcomes] == [DOCS + "b.md"]
        assert report.exit_code == 0

    def test_rerun_produces_identical_artifacts(self, make_config) -> None:
        config = make_config()
        pages = {DOCS + f"p{i}.md": _article(f"p{i}") for i in range(5)}
        pages[SEED.url] = FakePage(hrefs=list(pages))

        run_crawl(config, session_factory=FakeSite(pages))
        first = _read_tree(config.raw_output_dir)
        run_crawl(config, session_factory=FakeSite(pages))
        second = _read_tree(config.raw_output_dir)

        assert len(first) == 5
        assert first == second

    def test_urls_sharing_an_artifact_path_are_fetched_once(self, make_config) -> None:
        config = make_config()
        site = FakeSite({
            SEED.url: FakePage(hrefs=[DOCS + "a.md", DOCS + "a", DOCS + "a.md?tab=2"]),
            DOCS + "a": _article("a"),
            DOCS + "a.md": _article("a.md"),
            DOCS + "a.md?tab=2": _article("tab 2"),
        })

        report = run_crawl(config, session_factory=site)

        assert report.canonical_count == 3
        assert [o.url for o in report.written] == [DOCS + "a"]
        assert sorted((o.url, o.stage, o.cause) for o in report.failures) == [
            (DOCS + "a.md", "path", f"collides with {DOCS}a"),
            (DOCS + "a.md?tab=2", "path", f"collides with {DOCS}a"),
        ]
        assert site.navigations[DOCS + "a.md"] == 0
        assert site.navigations[DOCS + "a.md?tab=2"] == 0
        with open(os.path.join(config.raw_output_dir, "a.html"), encoding="utf-8") as f:
            assert f.read() == f"<!-- {DOCS}a -->\n" + _article("a").html
        assert report.exit_code == 1

    def test_summary_files_written(self, make_config) -> None:
        config = make_config()
        site = FakeSite({
            SEED.url: FakePage(hrefs=[DOCS + "ok.md", DOCS + "missing.md"]),
            DOCS + "ok.md": _article("ok"),
        })

        report = run_crawl(config, session_factory=site)
        summary_path = summarize_report(report, config.output_dir)

        with open(summary_path, encoding="utf-8") as f:
            assert "Failed pages: 1" in f.read()
        with open(os.path.join(config.output_dir, "failed_urls.log"), encoding="utf-8") as f:
            assert f.read().startswith(DOCS + "missing.md\tnavigation")


class TestFetchAll:
    def test_no_urls(self, config) -> None:
        assert fetch_all(set(), FakeSite(), ArtifactWriter(config.raw_output_dir), config) == []

    def test_unexpected_worker_error_becomes_failure(self, config) -> None:
        def exploding_writer(artifact):
            raise RuntimeError("disk on fire")

        site = FakeSite({DOCS + "a.md": _article("a")})
        outcomes = fetch_all({DOCS + "a.md"}, site, exploding_writer, config)

        assert len(outcomes) == 1
        assert outcomes[0].stage == "unexpected"
        assert site.open_sessions == 0

    def test_worker_threads_bounded_by_cap(self, config) -> None:
        site = FakeSite({DOCS + f"page-{i}.md": FakePage(delay=0.01) for i in range(20)})
        thread_names = set()
        lock = threading.Lock()

        def factory():
            with lock:
                thread_names.add(threading.current_thread().name)
            return site()

        outcomes = fetch_all(set(site.pages), factory, ArtifactWriter(config.raw_output_dir), config)

        assert len(outcomes) == 20
        assert 1 <= len(thread_names) <= config.max_concurrent
