import logging
import os
import re

from roku_docs_scraper.models import OutputArtifact

logger = logging.getLogger(__name__)

PROVENANCE_PATTERN = re.compile(r"^<!-- (.*) -->$")


class WriteError(OSError):
    """Raised when an artifact cannot be persisted."""

    def __init__(self, path, cause):
        super().__init__(f"Failed to write {path}: {cause}")
        self.path = path
        self.cause = cause


def provenance_line(url):
    return f"<!-- {url} -->"


def build_artifact(url, relative_path, body):
    """
    Prefix the extracted body with a provenance line recording its source URL.

    Args:
        url (str): Canonical URL the body was fetched from.
        relative_path (str): Artifact path relative to the raw output folder.
        body (str): Extracted markup or placeholder text.

    Returns:
        OutputArtifact: The artifact ready to be written.
    """
    return OutputArtifact(path=relative_path, body=f"{provenance_line(url)}\n{body}")


def split_provenance(content):
    """
    Separate the provenance line from an artifact's body.

    Returns:
        tuple: (source_url or None, body)
    """
    first_line, _, rest = content.partition("\n")
    match = PROVENANCE_PATTERN.match(first_line)
    if not match:
        return None, content
    return match.group(1), rest


def write_new_file(file_path, file_content):
    """
    Write content to a file, creating parent folders and overwriting any existing file.

    Args:
        file_path (str): Destination path.
        file_content (str): Text to write.

    Returns:
        str: The path written.

    Raises:
        WriteError: If the folder or file cannot be created or written.
    """
    try:
        folder = os.path.dirname(file_path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        with open(file_path, "w", encoding="utf-8", newline="") as f:
            f.write(file_content)
        return file_path
    except OSError as e:
        raise WriteError(file_path, e) from e


class ArtifactWriter:
    """Persists OutputArtifacts below a root folder."""

    def __init__(self, root):
        self.root = root

    def __call__(self, artifact):
        path = os.path.join(self.root, *artifact.path.split("/"))
        return write_new_file(path, artifact.body)


def save_url_log(base_folder, filename, entries):
    """
    Write one line per entry to a log file in the output folder.

    Args:
        base_folder (str): The base output folder.
        filename (str): Name of the log file.
        entries (list): Lines to write.

    Returns:
        str or None: The path written, or None if writing failed.
    """
    path = os.path.join(base_folder, filename)
    try:
        write_new_file(path, "".join(f"{entry}\n" for entry in entries))
        return path
    except WriteError as e:
        logger.error(f"Error saving {filename}: {e}")
        return None


def save_summary(base_folder, report):
    """
    Save a summary of crawl results.

    Writes summary.log with the run counters, failed_urls.log with every
    failed URL and its cause, and error_pages.log with pages the site
    reported as errors.

    Args:
        base_folder (str): The base output folder.
        report (CrawlReport): The finished run's report.

    Returns:
        str or None: The path to the summary file, or None if it could not be written.
    """
    lines = [
        f"Raw links discovered: {report.raw_link_count}",
        f"Unique documentation URLs: {report.canonical_count}",
        f"Skipped (out of scope): {report.out_of_scope}",
        f"Skipped (malformed): {report.malformed}",
        f"Failed seeds: {len(report.failed_seeds)}",
        f"Pages written: {len(report.written)}",
        f"Error pages: {len(report.error_markers)}",
        f"Failed pages: {len(report.failures)}",
    ]
    save_url_log(
        base_folder,
        "failed_urls.log",
        sorted(f"{o.url}\t{o.stage}\t{o.cause}" for o in report.failures),
    )
    save_url_log(base_folder, "error_pages.log", sorted(o.url for o in report.error_markers))
    return save_url_log(base_folder, "summary.log", lines)
