import logging
import os

from bs4 import BeautifulSoup
from markdownify import markdownify as md_convert

from roku_docs_scraper.file_utils import split_provenance, write_new_file
from roku_docs_scraper.models import ConversionReport

logger = logging.getLogger(__name__)


def clean_markup(soup):
    """
    Remove tags that carry no readable content.

    Args:
        soup (BeautifulSoup): The BeautifulSoup object to clean.

    Returns:
        BeautifulSoup: The cleaned BeautifulSoup object.
    """
    for tag in soup.find_all(["script", "style", "noscript"]):
        tag.decompose()
    return soup


def _yaml_string(value):
    """Render a value as a double-quoted YAML scalar on a single line."""
    value = " ".join(value.split())
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def create_markdown(content_html, source_url=None):
    """
    Convert an article's HTML to Markdown with YAML frontmatter.

    The frontmatter holds the title taken from the first h1 and the source URL.
    No timestamps are included, so converting the same input twice gives the
    same output.

    Args:
        content_html (str): The article markup.
        source_url (str, optional): Original URL of the page.

    Returns:
        str: Markdown with YAML frontmatter.
    """
    soup = clean_markup(BeautifulSoup(content_html, "html.parser"))
    md = md_convert(str(soup), heading_style="ATX").strip() + "\n"

    h1 = soup.find("h1")
    title = h1.get_text() if h1 else ""
    yaml = (
        f"---\n"
        f"title: {_yaml_string(title)}\n"
        f"source_url: {_yaml_string(source_url or '')}\n"
        f"---\n\n"
    )
    return yaml + md


def markdown_path_for(raw_path, raw_root, markdown_root, storage_extension):
    """Map a raw artifact path to its Markdown counterpart in the parallel tree."""
    relative = os.path.relpath(raw_path, raw_root)
    return os.path.join(markdown_root, relative[: -len(storage_extension)] + ".md")


def convert_file(raw_path, markdown_path):
    with open(raw_path, "r", encoding="utf-8") as f:
        content = f.read()
    source_url, body = split_provenance(content)
    return write_new_file(markdown_path, create_markdown(body, source_url))


def convert_raw_tree(raw_root, markdown_root, storage_extension=".html"):
    """
    Convert every raw artifact below ``raw_root`` into Markdown below ``markdown_root``.

    Files without the storage extension are ignored. A file that cannot be
    read, converted or written is logged and skipped.

    Args:
        raw_root (str): Root of the raw artifact tree.
        markdown_root (str): Root of the Markdown tree to write.
        storage_extension (str, optional): Extension of raw artifacts. Defaults to ".html".

    Returns:
        ConversionReport: Converted Markdown paths and failed raw paths.
    """
    report = ConversionReport()
    if not os.path.isdir(raw_root):
        logger.warning(f"Raw folder does not exist: {raw_root}")
        return report

    logger.info(f"\n🔍 Scanning '{raw_root}' for {storage_extension} files...")
    for dirpath, dirnames, filenames in os.walk(raw_root):
        dirnames.sort()
        for filename in sorted(filenames):
            if not filename.endswith(storage_extension):
                continue
            raw_path = os.path.join(dirpath, filename)
            markdown_path = markdown_path_for(raw_path, raw_root, markdown_root, storage_extension)
            try:
                report.converted.append(convert_file(raw_path, markdown_path))
            except (OSError, UnicodeDecodeError) as e:
                logger.error(f"Error converting {raw_path}: {e}")
                report.failed[raw_path] = str(e)

    logger.info(f"📊 Converted {len(report.converted)} files, {len(report.failed)} failed")
    return report
