"""
Web page to Markdown conversion and Markdown cleanup.
"""

import re
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlparse

import markdownify
from bs4 import BeautifulSoup

from .config import (
    PAGE_TIMEOUT,
    CONSECUTIVE_LINK_THRESHOLD,
    ARCHIVE_HOST_MARKERS,
    ARCHIVE_REMOVE_SELECTORS,
)
from .fetchers import create_session, fetch_html
from .models import ConversionOptions, MarkdownDocument, PageMetadata, to_iso_timestamp
from .logging_config import get_logger, log_performance


_LINK = r"\[[^\]\n]*\]\([^)\n]*\)"
CONSECUTIVE_LINKS_RE = re.compile(
    r"(?:(?:[-*+][ \t]+)?" + _LINK + r"\s*){" + str(CONSECUTIVE_LINK_THRESHOLD) + r",}"
)
EXCESS_BLANK_LINES_RE = re.compile(r"\n(?:[ \t]*\n){2,}")
TITLE_HEADING_RE = re.compile(r"^[ \t]*#[ \t]", re.MULTILINE)
LANGUAGE_CLASS_RE = re.compile(r"language-(\w+)")
ARCHIVE_TITLE_SPLIT_RE = re.compile(r"\s[|\-]\s")


def collapse_blank_lines(markdown: str) -> str:
    """Collapse runs of blank lines to a single blank line and trim."""
    return EXCESS_BLANK_LINES_RE.sub("\n\n", markdown).strip()


def cleanup_markdown(
    markdown: str,
    remove_consecutive_links: bool = True,
    add_title_heading: bool = True,
    title: Optional[str] = None,
) -> str:
    """
    Tidy converted Markdown.

    Runs of five or more back-to-back links are dropped, since on most pages
    they are navigation bars or footers. When a title is given and the text has
    no level-1 heading, the title is added as one.

    Cleaning already cleaned text returns it unchanged.
    """
    cleaned = markdown
    if remove_consecutive_links:
        cleaned = CONSECUTIVE_LINKS_RE.sub("\n\n", cleaned)

    cleaned = collapse_blank_lines(cleaned)

    heading = " ".join(title.split()) if title else ""
    if add_title_heading and heading and not TITLE_HEADING_RE.search(cleaned):
        cleaned = f"# {heading}\n\n{cleaned}".strip()

    return cleaned


def is_archive_url(url: str) -> bool:
    return any(marker in url for marker in ARCHIVE_HOST_MARKERS)


def _code_language(element) -> str:
    language = element.get("data-language")
    if language:
        return language
    match = LANGUAGE_CLASS_RE.search(" ".join(element.get("class") or []))
    return match.group(1) if match else ""


class MarkdownConverter:
    """Downloads web pages and renders them as Markdown."""

    def __init__(self, timeout: float = PAGE_TIMEOUT):
        self.timeout = timeout
        self.session = create_session()
        self.logger = get_logger(self.__class__.__name__)

    def _render(self, body, include_images: bool) -> str:
        converter = markdownify.MarkdownConverter(
            heading_style=markdownify.ATX,
            bullets="-",
            strong_em_symbol=markdownify.ASTERISK,
            code_language_callback=_code_language,
            strip=None if include_images else ["img"],
        )
        return converter.convert_soup(body)

    @log_performance(get_logger("MarkdownConverter.convert_url_to_markdown"), "HTML to Markdown conversion")
    def convert_url_to_markdown(self, url: str, options: Optional[ConversionOptions] = None) -> MarkdownDocument:
        """
        Fetch a page and convert its body to Markdown.

        Args:
            url: Absolute http(s) URL of the page
            options: Conversion settings; defaults keep images and tidy whitespace

        Returns:
            MarkdownDocument with the page title and metadata

        Raises:
            RuntimeError: if the URL is invalid or the page cannot be fetched
        """
        options = options or ConversionOptions()

        try:
            parsed = urlparse(url)
            if not parsed.scheme or not parsed.hostname:
                raise ValueError("Invalid URL")

            html = fetch_html(self.session, url, timeout=self.timeout, status_label="Failed to fetch URL")
        except (ValueError, RuntimeError) as e:
            raise RuntimeError(f"Error converting HTML to Markdown: {e}") from e

        soup = BeautifulSoup(html, "html.parser")

        title = soup.title.get_text() if soup.title else ""
        description_tag = soup.select_one('meta[name="description"]')
        description = description_tag.get("content", "") if description_tag else ""
        canonical_tag = soup.select_one('link[rel="canonical"]')
        canonical_url = canonical_tag.get("href") if canonical_tag else None

        for element in soup(["script", "style"]):
            element.decompose()
        for selector in options.remove_selectors:
            for element in soup.select(selector):
                element.decompose()

        markdown = self._render(soup.body or soup, options.include_images)
        if options.cleanup_whitespace:
            markdown = collapse_blank_lines(markdown)

        self.logger.info(f"Converted {url} to {len(markdown)} characters of Markdown")
        return MarkdownDocument(
            title=title,
            markdown=markdown,
            metadata=PageMetadata(
                description=description,
                canonical_url=canonical_url or url,
                converted_at=to_iso_timestamp(datetime.now(timezone.utc)),
                source_url=url,
                domain=parsed.hostname,
            ),
        )

    def process_archive_url(self, url: str, options: Optional[ConversionOptions] = None) -> MarkdownDocument:
        """Convert an archive.is/ph/today snapshot, stripping the archive's own page chrome."""
        options = options or ConversionOptions()

        try:
            if not is_archive_url(url):
                raise ValueError("Not an archive.is/ph/today URL")

            archive_options = replace(
                options,
                remove_selectors=ARCHIVE_REMOVE_SELECTORS + list(options.remove_selectors),
            )
            document = self.convert_url_to_markdown(url, archive_options)
        except (ValueError, RuntimeError) as e:
            raise RuntimeError(f"Error processing archive.is URL: {e}") from e

        # Snapshot titles usually carry the site name after a separator
        title = ARCHIVE_TITLE_SPLIT_RE.split(document.title)[0].strip()

        markdown = cleanup_markdown(
            document.markdown,
            remove_consecutive_links=options.remove_consecutive_links,
            add_title_heading=options.add_title_heading,
            title=title,
        )
        return MarkdownDocument(
            title=document.title,
            markdown=markdown,
            metadata=replace(document.metadata, is_archive=True, archive_type="archive.is"),
        )

    def url_to_clean_markdown(self, url: str, options: Optional[ConversionOptions] = None) -> MarkdownDocument:
        """Convert any URL to cleaned-up Markdown, handling archive snapshots specially."""
        options = options or ConversionOptions()

        if is_archive_url(url):
            return self.process_archive_url(url, options)

        document = self.convert_url_to_markdown(url, options)
        markdown = cleanup_markdown(
            document.markdown,
            remove_consecutive_links=options.remove_consecutive_links,
            add_title_heading=options.add_title_heading,
            title=document.title,
        )
        return replace(document, markdown=markdown)
