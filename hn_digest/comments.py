"""
Hacker News discussion scraping: paywall hints and comment extraction.
"""

from typing import Optional

from bs4 import BeautifulSoup, NavigableString
from bs4.element import Comment

from .config import (
    HN_THREAD_URL_MARKER,
    KNOWN_PAYWALLED_SITES,
    ARCHIVE_LINK_MARKERS,
    COMMENT_SCAN_LIMIT,
    SHORT_COMMENT_LENGTH,
    NO_COMMENTS_MESSAGE,
    REQUEST_TIMEOUT,
)
from .fetchers import create_session, fetch_html
from .models import PaywallResult
from .logging_config import get_logger, log_performance


def validate_thread_url(url: str) -> None:
    """Raise ValueError unless ``url`` points at a Hacker News discussion thread."""
    if not url or HN_THREAD_URL_MARKER not in url:
        raise ValueError("Invalid Hacker News URL")


def is_known_paywalled_site(site: str) -> bool:
    return any(known in site for known in KNOWN_PAYWALLED_SITES)


def is_archive_link(href: Optional[str]) -> bool:
    if not href:
        return False
    href = href.lower()
    return any(marker in href for marker in ARCHIVE_LINK_MARKERS)


def _own_text(element) -> str:
    """Text of the element's direct text children, ignoring nested tags."""
    return "".join(
        str(child) for child in element.children
        if isinstance(child, NavigableString) and not isinstance(child, Comment)
    ).strip()


def get_site_label(soup: BeautifulSoup) -> str:
    site_element = soup.select_one(".sitestr")
    if site_element is None:
        return ""
    return site_element.get_text().strip().lower()


def scan_for_archive_link(soup: BeautifulSoup, known_site: bool) -> str:
    """
    Return the first archive link posted in the thread's comments, or "".

    Known paywalled sites get every comment scanned and every link considered.
    Other sites only get the first COMMENT_SCAN_LIMIT comments, and only
    comments whose own text is short, i.e. ones that are little more than a link.
    """
    comments = soup.select(".commtext")
    if not known_site:
        comments = comments[:COMMENT_SCAN_LIMIT]

    for comment in comments:
        links = comment.find_all("a")
        if not links:
            continue
        if not known_site and len(_own_text(comment)) >= SHORT_COMMENT_LENGTH:
            continue
        for link in links:
            href = link.get("href")
            if is_archive_link(href):
                return href

    return ""


def format_comments(soup: BeautifulSoup) -> str:
    """Render every non-empty comment as a Markdown bullet."""
    comments = [element.get_text().strip() for element in soup.select(".commtext")]
    comments = [text for text in comments if text]

    if not comments:
        return NO_COMMENTS_MESSAGE

    return "\n".join("- " + text.replace("\n", "\n  ") for text in comments)


class CommentExtractor:
    """Fetches Hacker News discussion pages and reads their comments."""

    def __init__(self, timeout: float = REQUEST_TIMEOUT):
        self.timeout = timeout
        self.session = create_session()
        self.logger = get_logger(self.__class__.__name__)

    def _fetch_thread(self, url: str, status_label: str) -> BeautifulSoup:
        html = fetch_html(self.session, url, timeout=self.timeout, status_label=status_label)
        self.logger.debug(f"Fetched {len(html)} characters from {url}")
        return BeautifulSoup(html, "html.parser")

    @log_performance(get_logger("CommentExtractor.is_paywalled"), "paywall check")
    def is_paywalled(self, url: str) -> PaywallResult:
        """
        Guess whether the story behind a discussion thread is paywalled.

        A story counts as paywalled when a commenter posted an archive link,
        or when it was submitted from a site on the known paywalled list.

        Args:
            url: Hacker News discussion URL (news.ycombinator.com/item?id=...)

        Returns:
            PaywallResult for the thread

        Raises:
            RuntimeError: if the URL is invalid or the page cannot be fetched
        """
        try:
            validate_thread_url(url)
            soup = self._fetch_thread(url, "HTTP error")
        except (ValueError, RuntimeError) as e:
            raise RuntimeError(f"Error checking for paywall: {e}") from e

        site = get_site_label(soup)
        known_site = is_known_paywalled_site(site)
        archive_url = scan_for_archive_link(soup, known_site)

        self.logger.info(
            f"Paywall check for {url}: site={site or '?'}, known={known_site}, "
            f"archive link={'yes' if archive_url else 'no'}"
        )
        return PaywallResult(
            is_paywalled=bool(archive_url) or known_site,
            url=archive_url,
            site=site,
            known_paywalled_site=known_site,
        )

    @log_performance(get_logger("CommentExtractor.extract_comments"), "comment extraction")
    def extract_comments(self, url: str) -> str:
        """
        Extract a thread's comments as a Markdown bullet list.

        Multi-line comments keep their line breaks, indented by two spaces.
        """
        try:
            validate_thread_url(url)
            soup = self._fetch_thread(url, "Failed to fetch URL")
        except (ValueError, RuntimeError) as e:
            raise RuntimeError(f"Error extracting comments: {e}") from e

        return format_comments(soup)
