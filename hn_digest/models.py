"""
Data models and type definitions for HN Digest.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from .config import (
    HN_ITEM_PAGE_URL,
    FALLBACK_MODELS,
    SUMMARY_TEMPERATURE,
    SUMMARY_MAX_TOKENS,
    MAX_SUMMARY_INPUT_CHARS,
)


def to_iso_timestamp(moment: datetime) -> str:
    """Format a UTC datetime as ISO-8601 with milliseconds and a Z suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class PaywallResult:
    """Outcome of scanning a discussion thread for paywall hints."""
    is_paywalled: bool
    url: str
    site: str
    known_paywalled_site: bool


@dataclass(frozen=True)
class HNPost:
    """Summary of a Hacker News story as listed on the front page."""
    id: int
    title: str
    link: str
    points: int
    time: Optional[int] = None
    comments_count: int = 0
    author: Optional[str] = None

    @property
    def comments_link(self) -> str:
        return HN_ITEM_PAGE_URL.format(self.id)

    @property
    def created_at(self) -> str:
        if self.time is None:
            return ""
        return to_iso_timestamp(datetime.fromtimestamp(self.time, tz=timezone.utc))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "link": self.link,
            "comments_link": self.comments_link,
            "points": self.points,
            "created_at": self.created_at,
            "comments_count": self.comments_count,
            "author": self.author,
        }


@dataclass(frozen=True)
class PageMetadata:
    """Metadata gathered while converting a page to Markdown."""
    description: str
    canonical_url: str
    converted_at: str
    source_url: str
    domain: str
    is_archive: bool = False
    archive_type: Optional[str] = None


@dataclass(frozen=True)
class MarkdownDocument:
    """A web page rendered as Markdown."""
    title: str
    markdown: str
    metadata: PageMetadata


@dataclass
class ConversionOptions:
    """Options for URL to Markdown conversion and cleanup."""
    include_images: bool = True
    cleanup_whitespace: bool = True
    remove_selectors: List[str] = field(default_factory=list)
    remove_consecutive_links: bool = True
    add_title_heading: bool = True


@dataclass
class SummarizerConfig:
    """Configuration for an LLM summarizer."""
    model: str = FALLBACK_MODELS[0]
    temperature: float = SUMMARY_TEMPERATURE
    max_tokens: int = SUMMARY_MAX_TOKENS
    allow_fallback: bool = False
    max_input_chars: int = MAX_SUMMARY_INPUT_CHARS


@dataclass
class DigestEntry:
    """One story in a digest run."""
    post: HNPost
    paywall: Optional[PaywallResult] = None
    source_url: str = ""
    summary: Optional[str] = None
    error: Optional[str] = None
