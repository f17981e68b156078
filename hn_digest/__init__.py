"""
HN Digest
Tools for reading Hacker News: top posts, comments, paywall hints,
web pages as Markdown and LLM summaries
"""

from .models import PaywallResult, HNPost, PageMetadata, MarkdownDocument, ConversionOptions, SummarizerConfig, DigestEntry
from .fetchers import HackerNewsAPI
from .comments import CommentExtractor
from .markdown import MarkdownConverter, cleanup_markdown
from .llm_client import OpenRouterClient
from .summarizers import BaseSummarizer, DiscussionSummarizer, ArticleSummarizer
from .digest import HackerNewsDigest

__version__ = "0.1.0"

__all__ = [
    "PaywallResult",
    "HNPost",
    "PageMetadata",
    "MarkdownDocument",
    "ConversionOptions",
    "SummarizerConfig",
    "DigestEntry",
    "HackerNewsAPI",
    "CommentExtractor",
    "MarkdownConverter",
    "cleanup_markdown",
    "OpenRouterClient",
    "BaseSummarizer",
    "DiscussionSummarizer",
    "ArticleSummarizer",
    "HackerNewsDigest",
]
