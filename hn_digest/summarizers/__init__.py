"""
LLM summarizers for discussions and articles.
"""

from .base import BaseSummarizer
from .discussion import DiscussionSummarizer
from .article import ArticleSummarizer

__all__ = [
    "BaseSummarizer",
    "DiscussionSummarizer",
    "ArticleSummarizer",
]
