"""
Summarizer for Hacker News discussion threads.
"""

from typing import Optional

from .base import BaseSummarizer
from ..comments import CommentExtractor
from ..config import NO_COMMENTS_MESSAGE


DISCUSSION_INSTRUCTIONS = """I have extracted comments from a Hacker News discussion. Please analyze these comments and provide:

1. A concise summary of the main discussion points (3-5 bullet points)
2. The key insights or perspectives shared
3. Any interesting disagreements or debates within the comments
4. Technical details mentioned (if applicable)"""


class DiscussionSummarizer(BaseSummarizer):
    """Summarizes the comments of a discussion thread."""

    default_instructions = DISCUSSION_INSTRUCTIONS

    def __init__(self, config=None, client=None, extractor: Optional[CommentExtractor] = None):
        super().__init__(config, client)
        self.extractor = extractor or CommentExtractor()

    def summarize(self, url: str, instructions: Optional[str] = None) -> str:
        comments = self.extractor.extract_comments(url)
        if comments == NO_COMMENTS_MESSAGE:
            self.logger.info(f"No comments to summarize for {url}")
            return comments

        prompt = self._build_prompt(
            instructions,
            "The comments are formatted as a markdown bullet list. Here they are:",
            comments,
        )
        self.logger.info(f"Summarizing discussion {url} with {self.config.model}")
        return self._complete(prompt)
