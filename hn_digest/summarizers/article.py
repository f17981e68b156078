"""
Summarizer for linked articles.
"""

from typing import Optional

from .base import BaseSummarizer
from ..markdown import MarkdownConverter


ARTICLE_INSTRUCTIONS = """Summarize the following article for a busy technical reader.
Give a one-sentence overview followed by 3-5 bullet points with the key facts and claims."""


class ArticleSummarizer(BaseSummarizer):
    """Summarizes a web page after converting it to Markdown."""

    default_instructions = ARTICLE_INSTRUCTIONS

    def __init__(self, config=None, client=None, converter: Optional[MarkdownConverter] = None):
        super().__init__(config, client)
        self.converter = converter or MarkdownConverter()

    def summarize(self, url: str, instructions: Optional[str] = None) -> str:
        document = self.converter.url_to_clean_markdown(url)
        if not document.markdown:
            raise RuntimeError(f"No article text found at {url}")

        prompt = self._build_prompt(
            instructions,
            "The article is formatted as Markdown. Here it is:",
            document.markdown,
        )
        self.logger.info(f"Summarizing article {url} ({len(document.markdown)} chars) with {self.config.model}")
        return self._complete(prompt)
