"""
Builds a digest of top Hacker News stories
"""

import time
from typing import List, Optional

from .config import DIGEST_DELAY
from .models import DigestEntry, HNPost, SummarizerConfig
from .fetchers import HackerNewsAPI
from .comments import CommentExtractor
from .summarizers import ArticleSummarizer
from .logging_config import get_logger, log_performance


class HackerNewsDigest:
    """Fetches top stories, checks their threads for paywall hints and optionally summarizes them"""

    def __init__(
        self,
        summarize: bool = False,
        config: Optional[SummarizerConfig] = None,
        delay: float = DIGEST_DELAY,
    ):
        self.config = config
        self.delay = delay
        self.logger = get_logger(self.__class__.__name__)

        self.api_client = HackerNewsAPI()
        self.comment_extractor = CommentExtractor()
        self.summarizer = ArticleSummarizer(config) if summarize else None
        self.logger.debug(f"HackerNewsDigest initialized (summarize={summarize})")

    def _summarizer_for(self, summarize: Optional[bool]) -> Optional[ArticleSummarizer]:
        if summarize is None:
            return self.summarizer
        if not summarize:
            return None
        if self.summarizer is None:
            self.summarizer = ArticleSummarizer(self.config)
        return self.summarizer

    def process_post(self, post: HNPost, summarizer: Optional[ArticleSummarizer] = None) -> DigestEntry:
        """
        Check one post's discussion and summarize the article if a summarizer is given.

        A failed summary is recorded on the entry; the paywall result and
        archive link are kept.
        """
        entry = DigestEntry(post=post, source_url=post.link)

        entry.paywall = self.comment_extractor.is_paywalled(post.comments_link)
        if entry.paywall.url:
            self.logger.debug(f"Using archive link {entry.paywall.url} for story {post.id}")
            entry.source_url = entry.paywall.url

        if summarizer:
            try:
                entry.summary = summarizer.summarize(entry.source_url)
            except RuntimeError as e:
                self.logger.error(f"Failed to summarize story {post.id}: {e}")
                entry.error = str(e)

        return entry

    @log_performance(get_logger("HackerNewsDigest.build"), "digest build")
    def build(self, count: int = 10, summarize: Optional[bool] = None) -> List[DigestEntry]:
        """
        Main method: build digest entries for the top ``count`` posts by score.

        ``summarize`` overrides the setting given to the constructor for this run.
        """
        summarizer = self._summarizer_for(summarize)
        posts = self.api_client.fetch_top_posts(count)
        self.logger.info(f"Building digest for {len(posts)} posts")

        entries: List[DigestEntry] = []
        failed = 0

        for i, post in enumerate(posts, 1):
            self.logger.info(f"Processing story {i}/{len(posts)}: {post.id}")
            try:
                entry = self.process_post(post, summarizer)
            except RuntimeError as e:
                self.logger.error(f"Failed to check story {post.id}: {e}")
                entry = DigestEntry(post=post, source_url=post.link, error=str(e))
            if entry.error:
                failed += 1
            entries.append(entry)

            if i < len(posts):
                time.sleep(self.delay)

        self.logger.info(f"Digest complete: {len(entries) - failed} processed, {failed} failed")
        return entries
