"""
HTTP fetching for HN Digest: the Hacker News API client and page downloads.
"""

import time
from typing import List, Optional

import requests

from .config import (
    HN_API_BASE_URL,
    HN_TOP_STORIES_ENDPOINT,
    HN_ITEM_ENDPOINT,
    DEFAULT_USER_AGENT,
    REQUEST_TIMEOUT,
    DEFAULT_POST_COUNT,
    MAX_RETRIES,
    DELAY_BETWEEN_REQUESTS,
)
from .models import HNPost
from .logging_config import get_logger, log_performance


def create_session() -> requests.Session:
    """Create a session that identifies as a regular desktop browser."""
    session = requests.Session()
    session.headers.update({"User-Agent": DEFAULT_USER_AGENT})
    return session


def fetch_html(
    session: requests.Session,
    url: str,
    timeout: float = REQUEST_TIMEOUT,
    status_label: str = "HTTP error",
) -> str:
    """
    Download a page and return its text.

    Raises:
        RuntimeError: on timeout, transport failure or a non-2xx status.
    """
    try:
        response = session.get(url, timeout=timeout, allow_redirects=True)
    except requests.Timeout as e:
        raise RuntimeError(f"Request timed out after {timeout} seconds") from e
    except requests.RequestException as e:
        raise RuntimeError(f"Network error: {e}") from e

    if not response.ok:
        raise RuntimeError(f"{status_label}: {response.status_code} {response.reason}")

    return response.text


class HackerNewsAPI:
    """Client for the Hacker News Firebase API."""

    def __init__(self, max_retries: int = MAX_RETRIES, delay_between_requests: float = DELAY_BETWEEN_REQUESTS):
        self.base_url = HN_API_BASE_URL
        self.max_retries = max_retries
        self.delay_between_requests = delay_between_requests
        self.session = create_session()
        self.logger = get_logger(self.__class__.__name__)
        self.logger.debug(f"Initialized HackerNewsAPI with base URL: {self.base_url}")

    def _get_json(self, url: str, what: str):
        try:
            response = self.session.get(url, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as e:
            raise RuntimeError(f"Failed to fetch {what}: {e}") from e
        if not response.ok:
            raise RuntimeError(f"Failed to fetch {what}: {response.status_code} {response.reason}")
        try:
            return response.json()
        except ValueError as e:
            raise RuntimeError(f"Invalid JSON for {what}: {e}") from e

    def _with_retries(self, fetch, what: str, max_retries: int, delay_between_requests: float):
        """Call ``fetch`` until it succeeds, sleeping longer after every failed attempt."""
        attempt = 0
        while True:
            try:
                return fetch()
            except RuntimeError as e:
                attempt += 1
                if attempt >= max_retries:
                    raise
                delay = delay_between_requests * attempt
                self.logger.debug(f"Attempt {attempt} for {what} failed ({e}), retrying in {delay:.2f}s")
                time.sleep(delay)

    def get_top_story_ids(self) -> List[int]:
        """Fetch the current top story IDs, in ranking order."""
        url = f"{self.base_url}{HN_TOP_STORIES_ENDPOINT}"
        self.logger.debug(f"Fetching top story IDs from: {url}")
        story_ids = self._get_json(url, "top stories")
        if not isinstance(story_ids, list):
            raise RuntimeError(f"Unexpected top stories payload: {story_ids!r}")
        return story_ids

    def get_story(self, story_id: int) -> Optional[dict]:
        """Fetch the raw item payload for one story."""
        url = f"{self.base_url}{HN_ITEM_ENDPOINT.format(story_id)}"
        self.logger.debug(f"Fetching story {story_id} from: {url}")
        return self._get_json(url, f"item {story_id}")

    @log_performance(get_logger("HackerNewsAPI.fetch_top_posts"), "fetching top posts")
    def fetch_top_posts(
        self,
        count: int = DEFAULT_POST_COUNT,
        max_retries: Optional[int] = None,
        delay_between_requests: Optional[float] = None,
    ) -> List[HNPost]:
        """
        Fetch the top stories and return them sorted by points.

        Stories are requested one at a time with a pause between requests.
        A story that still fails after all retries is skipped.

        Args:
            count: Number of top story IDs to look at
            max_retries: Attempts per request; defaults to the client's setting
            delay_between_requests: Base pause in seconds; defaults to the client's setting

        Returns:
            Posts that link to an article, highest score first
        """
        if max_retries is None:
            max_retries = self.max_retries
        if delay_between_requests is None:
            delay_between_requests = self.delay_between_requests

        try:
            story_ids = self._with_retries(self.get_top_story_ids, "top stories", max_retries, delay_between_requests)
        except RuntimeError as e:
            self.logger.error(f"Giving up on top stories after {max_retries} attempts: {e}")
            raise RuntimeError(f"Error fetching Hacker News posts: {e}") from e

        story_ids = story_ids[:count]
        self.logger.info(f"Fetching details for {len(story_ids)} stories")

        stories = []
        for story_id in story_ids:
            if stories:
                time.sleep(delay_between_requests)
            try:
                story = self._with_retries(
                    lambda: self.get_story(story_id), f"story {story_id}", max_retries, delay_between_requests
                )
            except RuntimeError as e:
                self.logger.warning(f"Failed to fetch story {story_id} after {max_retries} attempts, skipping: {e}")
                continue
            if story:
                stories.append(story)

        posts = [self._to_post(story) for story in stories if story.get("url") and story.get("score") is not None]
        posts.sort(key=lambda post: post.points, reverse=True)

        self.logger.info(f"Collected {len(posts)} posts with article links out of {len(stories)} stories")
        return posts

    @staticmethod
    def _to_post(story: dict) -> HNPost:
        return HNPost(
            id=story["id"],
            title=story.get("title", ""),
            link=story["url"],
            points=story["score"],
            time=story.get("time"),
            comments_count=story.get("descendants") or 0,
            author=story.get("by"),
        )
