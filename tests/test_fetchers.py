"""
Tests for the fetchers module.
"""

import pytest
import requests
from unittest.mock import Mock, patch, call

from hn_digest.fetchers import HackerNewsAPI, fetch_html, create_session
from hn_digest.models import HNPost


def _json_response(data, status=200, reason="OK"):
    response = Mock()
    response.ok = 200 <= status < 300
    response.status_code = status
    response.reason = reason
    response.json.return_value = data
    return response


def _story(story_id, score, url="https://example.com/{}", **extra):
    data = {
        "id": story_id,
        "title": f"Story {story_id}",
        "url": url.format(story_id) if url else None,
        "score": score,
        "by": f"user{story_id}",
        "time": 1700000000,
        "descendants": 10 + story_id,
        "type": "story",
    }
    data.update(extra)
    return data


class TestFetchHtml:

    @patch("hn_digest.fetchers.requests.Session.get")
    def test_returns_text(self, mock_get):
        response = Mock(ok=True, status_code=200, reason="OK", text="<html></html>")
        mock_get.return_value = response

        assert fetch_html(create_session(), "https://example.com") == "<html></html>"
        mock_get.assert_called_once_with("https://example.com", timeout=10, allow_redirects=True)

    @patch("hn_digest.fetchers.requests.Session.get")
    def test_status_label(self, mock_get):
        mock_get.return_value = Mock(ok=False, status_code=403, reason="Forbidden")

        with pytest.raises(RuntimeError, match="^Failed to fetch URL: 403 Forbidden$"):
            fetch_html(create_session(), "https://example.com", status_label="Failed to fetch URL")


class TestHackerNewsAPI:

    def setup_method(self):
        self.api = HackerNewsAPI(max_retries=3, delay_between_requests=0.5)

    @patch("hn_digest.fetchers.time.sleep")
    @patch("hn_digest.fetchers.requests.Session.get")
    def test_fetch_top_posts_sorted_by_points(self, mock_get, mock_sleep):
        mock_get.side_effect = [
            _json_response([1, 2, 3]),
            _json_response(_story(1, 50)),
            _json_response(_story(2, 300)),
            _json_response(_story(3, 120)),
        ]

        posts = self.api.fetch_top_posts(3)

        assert [post.id for post in posts] == [2, 3, 1]
        top = posts[0]
        assert isinstance(top, HNPost)
        assert top.title == "Story 2"
        assert top.link == "https://example.com/2"
        assert top.comments_link == "https://news.ycombinator.com/item?id=2"
        assert top.points == 300
        assert top.comments_count == 12
        assert top.author == "user2"
        assert top.created_at == "2023-11-14T22:13:20.000Z"

    @patch("hn_digest.fetchers.time.sleep")
    @patch("hn_digest.fetchers.requests.Session.get")
    def test_fetch_top_posts_limits_count(self, mock_get, mock_sleep):
        mock_get.side_effect = [
            _json_response([1, 2, 3, 4, 5]),
            _json_response(_story(1, 10)),
            _json_response(_story(2, 20)),
        ]

        posts = self.api.fetch_top_posts(2)

        assert len(posts) == 2
        assert mock_get.call_count == 3
        assert mock_get.call_args_list[1][0][0] == "https://hacker-news.firebaseio.com/v0/item/1.json"

    @patch("hn_digest.fetchers.time.sleep")
    @patch("hn_digest.fetchers.requests.Session.get")
    def test_fetch_top_posts_filters_items(self, mock_get, mock_sleep):
        mock_get.side_effect = [
            _json_response([1, 2, 3, 4]),
            _json_response(_story(1, 10, url=None)),
            _json_response({"id": 2, "title": "Job", "url": "https://jobs.example.com", "type": "job"}),
            _json_response(None),
            _json_response(_story(4, 0, descendants=None)),
        ]

        posts = self.api.fetch_top_posts(4)

        assert [post.id for post in posts] == [4]
        assert posts[0].points == 0
        assert posts[0].comments_count == 0

    @patch("hn_digest.fetchers.time.sleep")
    @patch("hn_digest.fetchers.requests.Session.get")
    def test_retries_with_linear_backoff(self, mock_get, mock_sleep):
        mock_get.side_effect = [
            _json_response([1, 2]),
            requests.ConnectionError("reset"),
            _json_response(None, status=502, reason="Bad Gateway"),
            _json_response(_story(1, 10)),
            _json_response(_story(2, 20)),
        ]

        posts = self.api.fetch_top_posts(2)

        assert [post.id for post in posts] == [2, 1]
        assert mock_sleep.call_args_list == [call(0.5), call(1.0), call(0.5)]

    @patch("hn_digest.fetchers.time.sleep")
    @patch("hn_digest.fetchers.requests.Session.get")
    def test_skips_story_after_exhausting_retries(self, mock_get, mock_sleep):
        mock_get.side_effect = [
            _json_response([1, 2]),
            requests.Timeout(),
            requests.Timeout(),
            requests.Timeout(),
            _json_response(_story(2, 20)),
        ]

        posts = self.api.fetch_top_posts(2)

        assert [post.id for post in posts] == [2]
        assert mock_get.call_count == 5
        assert mock_sleep.call_args_list == [call(0.5), call(1.0)]

    @patch("hn_digest.fetchers.time.sleep")
    @patch("hn_digest.fetchers.requests.Session.get")
    def test_top_story_ids_failure_raises(self, mock_get, mock_sleep):
        mock_get.return_value = _json_response(None, status=503, reason="Service Unavailable")

        with pytest.raises(RuntimeError, match="Error fetching Hacker News posts: Failed to fetch top stories: 503"):
            self.api.fetch_top_posts(5)

        assert mock_get.call_count == 3

    @patch("hn_digest.fetchers.time.sleep")
    @patch("hn_digest.fetchers.requests.Session.get")
    def test_top_story_ids_not_a_list_raises(self, mock_get, mock_sleep):
        mock_get.return_value = _json_response(None)

        with pytest.raises(RuntimeError, match="Error fetching Hacker News posts: Unexpected top stories payload"):
            self.api.fetch_top_posts(5)

        assert mock_get.call_count == 3
        assert mock_sleep.call_args_list == [call(0.5), call(1.0)]

    @patch("hn_digest.fetchers.time.sleep")
    @patch("hn_digest.fetchers.requests.Session.get")
    def test_per_call_retry_settings(self, mock_get, mock_sleep):
        mock_get.return_value = _json_response(None, status=500, reason="Internal Server Error")

        with pytest.raises(RuntimeError, match="Error fetching Hacker News posts"):
            self.api.fetch_top_posts(5, max_retries=2, delay_between_requests=0.25)

        assert mock_get.call_count == 2
        mock_sleep.assert_called_once_with(0.25)

    @patch("hn_digest.fetchers.time.sleep")
    @patch("hn_digest.fetchers.requests.Session.get")
    def test_top_story_ids_recover_after_retry(self, mock_get, mock_sleep):
        mock_get.side_effect = [
            requests.ConnectionError("down"),
            _json_response([7]),
            _json_response(_story(7, 70)),
        ]

        posts = self.api.fetch_top_posts(1)

        assert [post.id for post in posts] == [7]
        mock_sleep.assert_called_once_with(0.5)

    @patch("hn_digest.fetchers.requests.Session.get")
    def test_get_story_uses_item_endpoint(self, mock_get):
        mock_get.return_value = _json_response(_story(123, 5))

        story = self.api.get_story(123)

        assert story["id"] == 123
        mock_get.assert_called_once_with("https://hacker-news.firebaseio.com/v0/item/123.json", timeout=10)
