"""
Unit tests for the HackerNewsDigest class
"""

from unittest.mock import Mock, patch

from hn_digest.digest import HackerNewsDigest
from hn_digest.models import HNPost, PaywallResult


def _post(post_id, points=100):
    return HNPost(id=post_id, title=f"Post {post_id}", link=f"https://example.com/{post_id}", points=points, time=1700000000)


def _paywall(url="", known=False):
    return PaywallResult(is_paywalled=bool(url) or known, url=url, site="example.com", known_paywalled_site=known)


class TestHackerNewsDigest:

    def setup_method(self):
        self.digest = HackerNewsDigest(delay=0)
        self.digest.api_client = Mock()
        self.digest.comment_extractor = Mock()

    def test_init_without_summaries(self):
        assert HackerNewsDigest().summarizer is None

    def test_init_with_summaries(self):
        assert HackerNewsDigest(summarize=True).summarizer is not None

    @patch("hn_digest.digest.time.sleep")
    def test_build_checks_every_thread(self, mock_sleep):
        self.digest.api_client.fetch_top_posts.return_value = [_post(1), _post(2)]
        self.digest.comment_extractor.is_paywalled.return_value = _paywall()

        entries = self.digest.build(2)

        assert [entry.post.id for entry in entries] == [1, 2]
        assert entries[0].source_url == "https://example.com/1"
        assert entries[0].summary is None
        self.digest.api_client.fetch_top_posts.assert_called_once_with(2)
        self.digest.comment_extractor.is_paywalled.assert_any_call("https://news.ycombinator.com/item?id=2")
        assert mock_sleep.call_count == 1

    @patch("hn_digest.digest.time.sleep")
    def test_archive_link_becomes_source(self, mock_sleep):
        self.digest.api_client.fetch_top_posts.return_value = [_post(1)]
        self.digest.comment_extractor.is_paywalled.return_value = _paywall(url="https://archive.ph/abc")
        self.digest.summarizer = Mock()
        self.digest.summarizer.summarize.return_value = "Short summary"

        entries = self.digest.build(1)

        assert entries[0].source_url == "https://archive.ph/abc"
        assert entries[0].paywall.is_paywalled is True
        assert entries[0].summary == "Short summary"
        self.digest.summarizer.summarize.assert_called_once_with("https://archive.ph/abc")

    @patch("hn_digest.digest.time.sleep")
    def test_failed_item_is_kept_with_error(self, mock_sleep):
        self.digest.api_client.fetch_top_posts.return_value = [_post(1), _post(2)]
        self.digest.comment_extractor.is_paywalled.side_effect = [
            RuntimeError("Error checking for paywall: HTTP error: 503 Service Unavailable"),
            _paywall(),
        ]

        entries = self.digest.build(2)

        assert len(entries) == 2
        assert "503" in entries[0].error
        assert entries[0].paywall is None
        assert entries[1].error is None

    @patch("hn_digest.digest.time.sleep")
    def test_no_posts(self, mock_sleep):
        self.digest.api_client.fetch_top_posts.return_value = []

        assert self.digest.build(5) == []
        mock_sleep.assert_not_called()

    @patch("hn_digest.digest.time.sleep")
    def test_failed_summary_keeps_paywall_and_archive_link(self, mock_sleep):
        self.digest.api_client.fetch_top_posts.return_value = [_post(1)]
        self.digest.comment_extractor.is_paywalled.return_value = PaywallResult(
            is_paywalled=True, url="https://archive.ph/x", site="wsj.com", known_paywalled_site=True
        )
        self.digest.summarizer = Mock()
        self.digest.summarizer.summarize.side_effect = RuntimeError("Error loading API key: missing")

        entries = self.digest.build(1)

        entry = entries[0]
        assert entry.paywall is not None
        assert entry.paywall.url == "https://archive.ph/x"
        assert entry.source_url == "https://archive.ph/x"
        assert entry.summary is None
        assert entry.error == "Error loading API key: missing"

    @patch("hn_digest.digest.time.sleep")
    def test_build_summarize_override(self, mock_sleep):
        self.digest.api_client.fetch_top_posts.return_value = [_post(1)]
        self.digest.comment_extractor.is_paywalled.return_value = _paywall()
        self.digest.summarizer = Mock()

        entries = self.digest.build(1, summarize=False)

        assert entries[0].summary is None
        self.digest.summarizer.summarize.assert_not_called()

    @patch("hn_digest.digest.ArticleSummarizer")
    @patch("hn_digest.digest.time.sleep")
    def test_build_summarize_creates_summarizer(self, mock_sleep, mock_summarizer_class):
        self.digest.api_client.fetch_top_posts.return_value = [_post(1)]
        self.digest.comment_extractor.is_paywalled.return_value = _paywall()
        mock_summarizer_class.return_value.summarize.return_value = "Summary"

        entries = self.digest.build(1, summarize=True)

        assert entries[0].summary == "Summary"
        mock_summarizer_class.assert_called_once_with(None)
        mock_summarizer_class.return_value.summarize.assert_called_once_with("https://example.com/1")
