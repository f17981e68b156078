"""
Configuration constants and settings for HN Digest.
"""

# Hacker News settings
HN_API_BASE_URL = "https://hacker-news.firebaseio.com/v0"
HN_TOP_STORIES_ENDPOINT = "/topstories.json"
HN_ITEM_ENDPOINT = "/item/{}.json"
HN_ITEM_PAGE_URL = "https://news.ycombinator.com/item?id={}"
HN_THREAD_URL_MARKER = "news.ycombinator.com/item"

# HTTP settings
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/133.0.0.0 Safari/537.36"
)
REQUEST_TIMEOUT = 10
PAGE_TIMEOUT = 30

# Bulk story fetching
DEFAULT_POST_COUNT = 60
MAX_RETRIES = 3
DELAY_BETWEEN_REQUESTS = 0.1  # seconds, multiplied by the attempt number on retry

# Paywall heuristic
COMMENT_SCAN_LIMIT = 20
SHORT_COMMENT_LENGTH = 15
ARCHIVE_LINK_MARKERS = (
    "archive",
    "12ft.io",
    "outline.com",
    "webcache.googleusercontent.com",
)
KNOWN_PAYWALLED_SITES = (
    "bloomberg.com",
    "wsj.com",
    "ft.com",
    "nytimes.com",
    "newyorker.com",
    "economist.com",
    "washingtonpost.com",
    "wired.com",
    "medium.com",
    "businessinsider.com",
    "theatlantic.com",
    "forbes.com",
    "thetimes.co.uk",
    "telegraph.co.uk",
    "latimes.com",
    "hbr.org",
    "technologyreview.com",
    "barrons.com",
    "theinformation.com",
    "seekingalpha.com",
)
NO_COMMENTS_MESSAGE = "No comments found on this page."

# Markdown settings
CONSECUTIVE_LINK_THRESHOLD = 5
ARCHIVE_HOST_MARKERS = ("archive.is/", "archive.ph/", "archive.today/")
ARCHIVE_REMOVE_SELECTORS = [
    "#HEADER",
    "#FOOTER",
    "#TOOLS",
    ".NavigationBar",
    '[id^="readability"]',
    "script",
    "style",
    "iframe",
    ".toolbar",
    "#wm-ipp-base",
    "#wm-ipp",
    "#donato",
    "#ad_top",
]

# OpenRouter settings
OPENROUTER_API_URL = "https://openrouter.ai/api/v1/chat/completions"
OPENROUTER_API_KEY_VAR = "OPENROUTER_API_KEY"
OPENROUTER_TIMEOUT = 120
DEFAULT_ENV_FILE = ".env"
DEFAULT_REFERER = "https://github.com"
DEFAULT_APP_TITLE = "HN Digest"
FALLBACK_MODELS = [
    "google/gemini-2.0-flash-lite-preview-02-05:free",
    "google/gemini-2.0-flash-exp:free",
    "google/gemini-2.0-pro-exp-02-05:free",
    "deepseek/deepseek-chat:free",
]

# Summarization settings
SUMMARY_TEMPERATURE = 0.1
SUMMARY_MAX_TOKENS = 4000
MAX_SUMMARY_INPUT_CHARS = 15000
TRUNCATION_MARKER = "...[truncated due to length]"

# Digest settings
DIGEST_DELAY = 1  # seconds between digest items
