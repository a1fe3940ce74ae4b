"""Application-wide constants.

This module centralizes the platform limits, timeouts and the fixed reply
texts sent back to users so there is a single source of truth for them.
"""

# =============================================================================
# Facebook API
# =============================================================================

# Facebook Graph API version
FACEBOOK_GRAPH_API_VERSION = "v18.0"

# Send API endpoint
FACEBOOK_SEND_API_URL = (
    f"https://graph.facebook.com/{FACEBOOK_GRAPH_API_VERSION}/me/messages"
)

# Signature headers sent with every webhook POST
SIGNATURE_HEADER = "X-Hub-Signature"
SIGNATURE_256_HEADER = "X-Hub-Signature-256"

# =============================================================================
# Message Constraints
# =============================================================================

# Facebook Messenger single message length limit (chars)
MAX_MESSAGE_LENGTH_CHARS = 2000

# Maximum number of quick reply buttons on one message
MAX_QUICK_REPLIES = 10

# URL prefixes that turn a text message into a page fetch
URL_PREFIXES = ("http://", "https://")

# =============================================================================
# HTTP Timeout Configuration
# =============================================================================

# Timeout for search API calls (seconds)
SEARCH_TIMEOUT_SECONDS = 15.0

# Timeout for fetching arbitrary pages (seconds)
PAGE_FETCH_TIMEOUT_SECONDS = 30.0

# Timeout for Facebook Graph API calls (seconds)
FACEBOOK_API_TIMEOUT_SECONDS = 10.0

# Browser-like headers for page fetches
PAGE_FETCH_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

# =============================================================================
# Fixed Reply Texts
# =============================================================================

HELP_TEXT = (
    "Search the Internet for free! You may also get the text contents of a "
    'website by sending us the complete http link (e.g. "https://phmountains.com").'
)

ZERO_RESULTS_TEXT = (
    "Thanks for trying out this bot. Please bear with us as we already exceeded "
    "the total daily number of searches allowable by Google (by a single app). "
    "The bot will work again at 4 p.m. Philippine time when Google resets the "
    "daily limit.\n\n"
    "In the meantime, you may also use this as a primitive web browser. Just "
    'send a link (e.g. "http://phmountains.com") and the bot will respond with '
    "the text-only version of the website."
)

SEARCH_ERROR_TEXT = "Oops! An error was encountered. Please try again."

PAGE_FETCH_ERROR_TEXT = (
    "Sorry, we couldn't load that page. Please check the link and try again."
)

EMPTY_PAGE_TEXT = "That page has no readable text."

AUTHENTICATION_SUCCESS_TEXT = "Authentication successful"
