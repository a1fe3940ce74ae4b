"""HTML-to-text sanitization and message length shaping."""

import re

import logfire
from bs4 import BeautifulSoup

from searchbot.constants import MAX_MESSAGE_LENGTH_CHARS

# Elements whose content is never user-visible text
_NON_TEXT_TAGS = ("script", "style", "textarea", "option", "noscript", "template")

# Embedded documents are dropped along with their fallback content
_EMBED_TAGS = ("iframe", "frame", "frameset", "object", "embed")


def sanitize_html(html: str) -> str:
    """
    Strip every tag, attribute and embedded frame from ``html``.

    Text content is kept and entities are decoded. Runs of spaces are
    collapsed, each line is stripped and blank lines are dropped so the
    result reads as plain text in a chat bubble.
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(_NON_TEXT_TAGS + _EMBED_TAGS):
        tag.decompose()

    text = soup.get_text()
    lines = (re.sub(r"[ \t\r\f\v\xa0]+", " ", line).strip() for line in text.split("\n"))
    return "\n".join(line for line in lines if line)


def truncate_message(text: str, limit: int = MAX_MESSAGE_LENGTH_CHARS) -> str:
    """Cut ``text`` to the platform's single message limit.

    Truncation may land mid-word; no splitting across messages is done.
    """
    if len(text) < limit:
        return text
    logfire.info(
        "Reply truncated",
        original_length=len(text),
        max_length=limit,
    )
    return text[:limit]
