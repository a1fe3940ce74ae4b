"""Models for search results and the formatted search reply."""

from dataclasses import dataclass, field
from typing import List

from pydantic import BaseModel, ConfigDict


class SearchResultItem(BaseModel):
    """One item of the search API ``items`` array."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    title: str = ""
    snippet: str = ""
    link: str = ""


@dataclass(frozen=True)
class SearchReply:
    """Formatted reply text plus result links in the same order."""

    text: str
    links: List[str] = field(default_factory=list)
