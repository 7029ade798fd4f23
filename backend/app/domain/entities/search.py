"""Domain value objects describing what the two list views are filtered by."""

from dataclasses import dataclass
from enum import Enum

GENDER_FILTER_ALL = "ALL"


class SearchScope(str, Enum):
    """Whether a query is restricted to one country or spans all of them."""

    PER_COUNTRY = "per_country"
    GLOBAL = "global"


class ViewTab(str, Enum):
    PER_COUNTRY = "per_country"
    GLOBAL = "global"


@dataclass(frozen=True)
class SearchQuery:
    """A debounced query as issued to the store.

    Also used as the staleness key of an in-flight fetch: a result is only
    applied while the view is still showing the same query.
    """

    scope: SearchScope
    text: str = ""
    country_id: str = ""
    gender_filter: str = GENDER_FILTER_ALL

    @classmethod
    def per_country(cls, country_id: str, text: str) -> "SearchQuery":
        return cls(scope=SearchScope.PER_COUNTRY, text=text, country_id=country_id)

    @classmethod
    def global_search(cls, text: str) -> "SearchQuery":
        return cls(scope=SearchScope.GLOBAL, text=text)

    @property
    def trimmed_text(self) -> str:
        return (self.text or "").strip()
