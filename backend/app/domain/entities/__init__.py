from .country import Country, CountryCounts, format_country_label
from .name_record import (
    DESCRIPTION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    Gender,
    NameRecord,
)
from .search import GENDER_FILTER_ALL, SearchQuery, SearchScope, ViewTab
from .session import AuthUser, Session

__all__ = [
    "Country",
    "CountryCounts",
    "format_country_label",
    "DESCRIPTION_MAX_LENGTH",
    "NAME_MAX_LENGTH",
    "NAME_MIN_LENGTH",
    "Gender",
    "NameRecord",
    "GENDER_FILTER_ALL",
    "SearchQuery",
    "SearchScope",
    "ViewTab",
    "AuthUser",
    "Session",
]
