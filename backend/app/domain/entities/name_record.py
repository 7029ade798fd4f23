"""Domain entity — a single name entry listed under a country."""

from dataclasses import dataclass
from enum import Enum

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 60
DESCRIPTION_MAX_LENGTH = 200


class Gender(str, Enum):
    """Gender of a listed person. Values are the store's wire values."""

    MALE = "HOMBRE"
    FEMALE = "MUJER"


@dataclass
class NameRecord:
    """A name entry. ``(country_id, name)`` is unique in the store.

    ``country_label`` and ``country_code`` are only filled in for
    cross-country search results, where the country is joined in.
    """

    country_id: str
    name: str
    gender: Gender = Gender.MALE
    description: str | None = None
    created_by: str | None = None
    id: str | None = None
    country_label: str = ""
    country_code: str = ""
