"""Domain entities for countries and their per-country name totals."""

from dataclasses import dataclass, field

_FLAG_CDN = "https://flagcdn.com"


@dataclass(frozen=True)
class Country:
    """A country names are grouped by. Read-only on this side of the store."""

    id: str
    name: str
    code: str
    active: bool = True

    @property
    def display_name(self) -> str:
        return (self.name or "").upper()

    @property
    def label(self) -> str:
        """Human label in the form ``"ARGENTINA (AR)"``."""
        return format_country_label(self.name, self.code)

    def flag_url(self, size: int = 80) -> str:
        """Flag image URL for the territory code, or ``""`` if the code is invalid."""
        code = (self.code or "").strip().lower()
        if len(code) != 2:
            return ""
        return f"{_FLAG_CDN}/w{size}/{code}.png"


@dataclass
class CountryCounts:
    """Total names per country id. A missing id means zero, never unknown."""

    totals: dict[str, int] = field(default_factory=dict)

    def total_for(self, country_id: str) -> int:
        return self.totals.get(country_id, 0)

    def __len__(self) -> int:
        return len(self.totals)


def format_country_label(name: str | None, code: str | None) -> str:
    """Build the ``"NAME (CODE)"`` label, or ``""`` when the name is missing."""
    if not name:
        return ""
    return f"{name.upper()} ({(code or '').upper()})"
