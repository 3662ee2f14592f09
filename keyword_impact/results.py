"""Aggregated keyword matches and the impact report built from them."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import Enum, IntEnum

from rich.console import Console
from rich.table import Table
from rich.text import Text

LOW_FILE_COUNT_THRESHOLD = 200_000
VENDOR_COLUMN_WIDTH = 60


class Vendor(Enum):
    """Package vendors that are reported by name; everything else is OTHER."""

    SYMFONY = "symfony/"
    LARAVEL = "laravel/"
    DOCTRINE = "doctrine/"
    PHPUNIT = "phpunit/"
    TWIG = "twig/"
    ILLUMINATE = "illuminate/"
    OTHER = ""

    @property
    def label(self) -> str:
        """The vendor name without its trailing slash."""
        return self.value.rstrip("/")

    def is_well_known(self) -> bool:
        return self is not Vendor.OTHER

    @classmethod
    def from_package(cls, package: str) -> Vendor:
        """Classify a ``vendor/package`` name by its prefix."""
        for vendor in cls:
            if vendor is not cls.OTHER and package.startswith(vendor.value):
                return vendor
        return cls.OTHER


@dataclass(frozen=True)
class Match:
    """One occurrence of a keyword in a source file."""

    keyword: str
    vendor: Vendor
    is_hard: bool


class ImpactLevel(IntEnum):
    """How badly reserving a keyword would break existing code."""

    NONE = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def calculate(cls, total: int) -> ImpactLevel:
        if total == 0:
            return cls.NONE
        if total <= 25:
            return cls.LOW
        if total <= 100:
            return cls.MEDIUM
        if total <= 500:
            return cls.HIGH
        return cls.CRITICAL


_IMPACT_STYLES = {
    ImpactLevel.NONE: "green",
    ImpactLevel.LOW: "cyan",
    ImpactLevel.MEDIUM: "yellow",
    ImpactLevel.HIGH: "red",
    ImpactLevel.CRITICAL: "bold magenta",
}

_HEADERS = (
    "Keyword",
    "Soft",
    "Hard",
    "Soft Impact",
    "Hard Impact",
    "Well-Known Vendors",
)


@dataclass
class KeywordResult:
    """Counts of soft and hard matches for a single keyword."""

    soft_count: int = 0
    hard_count: int = 0
    well_known_vendors: set[Vendor] = field(default_factory=set)

    def total_count(self) -> int:
        return self.soft_count + self.hard_count

    def soft_impact(self) -> ImpactLevel:
        return ImpactLevel.calculate(self.soft_count)

    def hard_impact(self) -> ImpactLevel:
        return ImpactLevel.calculate(self.total_count())

    def add_match(self, match: Match) -> None:
        if match.is_hard:
            self.hard_count += 1
        else:
            self.soft_count += 1
        if match.vendor.is_well_known():
            self.well_known_vendors.add(match.vendor)

    def vendor_summary(self) -> str:
        """Sorted well-known vendor names, wrapped for display, or ``-``."""
        if not self.well_known_vendors:
            return "-"
        names = sorted(vendor.label for vendor in self.well_known_vendors)
        return wrap_text(", ".join(names), VENDOR_COLUMN_WIDTH)


def wrap_text(text: str, max_width: int) -> str:
    """Break a ``", "``-separated list into lines of at most ``max_width``."""
    if len(text) <= max_width:
        return text

    result = ""
    current = ""
    for word in text.split(", "):
        piece = word if not current else f", {word}"
        if len(current) + len(piece) <= max_width:
            current += piece
        else:
            if result:
                result += "\n"
            result += current
            current = word

    if current:
        if result:
            result += "\n"
        result += current
    return result


@dataclass
class AnalysisReport:
    """Per-keyword results over a number of analysed files."""

    total_files: int
    results: dict[str, KeywordResult] = field(default_factory=dict)

    def add_matches(self, matches) -> None:
        for match in matches:
            self.results.setdefault(match.keyword, KeywordResult()).add_match(match)

    def ensure_all_keywords(self, keywords) -> None:
        for keyword in keywords:
            self.results.setdefault(keyword, KeywordResult())

    def should_warn_low_file_count(self) -> bool:
        return self.total_files < LOW_FILE_COUNT_THRESHOLD

    def sorted_rows(self) -> list[tuple[str, KeywordResult]]:
        """Keywords ordered by hard impact, then total count (both descending), then name."""
        return sorted(
            self.results.items(),
            key=lambda item: (
                -item[1].hard_impact(),
                -item[1].total_count(),
                item[0],
            ),
        )

    def build_table(self) -> Table:
        table = Table()
        for header in _HEADERS:
            justify = "right" if header in ("Soft", "Hard") else "left"
            table.add_column(header, header_style="bold", justify=justify)

        for keyword, result in self.sorted_rows():
            soft, hard = result.soft_impact(), result.hard_impact()
            table.add_row(
                Text(keyword, style="bold"),
                str(result.soft_count),
                str(result.hard_count),
                Text(soft.label, style=_IMPACT_STYLES[soft]),
                Text(hard.label, style=_IMPACT_STYLES[hard]),
                result.vendor_summary(),
            )
        return table

    def display_table(self, console: Console | None = None) -> None:
        if self.should_warn_low_file_count():
            print(
                f"\n⚠️  WARNING: Only analyzed {self.total_files} files "
                "(less than 200,000 recommended)",
                file=sys.stderr,
            )
            print(
                "   Consider increasing --max to scan more packages "
                "for a comprehensive analysis.\n",
                file=sys.stderr,
            )
        (console or Console()).print(self.build_table())