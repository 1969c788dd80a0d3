"""Domain models for hydration tips."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Tip:
    """A hydration advice entry from the remote tips document."""

    id: int
    title: str
    description: str
    image_url: str


@dataclass(frozen=True)
class TipsLoading:
    """A tips fetch is in flight."""


@dataclass(frozen=True)
class TipsSuccess:
    """Tips were fetched and parsed."""

    tips: tuple[Tip, ...]


@dataclass(frozen=True)
class TipsError:
    """The tips fetch failed."""

    message: str


TipsResult = TipsLoading | TipsSuccess | TipsError
