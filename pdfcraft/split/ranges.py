"""Parsing and normalisation of user supplied page ranges."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence, Union

from ..exceptions import InvalidRangeSyntaxError, NoRangesProvidedError, RangeOutOfBoundsError

_SEPARATORS = re.compile(r"[\n,;]+")
_TOKEN = re.compile(r"^(\d+)(?:\s*-\s*(\d+))?$")


@dataclass(frozen=True)
class PageRange:
    """A 1-based inclusive page span.

    Parsed ranges keep the order they were typed in, so ``start`` may exceed
    ``end`` until :meth:`normalized` is applied.
    """

    start: int
    end: int

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"

    @property
    def page_count(self) -> int:
        return abs(self.end - self.start) + 1

    def page_indexes(self) -> range:
        """Return the 0-based page indexes covered, in ascending order."""

        low, high = sorted((self.start, self.end))
        return range(low - 1, high)

    def normalized(self, page_count: int) -> "PageRange":
        """Clamp both bounds into ``[1, page_count]`` then order them."""

        if page_count < 1:
            raise ValueError("page_count must be a positive integer")
        start = min(max(self.start, 1), page_count)
        end = min(max(self.end, 1), page_count)
        if start > end:
            start, end = end, start
        return PageRange(start, end)

    def validate(self, page_count: int) -> "PageRange":
        if not 1 <= self.start <= self.end <= page_count:
            raise RangeOutOfBoundsError(self, page_count)
        return self

    def ordered(self) -> "PageRange":
        """Swap the bounds if they were typed high to low. Never clamps."""

        if self.start > self.end:
            return PageRange(self.end, self.start)
        return self

    def filename(self, base_name: str) -> str:
        safe_base = base_name.replace(" ", "_")
        return f"{safe_base}_pages_{self.start}-{self.end}.pdf"


RangeInput = Union[str, PageRange, Sequence[object]]


def parse_token(token: str) -> PageRange:
    """Parse a single ``N`` or ``A-B`` token."""

    match = _TOKEN.match(token.strip())
    if not match:
        raise InvalidRangeSyntaxError(token)
    start = int(match.group(1))
    end = int(match.group(2)) if match.group(2) is not None else start
    return PageRange(start, end)


def _split_text(text: str) -> Iterator[str]:
    return (token.strip() for token in _SEPARATORS.split(text) if token.strip())


def _is_pair(item: object) -> bool:
    return isinstance(item, (tuple, list)) and len(item) == 2


def _pair_to_range(pair: Sequence[object]) -> PageRange:
    start, end = pair
    for value in (start, end):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidRangeSyntaxError(f"{start}-{end}")
    return PageRange(int(start), int(end))  # type: ignore[arg-type]


def _tokens_from_iterable(items: Iterable[object]) -> Iterator[PageRange | str]:
    for item in items:
        if isinstance(item, PageRange):
            yield item
        elif isinstance(item, str):
            yield from _split_text(item)
        elif _is_pair(item):
            yield _pair_to_range(item)  # type: ignore[arg-type]
        elif isinstance(item, int) and not isinstance(item, bool):
            yield PageRange(item, item)
        else:
            raise InvalidRangeSyntaxError(item)


def parse_ranges(ranges: RangeInput | None) -> List[PageRange]:
    """Parse *ranges* into :class:`PageRange` objects in the order given.

    Args:
        ranges: Free-form text with tokens separated by newlines, commas or
            semicolons, a single ``(from, to)`` pair, a :class:`PageRange`,
            or a sequence mixing those forms and bare integers.

    Raises:
        InvalidRangeSyntaxError: If any token is malformed. Nothing is
            returned in that case, even for the tokens that parsed.
        NoRangesProvidedError: If no tokens remain after dropping blanks.

    Returns:
        Ranges in input order, with bounds exactly as typed (not clamped).
    """

    if ranges is None:
        raise NoRangesProvidedError()
    if isinstance(ranges, (bytes, bytearray)):
        raise InvalidRangeSyntaxError(ranges)

    if isinstance(ranges, PageRange):
        return [ranges]
    if isinstance(ranges, str):
        items: list[PageRange | str] = list(_split_text(ranges))
    elif _is_pair(ranges) and all(
        isinstance(value, int) and not isinstance(value, bool) for value in ranges  # type: ignore[union-attr]
    ):
        return [_pair_to_range(ranges)]  # type: ignore[arg-type]
    elif isinstance(ranges, Sequence):
        items = list(_tokens_from_iterable(ranges))
    else:
        raise InvalidRangeSyntaxError(ranges)

    parsed = [item if isinstance(item, PageRange) else parse_token(item) for item in items]
    if not parsed:
        raise NoRangesProvidedError()
    return parsed


def normalize_ranges(ranges: Iterable[PageRange], page_count: int) -> List[PageRange]:
    """Clamp and order every range against *page_count*. Never fails on bounds."""

    return [page_range.normalized(page_count) for page_range in ranges]


def validate_ranges(ranges: Sequence[PageRange], page_count: int) -> None:
    """Reject the batch if any range falls outside ``1..page_count``."""

    if not ranges:
        raise NoRangesProvidedError()
    for page_range in ranges:
        page_range.validate(page_count)


__all__ = [
    "PageRange",
    "RangeInput",
    "parse_token",
    "parse_ranges",
    "normalize_ranges",
    "validate_ranges",
]
