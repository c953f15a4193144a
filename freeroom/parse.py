"""Extract course times and places from the course-selection handbook."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field

from .logsetup import get_logger
from .xlsxreader import Sheet

WEEKDAYS = {"一": 1, "二": 2, "三": 3, "四": 4, "五": 5, "六": 6, "日": 7}
TRACKED_BUILDINGS = ("7", "8", "N")

# Columns 10, 12 and 14 hold class times; the column after each holds the place.
TIME_COLUMNS = (10, 12, 14)

_DATE = re.compile(r"星期(.*)第(.*)节\{(.*)\}")
_RANGE = re.compile(r"\s*([+-]?\d+)-\s*([+-]?\d+)")
_SINGLE = re.compile(r"\s*([+-]?\d+)")

_DOUBLE_MARK = "双"
_SINGLE_MARK = "单"


@dataclass
class CourseItem:
    """One scheduled meeting of a course, which keeps its room busy."""

    weeks: list[int] = field(default_factory=list)
    day: int = 0
    time: tuple[int, int] = (0, 0)
    place: str = ""


def _scan_span(text: str) -> tuple[int, int]:
    """Read ``a-b`` or ``a`` from the start of ``text``; trailing text is ignored."""
    if "-" in text:
        match = _RANGE.match(text)
        if match is None:
            raise ValueError(f"expected a range such as 1-2 in {text!r}")
        return int(match[1]), int(match[2])
    match = _SINGLE.match(text)
    if match is None:
        raise ValueError(f"expected a number in {text!r}")
    value = int(match[1])
    return value, value


def extract_class_time(text: str) -> tuple[int, int]:
    """Return the first and last class period of ``1-2`` or ``1``."""
    return _scan_span(text)


def _block_weeks(block: str, double_week: bool, single_week: bool) -> list[int]:
    start, end = _scan_span(block)

    has_double = _DOUBLE_MARK in block
    has_single = _SINGLE_MARK in block
    if has_double or has_single:
        double_week, single_week = has_double, has_single

    return [
        week
        for week in range(start, end + 1)
        if not (double_week and week % 2 != 0 or single_week and week % 2 == 0)
    ]


def extract_weeks(text: str) -> list[int]:
    """Return the teaching weeks of text such as ``1-15周(单)`` or ``4-6周,8周``.

    An odd/even mark anywhere applies to every block unless a block carries
    its own mark.
    """
    double_week = _DOUBLE_MARK in text
    single_week = _SINGLE_MARK in text
    weeks: list[int] = []
    for block in text.split(","):
        weeks.extend(_block_weeks(block, double_week, single_week))
    return weeks


def _cell(row: Sequence[str], index: int) -> str:
    return row[index] if index < len(row) else ""


def iter_courses(sheets: Iterable[Sheet]) -> Iterator[CourseItem]:
    """Yield the courses held in the tracked buildings, skipping bad entries."""
    logger = get_logger()
    for sheet in sheets:
        logger.info("Parsing sheet %s", sheet.name)
        for row_num, row in enumerate(sheet.rows):
            for column in TIME_COLUMNS:
                date = _cell(row, column)
                place = _cell(row, column + 1).upper()
                if not date or not place:
                    continue
                if place[:1] not in TRACKED_BUILDINGS:
                    continue

                match = _DATE.search(date)
                if match is None:
                    logger.error("Regexp match failed", extra={"fields": {"row num": row_num}})
                    continue

                try:
                    weeks = extract_weeks(match[3])
                except ValueError:
                    logger.error("ExtractWeeks error", extra={"fields": {"row num": row_num}})
                    continue

                try:
                    time = extract_class_time(match[2])
                except ValueError:
                    logger.error("ExtractClassTime error", extra={"fields": {"row num": row_num}})
                    continue

                yield CourseItem(
                    weeks=weeks,
                    day=WEEKDAYS.get(match[1], 0),
                    time=time,
                    place=place,
                )
    logger.info("Parsing course file OK")