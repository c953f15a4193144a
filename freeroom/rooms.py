"""The full set of classrooms, from which busy rooms are struck out."""

from __future__ import annotations

from collections.abc import Iterable

from .models import Classroom, RoomItem
from .parse import CourseItem

WEEK_MIN = 1
WEEK_MAX = 21
DAY_MIN = 1
DAY_MAX = 7
PERIODS = range(1, 13)


def _floor(prefix: str, floor: int, numbers: Iterable[int]) -> list[str]:
    return [f"{prefix}{floor}{number:02d}" for number in numbers]


def _building(prefix: str, layout: Iterable[tuple[int, Iterable[int]]]) -> tuple[str, ...]:
    rooms: list[str] = []
    for floor, numbers in layout:
        rooms.extend(_floor(prefix, floor, numbers))
    return tuple(rooms)


BUILDING_ROOMS: dict[str, tuple[str, ...]] = {
    "7": _building(
        "7",
        [
            (1, range(1, 10)),
            (2, [*range(1, 10), 11]),
            (3, [*range(1, 10), 11]),
            (4, range(1, 12)),
        ],
    ),
    "8": _building(
        "8",
        [
            (1, range(1, 13)),
            (2, range(1, 17)),
            (3, range(1, 17)),
            (4, range(1, 17)),
            (5, range(1, 17)),
            (7, range(16, 22)),
        ],
    ),
    "N": _building(
        "N",
        [
            (1, [*range(1, 13), 15, 17, 19]),
            (2, [*range(1, 18), 19, 21, 23]),
            (3, [*range(1, 22), 23, 25, 27]),
        ],
    ),
}


def build_all_classrooms() -> list[Classroom]:
    """Return every building, day and week with every room free in every period."""
    return [
        Classroom(
            week=week,
            day=day,
            building=building,
            items=[RoomItem(time=period, rooms=list(rooms)) for period in PERIODS],
        )
        for week in range(WEEK_MIN, WEEK_MAX + 1)
        for day in range(DAY_MIN, DAY_MAX + 1)
        for building, rooms in BUILDING_ROOMS.items()
    ]


def remove_busy_rooms(instances: Iterable[Classroom], course: CourseItem) -> None:
    """Strike the course's room from the periods, days and weeks it is in use."""
    place = course.place
    building = place[:1]
    weeks = set(course.weeks)
    first, last = course.time

    for instance in instances:
        if instance.building != building or instance.day != course.day:
            continue
        if instance.week not in weeks:
            continue
        for item in instance.items:
            if first <= item.time <= last and place in item.rooms:
                item.rooms.remove(place)