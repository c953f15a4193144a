"""Free-classroom records and their MongoDB storage."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pymongo import MongoClient

from .logsetup import get_logger

DEFAULT_DB_NAME = "ccnubox"
CLASSROOM_COLLECTION = "classroom"


@dataclass
class RoomItem:
    """The free rooms during one class period."""

    time: int
    rooms: list[str] = field(default_factory=list)


@dataclass
class Classroom:
    """Free rooms of one building on one day of one teaching week."""

    week: int
    day: int
    building: str
    items: list[RoomItem] = field(default_factory=list)

    def to_document(self) -> dict[str, Any]:
        """Return the stored (and JSON) form of this record."""
        return {
            "week": self.week,
            "day": self.day,
            "building": self.building,
            "list": [{"time": item.time, "rooms": list(item.rooms)} for item in self.items],
        }


def classroom_from_document(doc: Mapping[str, Any]) -> Classroom:
    """Build a :class:`Classroom` from its stored form; absent fields are zero."""
    return Classroom(
        week=int(doc.get("week", 0)),
        day=int(doc.get("day", 0)),
        building=str(doc.get("building", "")),
        items=[
            RoomItem(time=int(item.get("time", 0)), rooms=list(item.get("rooms") or []))
            for item in doc.get("list") or []
        ],
    )


class ClassroomNotFound(LookupError):
    """No record for the requested week, day and building."""


class ClassroomStore:
    """Reads and writes classroom records in one collection."""

    def __init__(self, collection: Any, client: Any = None) -> None:
        self._collection = collection
        self._client = client

    def create(self, classroom: Classroom) -> None:
        self._collection.insert_one(classroom.to_document())

    def create_many(self, classrooms: Iterable[Classroom]) -> None:
        docs = [classroom.to_document() for classroom in classrooms]
        if not docs:
            raise ValueError("no classrooms to insert")
        self._collection.insert_many(docs)

    def update(self, classroom: Classroom) -> None:
        """Replace the record with the same week, day and building."""
        self._collection.replace_one(
            {"week": classroom.week, "day": classroom.day, "building": classroom.building},
            classroom.to_document(),
        )

    def get(self, week: int, day: int, building: str) -> Classroom:
        doc = self._collection.find_one({"week": week, "day": day, "building": building})
        if doc is None:
            raise ClassroomNotFound(f"no classroom data for week {week}, day {day}, building {building}")
        return classroom_from_document(doc)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()

    def __enter__(self) -> ClassroomStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def connect(url: str, db_name: str = DEFAULT_DB_NAME) -> ClassroomStore:
    """Connect to MongoDB, check the connection, and return the classroom store."""
    logger = get_logger()
    client = MongoClient(url)
    try:
        client.admin.command("ping")
    except Exception as exc:
        logger.error("Database connection failed: %s", exc)
        client.close()
        raise
    logger.info("Connected to MongoDB!")
    return ClassroomStore(client[db_name][CLASSROOM_COLLECTION], client=client)