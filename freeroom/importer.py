"""Build the free-classroom data from a course handbook and store it."""

from __future__ import annotations

import os

from .logsetup import get_logger
from .models import Classroom, ClassroomStore
from .parse import iter_courses
from .rooms import build_all_classrooms, remove_busy_rooms
from .xlsxreader import read_workbook


def import_classroom_data(path: str | os.PathLike[str], store: ClassroomStore) -> list[Classroom]:
    """Read the handbook at ``path``, work out the free rooms and insert them.

    Returns the records that were inserted.
    """
    logger = get_logger()
    sheets = read_workbook(path)

    instances = build_all_classrooms()
    for course in iter_courses(sheets):
        remove_busy_rooms(instances, course)
    logger.info("Remove busy classrooms OK")

    try:
        store.create_many(instances)
    except Exception as exc:
        logger.error("Inserting multiple data failed", extra={"fields": {"reason": str(exc)}})
        raise
    logger.info("Import data into DB OK")
    return instances