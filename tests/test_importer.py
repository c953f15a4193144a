import string
import zipfile
from xml.sax.saxutils import escape

import pytest

from freeroom.importer import import_classroom_data
from freeroom.models import ClassroomStore, classroom_from_document
from freeroom.rooms import BUILDING_ROOMS, build_all_classrooms
from freeroom.xlsxreader import WorkbookError

HEADER = '<?xml version="1.0" encoding="UTF-8"?>'


class FakeCollection:
    def __init__(self, fail=False):
        self.docs = []
        self.fail = fail

    def insert_many(self, docs):
        if self.fail:
            raise RuntimeError("insert refused")
        self.docs.extend(docs)


def write_xlsx(path, rows):
    shared = []
    positions = {}

    def sid(text):
        if text not in positions:
            positions[text] = len(shared)
            shared.append(text)
        return positions[text]

    row_xml = []
    for r, row in enumerate(rows, start=1):
        cells = "".join(
            f'<c r="{string.ascii_uppercase[c]}{r}" t="s"><v>{sid(value)}</v></c>'
            for c, value in enumerate(row)
            if value
        )
        row_xml.append(f'<row r="{r}">{cells}</row>')

    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr(
            "xl/worksheets/sheet1.xml",
            HEADER + "<worksheet><sheetData>" + "".join(row_xml) + "</sheetData></worksheet>",
        )
        archive.writestr(
            "xl/workbook.xml",
            HEADER + '<workbook xmlns:r="urn:test:rels"><sheets>'
            '<sheet name="courses" sheetId="1" r:id="rId1"/></sheets></workbook>',
        )
        archive.writestr(
            "xl/_rels/workbook.xml.rels",
            HEADER + '<Relationships><Relationship Id="rId1" Target="worksheets/sheet1.xml"/></Relationships>',
        )
        archive.writestr(
            "xl/sharedStrings.xml",
            HEADER + "<sst>" + "".join(f"<si><t>{escape(s)}</t></si>" for s in shared) + "</sst>",
        )


def course_row(date, place):
    row = [""] * 16
    row[10] = date
    row[11] = place
    return row


def stored(collection, week, day, building, time):
    doc = next(
        d for d in collection.docs
        if d["week"] == week and d["day"] == day and d["building"] == building
    )
    classroom = classroom_from_document(doc)
    return next(item.rooms for item in classroom.items if item.time == time)


@pytest.fixture
def handbook(tmp_path):
    path = tmp_path / "handbook.xlsx"
    write_xlsx(path, [
        ["header"],
        course_row("星期一第1-2节{1-2周}", "7101"),
        course_row("星期三第5节{3周}", "n201"),
        course_row("星期一第1-2节{1周}", "9101"),
    ])
    return path


def test_import_stores_every_record(handbook):
    collection = FakeCollection()

    instances = import_classroom_data(handbook, ClassroomStore(collection))

    assert len(collection.docs) == len(build_all_classrooms())
    assert collection.docs == [c.to_document() for c in instances]


def test_import_removes_busy_rooms(handbook):
    collection = FakeCollection()

    import_classroom_data(handbook, ClassroomStore(collection))

    assert "7101" not in stored(collection, 1, 1, "7", 1)
    assert "7101" not in stored(collection, 2, 1, "7", 2)
    assert "7101" in stored(collection, 3, 1, "7", 1)
    assert "N201" not in stored(collection, 3, 3, "N", 5)
    assert "N201" in stored(collection, 3, 3, "N", 6)
    assert stored(collection, 1, 1, "8", 1) == list(BUILDING_ROOMS["8"])


def test_insert_failure_is_raised(handbook):
    with pytest.raises(RuntimeError):
        import_classroom_data(handbook, ClassroomStore(FakeCollection(fail=True)))


def test_missing_handbook_raises(tmp_path):
    collection = FakeCollection()

    with pytest.raises(FileNotFoundError):
        import_classroom_data(tmp_path / "absent.xlsx", ClassroomStore(collection))
    assert collection.docs == []


def test_unreadable_handbook_raises(tmp_path):
    path = tmp_path / "broken.xlsx"
    path.write_bytes(b"not a zip archive")
    collection = FakeCollection()

    with pytest.raises(WorkbookError):
        import_classroom_data(path, ClassroomStore(collection))
    assert collection.docs == []