import string
import zipfile
from xml.sax.saxutils import escape, quoteattr

import pytest

from freeroom.xlsxreader import Sheet, WorkbookError, read_workbook

HEADER = '<?xml version="1.0" encoding="UTF-8"?>'


def write_raw_xlsx(path, sheet_parts, shared=()):
    """Write a workbook from raw worksheet XML bodies keyed by sheet name."""
    with zipfile.ZipFile(path, "w") as archive:
        entries = []
        rels = []
        for number, (name, body) in enumerate(sheet_parts.items(), start=1):
            archive.writestr(f"xl/worksheets/sheet{number}.xml", HEADER + body)
            entries.append(f'<sheet name={quoteattr(name)} sheetId="{number}" r:id="rId{number}"/>')
            rels.append(f'<Relationship Id="rId{number}" Target="worksheets/sheet{number}.xml"/>')
        archive.writestr(
            "xl/workbook.xml",
            HEADER + '<workbook xmlns:r="urn:test:rels"><sheets>' + "".join(entries) + "</sheets></workbook>",
        )
        archive.writestr(
            "xl/_rels/workbook.xml.rels",
            HEADER + "<Relationships>" + "".join(rels) + "</Relationships>",
        )
        archive.writestr(
            "xl/sharedStrings.xml",
            HEADER + "<sst>" + "".join(f"<si><t>{escape(s)}</t></si>" for s in shared) + "</sst>",
        )


def write_xlsx(path, sheets):
    shared = []
    positions = {}

    def sid(text):
        if text not in positions:
            positions[text] = len(shared)
            shared.append(text)
        return positions[text]

    parts = {}
    for name, rows in sheets.items():
        row_xml = []
        for r, row in enumerate(rows, start=1):
            cells = "".join(
                f'<c r="{string.ascii_uppercase[c]}{r}" t="s"><v>{sid(value)}</v></c>'
                for c, value in enumerate(row)
                if value
            )
            row_xml.append(f'<row r="{r}">{cells}</row>')
        parts[name] = "<worksheet><sheetData>" + "".join(row_xml) + "</sheetData></worksheet>"
    write_raw_xlsx(path, parts, shared)


def test_round_trip_of_text_cells(tmp_path):
    path = tmp_path / "book.xlsx"
    rows = [["星期一第9-10节{1-15周}", "N101"], ["a & b", "<tag>"]]
    write_xlsx(path, {"课程": rows, "second": [["x", "y"]]})

    sheets = read_workbook(path)

    assert [sheet.name for sheet in sheets] == ["课程", "second"]
    assert sheets[0].rows == rows
    assert sheets[1] == Sheet(name="second", rows=[["x", "y"]])


def test_rows_are_padded_to_sheet_width(tmp_path):
    path = tmp_path / "book.xlsx"
    write_xlsx(path, {"s": [["", "", "c"], ["a"]]})

    (sheet,) = read_workbook(path)

    assert sheet.rows == [["", "", "c"], ["a", "", ""]]
    assert all(len(row) == 3 for row in sheet.rows)


def test_numeric_inline_and_missing_rows(tmp_path):
    path = tmp_path / "book.xlsx"
    body = (
        "<worksheet><sheetData>"
        '<row r="1"><c r="A1"><v>42</v></c><c r="B1" t="inlineStr"><is><t>hello</t></is></c></row>'
        '<row r="3"><c r="B3" t="s"><v>0</v></c></row>'
        "</sheetData></worksheet>"
    )
    write_raw_xlsx(path, {"s": body}, shared=["world"])

    (sheet,) = read_workbook(path)

    assert sheet.rows == [["42", "hello"], ["", ""], ["", "world"]]


def test_empty_sheet_has_no_rows(tmp_path):
    path = tmp_path / "book.xlsx"
    write_xlsx(path, {"empty": []})

    assert read_workbook(path) == [Sheet(name="empty", rows=[])]


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_workbook(tmp_path / "absent.xlsx")


def test_non_zip_file_raises(tmp_path):
    path = tmp_path / "plain.xlsx"
    path.write_text("not a workbook", encoding="utf-8")

    with pytest.raises(WorkbookError):
        read_workbook(path)


def test_zip_without_workbook_raises(tmp_path):
    path = tmp_path / "other.xlsx"
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr("readme.txt", "nothing here")

    with pytest.raises(WorkbookError):
        read_workbook(path)