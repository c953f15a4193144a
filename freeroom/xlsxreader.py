"""Read cell text from the worksheets of an .xlsx workbook."""

from __future__ import annotations

import os
import posixpath
import re
import zipfile
from collections.abc import Iterator
from dataclasses import dataclass, field
from xml.etree import ElementTree

WORKBOOK_PART = "xl/workbook.xml"
WORKBOOK_RELS_PART = "xl/_rels/workbook.xml.rels"
SHARED_STRINGS_PART = "xl/sharedStrings.xml"

_CELL_REF = re.compile(r"^([A-Za-z]+)(\d+)$")


class WorkbookError(ValueError):
    """The file is not a readable .xlsx workbook."""


@dataclass
class Sheet:
    """One worksheet: its name and its rows of cell text.

    Every row is padded with empty strings to the sheet's widest row, and
    rows missing from the file appear as empty rows.
    """

    name: str
    rows: list[list[str]] = field(default_factory=list)


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _children(element: ElementTree.Element, name: str) -> Iterator[ElementTree.Element]:
    return (child for child in element if _local(child.tag) == name)


def _descendants(element: ElementTree.Element, name: str) -> Iterator[ElementTree.Element]:
    return (node for node in element.iter() if _local(node.tag) == name)


def _parse_part(archive: zipfile.ZipFile, part: str) -> ElementTree.Element:
    try:
        data = archive.read(part)
    except KeyError as exc:
        raise WorkbookError(f"workbook part {part} is missing") from exc
    try:
        return ElementTree.fromstring(data)
    except ElementTree.ParseError as exc:
        raise WorkbookError(f"workbook part {part} is not valid XML: {exc}") from exc


def _rich_text(element: ElementTree.Element) -> str:
    """Join the text runs of a string item, leaving out phonetic hints."""
    pieces = []
    for child in element:
        kind = _local(child.tag)
        if kind == "t":
            pieces.append(child.text or "")
        elif kind == "r":
            pieces.extend(t.text or "" for t in _children(child, "t"))
    return "".join(pieces)


def _shared_strings(archive: zipfile.ZipFile) -> list[str]:
    if SHARED_STRINGS_PART not in archive.namelist():
        return []
    root = _parse_part(archive, SHARED_STRINGS_PART)
    return [_rich_text(item) for item in _children(root, "si")]


def _relationship_targets(archive: zipfile.ZipFile) -> dict[str, str]:
    root = _parse_part(archive, WORKBOOK_RELS_PART)
    targets = {}
    for rel in _descendants(root, "Relationship"):
        rel_id = rel.get("Id")
        target = rel.get("Target")
        if rel_id is None or target is None:
            continue
        if target.startswith("/"):
            targets[rel_id] = target.lstrip("/")
        else:
            targets[rel_id] = posixpath.normpath(posixpath.join(posixpath.dirname(WORKBOOK_PART), target))
    return targets


def _relationship_id(element: ElementTree.Element) -> str | None:
    return next((value for key, value in element.attrib.items() if key.endswith("}id")), None)


def _column_index(letters: str) -> int:
    index = 0
    for letter in letters.upper():
        index = index * 26 + (ord(letter) - ord("A") + 1)
    return index - 1


def _cell_text(cell: ElementTree.Element, shared: list[str]) -> str:
    kind = cell.get("t", "n")
    if kind == "inlineStr":
        inline = next(_children(cell, "is"), None)
        return "" if inline is None else _rich_text(inline)

    value_node = next(_children(cell, "v"), None)
    value = "" if value_node is None or value_node.text is None else value_node.text
    if kind == "s":
        try:
            return shared[int(value)]
        except (ValueError, IndexError) as exc:
            raise WorkbookError(f"bad shared string index {value!r}") from exc
    if kind == "b":
        return "TRUE" if value == "1" else "FALSE"
    return value


def _read_rows(root: ElementTree.Element, shared: list[str]) -> list[list[str]]:
    cells_by_row: dict[int, dict[int, str]] = {}
    row_index = -1
    for row in _descendants(root, "row"):
        row_ref = row.get("r")
        row_index = int(row_ref) - 1 if row_ref else row_index + 1
        cells = cells_by_row.setdefault(row_index, {})
        column = -1
        for cell in _children(row, "c"):
            match = _CELL_REF.match(cell.get("r", ""))
            column = _column_index(match[1]) if match else column + 1
            cells[column] = _cell_text(cell, shared)

    if not cells_by_row:
        return []
    height = max(cells_by_row) + 1
    width = max((max(cells) + 1 for cells in cells_by_row.values() if cells), default=0)
    return [
        [cells_by_row.get(r, {}).get(c, "") for c in range(width)]
        for r in range(height)
    ]


def read_workbook(path: str | os.PathLike[str]) -> list[Sheet]:
    """Return the worksheets of the workbook at ``path`` in workbook order."""
    try:
        archive = zipfile.ZipFile(path)
    except zipfile.BadZipFile as exc:
        raise WorkbookError(f"{path} is not an xlsx file") from exc

    with archive:
        shared = _shared_strings(archive)
        targets = _relationship_targets(archive)
        workbook = _parse_part(archive, WORKBOOK_PART)

        sheets = []
        for entry in _descendants(workbook, "sheet"):
            rel_id = _relationship_id(entry)
            if rel_id is None or rel_id not in targets:
                raise WorkbookError(f"sheet {entry.get('name')!r} has no worksheet part")
            root = _parse_part(archive, targets[rel_id])
            sheets.append(Sheet(name=entry.get("name", ""), rows=_read_rows(root, shared)))
        return sheets