import pytest

from freeroom.parse import CourseItem, extract_class_time, extract_weeks, iter_courses
from freeroom.xlsxreader import Sheet


def course_row(date="", place="", column=10, width=16):
    row = [""] * width
    row[column] = date
    row[column + 1] = place
    return row


@pytest.mark.parametrize(
    "text, expected",
    [("9-10", (9, 10)), ("1", (1, 1)), ("3-4节", (3, 4))],
)
def test_extract_class_time(text, expected):
    assert extract_class_time(text) == expected


@pytest.mark.parametrize("text", ["", "abc", "-x"])
def test_extract_class_time_rejects_garbage(text):
    with pytest.raises(ValueError):
        extract_class_time(text)


def test_extract_weeks_plain_range():
    assert extract_weeks("1-15周") == list(range(1, 16))


def test_extract_weeks_single_weeks_are_odd():
    weeks = extract_weeks("1-15周(单)")
    assert weeks
    assert all(week % 2 == 1 for week in weeks)
    assert set(weeks) <= set(range(1, 16))


def test_extract_weeks_double_weeks_are_even():
    weeks = extract_weeks("2-16周(双)")
    assert weeks
    assert all(week % 2 == 0 for week in weeks)
    assert set(weeks) <= set(range(2, 17))


def test_extract_weeks_several_blocks():
    assert extract_weeks("4-6周,8周") == [4, 5, 6, 8]


def test_extract_weeks_global_mark_applies_to_unmarked_block():
    assert extract_weeks("1-4周(双),7周") == [2, 4]


def test_extract_weeks_rejects_garbage():
    with pytest.raises(ValueError):
        extract_weeks("周")


def test_iter_courses_yields_matching_course():
    sheet = Sheet(name="s", rows=[course_row("星期一第9-10节{1-15周}", "n101")])

    assert list(iter_courses([sheet])) == [
        CourseItem(weeks=list(range(1, 16)), day=1, time=(9, 10), place="N101")
    ]


def test_iter_courses_reads_all_three_column_pairs():
    row = [""] * 16
    row[10], row[11] = "星期二第1节{1周}", "7101"
    row[12], row[13] = "星期日第3-4节{2周}", "8201"
    row[14], row[15] = "星期三第5节{3周}", "N201"

    courses = list(iter_courses([Sheet(name="s", rows=[row])]))

    assert [course.place for course in courses] == ["7101", "8201", "N201"]
    assert [course.day for course in courses] == [2, 7, 3]


def test_iter_courses_skips_other_buildings_and_bad_rows():
    rows = [
        course_row("星期一第1-2节{1周}", "9101"),
        course_row("星期一第1-2节{1周}", ""),
        course_row("no date here", "7101"),
        course_row("星期一第x节{1周}", "7101"),
        course_row("星期一第1节{x周}", "7101"),
        ["short row"],
    ]

    assert list(iter_courses([Sheet(name="s", rows=rows)])) == []


def test_iter_courses_unknown_weekday_is_zero():
    sheet = Sheet(name="s", rows=[course_row("星期八第1节{1周}", "7101")])

    (course,) = iter_courses([sheet])

    assert course.day == 0