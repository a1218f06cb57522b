"""Tests for parsing.py: add payloads, update patches and date:number selectors."""

import pytest

from datekeeper.dates import parse_date
from datekeeper.errors import InvalidFormat
from datekeeper.parsing import (
    parse_selector,
    parse_task,
    parse_task_patch,
    split_update,
)


def test_parse_task_three_lines():
    task = parse_task("10-5-0\nMom's birthday\nbuy flowers")

    assert task.date == parse_date("10-5")
    assert task.subject == "Mom's birthday"
    assert task.description == "buy flowers"
    assert len(task.id) == 8


def test_parse_task_without_description():
    task = parse_task("10-5\nMom's birthday")

    assert task.description == ""


def test_parse_task_multiline_description():
    task = parse_task("10-5\nTrip\npack bags\nbook taxi\n")

    assert task.description == "pack bags\nbook taxi"


def test_parse_task_strips_surrounding_whitespace():
    task = parse_task("\n  10-5-2026  \n  Dentist  \n")

    assert task.date == parse_date("10-5-2026")
    assert task.subject == "Dentist"


def test_parse_task_rejects_bad_date():
    with pytest.raises(InvalidFormat):
        parse_task("not-a-date\nSubject")


def test_parse_task_requires_subject():
    with pytest.raises(InvalidFormat, match="name is missing"):
        parse_task("10-5")


def test_parse_task_rejects_empty_text():
    with pytest.raises(InvalidFormat):
        parse_task("   ")


def test_parse_task_assigns_fresh_ids():
    first = parse_task("10-5\nA")
    second = parse_task("10-5\nA")

    assert first.id != second.id


def test_patch_subject_only():
    patch = parse_task_patch("\nNew subject")

    assert patch.date is None
    assert patch.subject == "New subject"
    assert patch.description is None


def test_patch_all_fields():
    patch = parse_task_patch("11-6-2027\nRenamed\nnew notes")

    assert patch.date == parse_date("11-6-2027")
    assert patch.subject == "Renamed"
    assert patch.description == "new notes"


def test_patch_date_only():
    patch = parse_task_patch("11-6")

    assert patch.date == parse_date("11-6")
    assert patch.subject is None
    assert patch.description is None


def test_patch_rejects_malformed_date_line():
    with pytest.raises(InvalidFormat):
        parse_task_patch("soon\nRenamed")


def test_patch_rejects_empty():
    with pytest.raises(InvalidFormat, match="nothing to update"):
        parse_task_patch("\n\n")


def test_selector_basic():
    selector = parse_selector("10-5:2")

    assert selector.date == parse_date("10-5")
    assert selector.index == 2
    assert selector.position == 1


def test_selector_with_year_and_spaces():
    selector = parse_selector(" 10-5-2026 : 1 ")

    assert selector.date == parse_date("10-5-2026")
    assert selector.index == 1


def test_selector_requires_index():
    with pytest.raises(InvalidFormat, match="number is missing"):
        parse_selector("10-5")


@pytest.mark.parametrize("text", ["10-5:0", "10-5:-1", "10-5:x", "10-5:", "10-5:1.5"])
def test_selector_rejects_non_positive_index(text):
    with pytest.raises(InvalidFormat):
        parse_selector(text)


def test_selector_rejects_bad_date():
    with pytest.raises(InvalidFormat):
        parse_selector("40-5:1")


def test_split_update():
    selector, patch = split_update("10-5:1\n\nNew subject")

    assert selector.index == 1
    assert patch.date is None
    assert patch.subject == "New subject"


def test_split_update_without_patch_lines():
    with pytest.raises(InvalidFormat, match="nothing to update"):
        split_update("10-5:1")


def test_selector_rejects_overlong_index():
    with pytest.raises(InvalidFormat, match="positive integer"):
        parse_selector("10-5:" + "9" * 5000)
