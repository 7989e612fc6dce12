# tests/test_assembler.py

from __future__ import annotations

from types import MappingProxyType

import pytest

from planit.tasks.assembler import assemble, assemble_all, assemble_pages
from planit.tasks.task_models import Record, Task, TaskStatus

from .fakes import (
    checkbox_prop,
    date_entry,
    date_prop,
    formula_date_entry,
    page,
    rollup_array,
    rollup_date,
    title_entry,
    title_prop,
)


def _record(page_id: str = "p1", **props) -> Record:
    return Record.from_page(page(page_id, **props))


def test_full_record() -> None:
    task = assemble(
        _record(
            "p1",
            Task_Name=title_prop("Write report", " (draft)"),
            Checkbox=checkbox_prop(False),
            Date=date_prop("2024-04-30"),
            Objective_Name=rollup_array(title_entry("Launch")),
            Objective_Deadline=rollup_array(formula_date_entry("2024-05-01")),
        )
    )
    assert task == Task(
        id="p1",
        title="Write report",
        status=TaskStatus.TODO,
        do_date="2024-04-30",
        objective_name="Launch",
        objective_deadline="2024-05-01",
    )


def test_empty_record_gets_defaults() -> None:
    task = assemble(Record(id="p0"))
    assert task == Task(id="p0", title="Untitled", status=TaskStatus.TODO)
    assert task.do_date is None
    assert task.objective_name is None
    assert task.objective_deadline is None


@pytest.mark.parametrize(
    "checkbox, expected",
    [(True, "Done"), (False, "To Do")],
)
def test_checkbox_maps_to_status(checkbox: bool, expected: str) -> None:
    task = assemble(_record(Checkbox=checkbox_prop(checkbox)))
    assert task.status == expected


@pytest.mark.parametrize(
    "raw",
    [
        {"type": "checkbox", "checkbox": "yes"},
        {"type": "title", "title": []},
        {"type": "rollup", "rollup": None},
        None,
        "true",
    ],
)
def test_mismatched_checkbox_is_todo(raw) -> None:
    task = assemble(Record(id="p1", properties={"Checkbox": raw}))
    assert task.status == TaskStatus.TODO


@pytest.mark.parametrize(
    "raw",
    [
        title_prop(),
        {"type": "title", "title": None},
        date_prop("2024-01-01"),
        {"type": "rich_text", "rich_text": [{"plain_text": "Not a title"}]},
    ],
)
def test_missing_title_is_untitled(raw) -> None:
    assert assemble(Record(id="p1", properties={"Task Name": raw})).title == "Untitled"


def test_title_uses_first_fragment_even_if_empty_string() -> None:
    assert assemble(_record(Task_Name=title_prop("", "rest"))).title == ""


def test_do_date() -> None:
    assert assemble(_record(Date=date_prop("2024-01-02"))).do_date == "2024-01-02"
    assert assemble(_record(Date=date_prop(None))).do_date is None
    assert assemble(_record(Task_Name=title_prop("x"))).do_date is None
    assert assemble(_record(Date=checkbox_prop(True))).do_date is None


def test_objective_deadline_scans_in_order() -> None:
    task = assemble(
        _record(
            Objective_Deadline=rollup_array(
                formula_date_entry(None),
                formula_date_entry("2024-05-01"),
                date_entry("2024-01-01"),
            )
        )
    )
    assert task.objective_deadline == "2024-05-01"


def test_objective_deadline_from_scalar_rollup_date() -> None:
    assert assemble(_record(Objective_Deadline=rollup_date("2024-09-09"))).objective_deadline == "2024-09-09"


def test_objective_deadline_from_plain_date_property_is_ignored() -> None:
    assert assemble(_record(Objective_Deadline=date_prop("2024-09-09"))).objective_deadline is None


def test_objective_name_first_non_empty_title() -> None:
    task = assemble(
        _record(
            Objective_Name=rollup_array(
                date_entry("2024-01-01"),
                title_entry(),
                title_entry("Launch"),
                title_entry("Other objective"),
            )
        )
    )
    assert task.objective_name == "Launch"


def test_objective_name_requires_array_rollup() -> None:
    assert assemble(_record(Objective_Name=rollup_date("2024-01-01"))).objective_name is None
    assert assemble(_record(Objective_Name=title_prop("Launch"))).objective_name is None
    assert assemble(_record(Objective_Name=rollup_array(title_entry()))).objective_name is None


def test_property_names_are_case_sensitive() -> None:
    task = assemble(Record(id="p1", properties={"task name": title_prop("x"), "checkbox": checkbox_prop(True)}))
    assert task.title == "Untitled"
    assert task.status == TaskStatus.TODO


@pytest.mark.parametrize(
    "raw_page",
    [
        None,
        [],
        "page",
        {"id": 5, "properties": "nope"},
        {"properties": {"Task Name": 1, "Checkbox": {}, "Date": [], "Objective Name": {"type": "rollup"}}},
        {"id": "x", "properties": {"Objective Deadline": {"type": "rollup", "rollup": {"type": "array", "array": [None, 3]}}}},
    ],
)
def test_assemble_is_total_on_garbage(raw_page) -> None:
    task = assemble(Record.from_page(raw_page))
    assert isinstance(task, Task)
    assert task.title == "Untitled"
    assert task.status == TaskStatus.TODO
    assert task.do_date is None
    assert task.objective_name is None
    assert task.objective_deadline is None


def test_record_from_page_is_read_only() -> None:
    record = Record.from_page(page("p1", Checkbox=checkbox_prop(True)))
    assert isinstance(record.properties, MappingProxyType)
    with pytest.raises(TypeError):
        record.properties["Checkbox"] = checkbox_prop(False)  # type: ignore[index]


def test_assemble_all_keeps_order_and_count() -> None:
    records = [Record(id=f"p{i}") for i in (3, 1, 2, 1)]
    tasks = assemble_all(records)
    assert [t.id for t in tasks] == ["p3", "p1", "p2", "p1"]


def test_assemble_pages_does_not_mutate_input() -> None:
    pages = [page("a", Checkbox=checkbox_prop(True)), page("b", Task_Name=title_prop("B"))]
    snapshot = repr(pages)
    tasks = assemble_pages(pages)
    assert [(t.id, t.status, t.title) for t in tasks] == [("a", "Done", "Untitled"), ("b", "To Do", "B")]
    assert repr(pages) == snapshot


def test_task_to_dict_shape() -> None:
    task = Task(id="p1", title="T", status=TaskStatus.DONE, do_date="2024-01-01")
    assert task.to_dict() == {
        "id": "p1",
        "title": "T",
        "status": "Done",
        "do_date": "2024-01-01",
        "objective_name": None,
        "objective_deadline": None,
    }


def test_title_survives_a_bad_later_fragment() -> None:
    task = assemble(Record(id="p1", properties={"Task Name": {"type": "title", "title": [{"plain_text": "Ship"}, {"type": "mention"}]}}))
    assert task.title == "Ship"
