from __future__ import annotations

from datetime import date

from src.command_console.command_console.attendance.model import ClassInstance, Subject
from src.command_console.command_console.core.enums import ClassStatus, SubjectType, TaskPriority, TaskState
from src.command_console.command_console.projects.model import Project
from src.command_console.command_console.tasks.model import Task
from tests.fakes import Store, build_container

TODAY = date(2026, 3, 2)


def _store() -> Store:
    store = Store()
    store.subjects["s1"] = Subject("s1", "Mathematics", "MA101", SubjectType.LECTURE)
    for n, (day, status) in enumerate(
        [(date(2026, 2, 23), ClassStatus.ABSENT), (date(2026, 2, 24), ClassStatus.ABSENT), (TODAY, ClassStatus.SCHEDULED)]
    ):
        store.instances[f"ci-{n}"] = ClassInstance(
            instance_id=f"ci-{n}",
            subject_id="s1",
            class_date=day,
            start_time="09:00",
            end_time="10:00",
            class_type=SubjectType.LECTURE,
            status=status,
        )
    store.projects["p1"] = Project("p1", "Thesis", deadline=date(2026, 3, 6))
    store.tasks["t1"] = Task("t1", "Overdue", due_date=date(2026, 2, 28), priority=TaskPriority.LOW)
    store.tasks["t2"] = Task("t2", "Due today", due_date=TODAY, priority=TaskPriority.HIGH)
    store.tasks["t3"] = Task("t3", "Finished", due_date=date(2026, 2, 27), state=TaskState.COMPLETED)
    store.tasks["t4"] = Task("t4", "Tomorrow", due_date=date(2026, 3, 3))
    store.tasks["t5"] = Task("t5", "Undated")
    return store


def test_overview_collects_the_day():
    overview = build_container(_store(), today=TODAY).overview_service.get_overview()

    assert overview.date == TODAY
    assert [c.instance_id for c in overview.classes_today] == ["ci-2"]
    assert [t.task_id for t in overview.tasks_due] == ["t1", "t2"]
    assert overview.nearest_deadline.item_id == "project:p1:deadline"
    assert [s.subject_id for s in overview.subjects_at_risk] == ["s1"]


def test_overview_on_an_empty_store():
    overview = build_container(Store(), today=TODAY).overview_service.get_overview()

    assert overview.classes_today == ()
    assert overview.tasks_due == ()
    assert overview.nearest_deadline is None
    assert overview.subjects_at_risk == ()
