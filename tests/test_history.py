# tests/test_history.py

from datetime import datetime, timedelta

import pytest

from backend.labgen.errors import ArchiveFailure
from backend.labgen.history import MemoryHistorySink, SqlHistorySink
from backend.labgen.schemas import HistoryRecord, StudentSummary

BASE = datetime(2026, 1, 5, 9, 0, 0)


def record(i, **overrides):
    values = dict(
        id=f"h{i}",
        generated_at=BASE + timedelta(minutes=i),
        subject="physics",
        topic="optics",
        difficulty="easy",
        mode="exam",
        total_students=3,
        questions_per_student=1,
    )
    values.update(overrides)
    return HistoryRecord(**values)


def test_memory_sink_is_newest_first_and_capped():
    sink = MemoryHistorySink(limit=3)
    for i in range(5):
        sink.append(record(i))

    assert [r.id for r in sink.list()] == ["h4", "h3", "h2"]


def test_sql_sink_round_trips_students(sql_history):
    sql_history.append(record(1, students_assigned=[StudentSummary(id="S-01", name="Ada", class_label="7A")]))

    [stored] = sql_history.list()

    assert stored.id == "h1"
    assert stored.students_assigned[0].name == "Ada"
    assert stored.to_dict()["studentsAssigned"] == [{"id": "S-01", "name": "Ada", "class": "7A"}]
    assert stored.to_dict()["totalStudents"] == 3


def test_sql_sink_keeps_newest_fifty(sql_history):
    for i in range(55):
        sql_history.append(record(i))

    ids = [r.id for r in sql_history.list()]

    assert len(ids) == 50
    assert ids[0] == "h54"
    assert ids[-1] == "h5"


def test_sql_sink_clear(session_factory):
    sink = SqlHistorySink(session_factory, limit=10)
    sink.append(record(1))
    sink.append(record(2))

    assert sink.clear() == 2
    assert sink.list() == []


def test_sql_sink_wraps_storage_errors(sql_history):
    sql_history.append(record(1))

    with pytest.raises(ArchiveFailure):
        sql_history.append(record(1))
