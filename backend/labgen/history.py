from __future__ import annotations
import json
import logging
from typing import Callable, List, Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from .cleanup import clear_history, trim_history
from .db import SessionLocal
from .errors import ArchiveFailure
from .models import AllocationHistory
from .schemas import HistoryRecord, StudentSummary
from .settings import settings

logger = logging.getLogger(__name__)


class HistorySink(Protocol):
	"""Append-only archive of lightweight allocation summaries."""

	def append(self, record: HistoryRecord) -> None: ...


class MemoryHistorySink:
	def __init__(self, limit: int = 50) -> None:
		self.limit = limit
		self._records: List[HistoryRecord] = []

	def append(self, record: HistoryRecord) -> None:
		self._records.insert(0, record)
		del self._records[self.limit:]

	def list(self) -> List[HistoryRecord]:
		return list(self._records)

	def clear(self) -> int:
		removed = len(self._records)
		self._records.clear()
		return removed


class SqlHistorySink:
	"""History archive stored in the ``allocation_history`` table, newest first."""

	def __init__(self, session_factory: Callable[[], Session], limit: int = 50) -> None:
		self._session_factory = session_factory
		self.limit = limit

	def append(self, record: HistoryRecord) -> None:
		db = self._session_factory()
		try:
			row = AllocationHistory(
				id=record.id,
				generated_at=record.generated_at,
				subject=record.subject,
				topic=record.topic,
				difficulty=record.difficulty,
				mode=record.mode,
				total_students=record.total_students,
				questions_per_student=record.questions_per_student,
				students_assigned=json.dumps(
					[s.model_dump(by_alias=True) for s in record.students_assigned]
				),
			)
			db.add(row)
			db.commit()
			trim_history(db, self.limit)
		except Exception as exc:
			db.rollback()
			raise ArchiveFailure(f"could not archive allocation {record.id}: {exc}") from exc
		finally:
			db.close()

	def list(self) -> List[HistoryRecord]:
		db = self._session_factory()
		try:
			rows = db.execute(
				select(AllocationHistory)
				.order_by(AllocationHistory.generated_at.desc(), AllocationHistory.created_at.desc())
				.limit(self.limit)
			).scalars().all()
			return [_record_from_row(row) for row in rows]
		finally:
			db.close()

	def clear(self) -> int:
		db = self._session_factory()
		try:
			return clear_history(db)
		finally:
			db.close()


def _record_from_row(row: AllocationHistory) -> HistoryRecord:
	try:
		students = json.loads(row.students_assigned or "[]")
	except ValueError:
		logger.warning("Discarding unreadable student summary for history entry %s", row.id)
		students = []
	return HistoryRecord(
		id=row.id,
		generated_at=row.generated_at,
		subject=row.subject,
		topic=row.topic or "",
		difficulty=row.difficulty,
		mode=row.mode,
		total_students=row.total_students,
		questions_per_student=row.questions_per_student,
		students_assigned=[StudentSummary.model_validate(s) for s in students],
	)


def get_history_sink() -> SqlHistorySink:
	return SqlHistorySink(SessionLocal, limit=settings.history_limit)
