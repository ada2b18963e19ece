"""
Allocation Engine
=================

Distributes one pool of tasks across N students, K tasks each.

Student ``s`` receives pool entries ``(s + i*N) mod P`` for ``i`` in ``0..K-1``.
The stride interleaves students across the pool instead of handing out
contiguous blocks. Together with the handler's pool size of
``max(N*K, 2*N)`` it fixes which student gets which task; both are policy
constants.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Union

from .schemas import Allocation, Student, Task


@dataclass(frozen=True)
class Assignee:
	student_id: str
	student_name: str


def assignees_for(count: int, students: Optional[Sequence[Student]] = None) -> List[Assignee]:
	"""Resolve ``count`` assignees, using roster data where the caller supplied it."""
	students = students or []
	result: List[Assignee] = []
	for index in range(count):
		student = students[index] if index < len(students) else None
		student_id = (student.roster_id if student else None) or f"student_{index + 1}"
		student_name = (student.display_name if student else None) or f"Student {index + 1}"
		result.append(Assignee(student_id, student_name))
	return result


def pool_index(student_index: int, slot: int, student_count: int, pool_size: int) -> int:
	return (student_index + slot * student_count) % pool_size


def allocate(
	pool: Sequence[Task],
	students: Union[int, Sequence[Assignee]],
	per_student: int,
	*,
	difficulty: str,
	generated_at: Optional[datetime] = None,
) -> List[Allocation]:
	if not pool:
		raise ValueError("task pool is empty")
	assignees = assignees_for(students) if isinstance(students, int) else list(students)
	n = len(assignees)
	p = len(pool)
	generated_at = generated_at or datetime.now(timezone.utc)

	allocations: List[Allocation] = []
	for s, assignee in enumerate(assignees):
		drawn: Counter = Counter()
		tasks: List[Task] = []
		for i in range(per_student):
			base = pool[pool_index(s, i, n, p)]
			drawn[base.id] += 1
			new_id = f"{base.id}_{assignee.student_id}"
			# Only reachable when the pool is smaller than N*K
			if drawn[base.id] > 1:
				new_id = f"{new_id}_{drawn[base.id]}"
			tasks.append(base.model_copy(update={"id": new_id}))
		allocations.append(
			Allocation(
				student_id=assignee.student_id,
				student_name=assignee.student_name,
				tasks=tasks,
				difficulty=difficulty,
				generated_at=generated_at,
			)
		)
	return allocations
