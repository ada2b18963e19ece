"""
Allocation Request Handler
==========================

Validates a generation request, builds one task pool (model first, template
fallback second), slices it across students and reports summary statistics.

Pipeline:
	build_prompt -> GenerationClient.generate -> parse_response
		-> (ParseErr / GenerationUnavailable) generate_fallback_tasks
		-> allocate -> statistics -> history archive (fire-and-forget)
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

from .allocation import allocate, assignees_for
from .errors import FallbackFailure, GenerationUnavailable, ValidationError
from .fallback import generate_fallback_tasks
from .history import HistorySink
from .ids import IdSource, uuid_ids
from .parsing import ParseErr, parse_response
from .prompts import PromptPair, build_prompt
from .schemas import DIFFICULTIES, MODES, Allocation, GenerationRequest, HistoryRecord, StudentSummary, Task

logger = logging.getLogger(__name__)

MAX_STUDENTS = 100
MAX_QUESTIONS_PER_STUDENT = 10


class TextGenerator(Protocol):
	async def generate(self, prompt: PromptPair) -> str: ...


@dataclass(frozen=True)
class ValidatedRequest:
	mode: str
	difficulty: str
	subject: str
	topic: str
	context: Optional[str]
	student_count: int
	question_count: int


@dataclass
class AllocationResult:
	allocations: List[Allocation]
	metadata: Dict[str, Any]

	def to_response(self) -> Dict[str, Any]:
		return {
			"success": True,
			"allocations": [a.to_dict() for a in self.allocations],
			"metadata": self.metadata,
		}


def validate_request(req: GenerationRequest) -> ValidatedRequest:
	subject = (req.subject or "").strip()
	if not subject:
		raise ValidationError("subject is required")
	difficulty = (req.difficulty or "").strip().lower()
	if difficulty not in DIFFICULTIES:
		raise ValidationError(f"difficulty must be one of {', '.join(DIFFICULTIES)}")
	mode = (req.mode or "").strip().lower()
	if mode not in MODES:
		raise ValidationError(f"mode must be one of {', '.join(MODES)}")
	student_count = req.student_count
	if student_count is None or student_count <= 0:
		raise ValidationError("studentCount must be greater than 0")
	if student_count > MAX_STUDENTS:
		raise ValidationError(f"Maximum {MAX_STUDENTS} students allowed")
	question_count = 1 if req.question_count is None else req.question_count
	if question_count <= 0:
		raise ValidationError("questionCount must be greater than 0")
	if question_count > MAX_QUESTIONS_PER_STUDENT:
		raise ValidationError(f"Maximum {MAX_QUESTIONS_PER_STUDENT} questions per student allowed")
	return ValidatedRequest(
		mode=mode,
		difficulty=difficulty,
		subject=subject,
		topic=(req.topic or "").strip(),
		context=(req.context or "").strip() or None,
		student_count=student_count,
		question_count=question_count,
	)


def required_pool_size(student_count: int, question_count: int) -> int:
	return max(student_count * question_count, student_count * 2)


def average_points(allocations: List[Allocation]) -> float:
	if not allocations:
		return 0.0
	return round(sum(a.total_points for a in allocations) / len(allocations), 2)


class AllocationService:
	def __init__(
		self,
		client: TextGenerator,
		history: Optional[HistorySink] = None,
		*,
		id_source: IdSource = uuid_ids,
		retries: int = 0,
		fallback: Callable[..., List[Task]] = generate_fallback_tasks,
		clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
	) -> None:
		self.client = client
		self.history = history
		self.id_source = id_source
		self.retries = max(retries, 0)
		self.fallback = fallback
		self.clock = clock

	async def generate_allocations(self, req: GenerationRequest) -> AllocationResult:
		v = validate_request(req)
		pool_size = required_pool_size(v.student_count, v.question_count)
		pool, ai_generated = await self.build_pool(v, pool_size)

		students = (req.students or [])[: v.student_count]
		generated_at = self.clock()
		allocations = allocate(
			pool,
			assignees_for(v.student_count, students),
			v.question_count,
			difficulty=v.difficulty,
			generated_at=generated_at,
		)
		summaries = [StudentSummary.of(s) for s in students] if req.students is not None else None
		metadata = {
			"generatedAt": generated_at.isoformat(),
			"totalStudents": v.student_count,
			"questionsPerStudent": v.question_count,
			"totalQuestions": sum(len(a.tasks) for a in allocations),
			"averagePoints": average_points(allocations),
			"difficulty": v.difficulty,
			"subject": v.subject,
			"topic": v.topic,
			"mode": v.mode,
			"aiGenerated": ai_generated,
			"studentsAssigned": [s.model_dump(by_alias=True) for s in summaries] if summaries is not None else None,
		}
		self._archive(
			HistoryRecord(
				id=uuid.uuid4().hex,
				generated_at=generated_at,
				subject=v.subject,
				topic=v.topic,
				difficulty=v.difficulty,
				mode=v.mode,
				total_students=v.student_count,
				questions_per_student=v.question_count,
				students_assigned=summaries or [],
			)
		)
		return AllocationResult(allocations=allocations, metadata=metadata)

	async def build_pool(self, v: ValidatedRequest, pool_size: int) -> Tuple[List[Task], bool]:
		"""Return at least ``pool_size`` tasks and whether any came from the model."""
		tasks = await self._generate_from_model(v, pool_size)
		ai_generated = bool(tasks)
		if len(tasks) < pool_size:
			missing = pool_size - len(tasks)
			if tasks:
				logger.info("Model returned %d of %d tasks; topping up with %d fallback tasks", len(tasks), pool_size, missing)
			else:
				logger.info("Using fallback generator for %d tasks (%s, %s)", missing, v.subject, v.difficulty)
			tasks = tasks + self._fallback_tasks(v, missing)
		return tasks, ai_generated

	async def _generate_from_model(self, v: ValidatedRequest, pool_size: int) -> List[Task]:
		prompt = build_prompt(v.subject, v.topic, v.difficulty, v.mode, pool_size, v.context)
		for attempt in range(1, self.retries + 2):
			try:
				raw = await self.client.generate(prompt)
			except GenerationUnavailable as exc:
				logger.warning("Generation unavailable (attempt %d/%d): %s", attempt, self.retries + 1, exc)
				continue
			result = parse_response(raw, topic=v.topic or v.subject, difficulty=v.difficulty, id_source=self.id_source)
			if isinstance(result, ParseErr):
				logger.warning("Discarding model output (%s): %s. Raw response: %.500s", result.kind, result.detail, raw)
				continue
			return result.tasks
		return []

	def _fallback_tasks(self, v: ValidatedRequest, count: int) -> List[Task]:
		try:
			return self.fallback(v.subject, v.topic, v.difficulty, v.mode, count, id_source=self.id_source)
		except Exception as exc:
			logger.exception("Fallback generator failed")
			raise FallbackFailure(str(exc)) from exc

	def _archive(self, record: HistoryRecord) -> None:
		if self.history is None:
			return
		try:
			self.history.append(record)
		except Exception:
			logger.warning("Failed to save allocation history", exc_info=True)
