from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


DIFFICULTIES: Tuple[str, ...] = ("easy", "medium", "hard")
MODES: Tuple[str, ...] = ("exam", "friendly")

TASK_KINDS: Tuple[str, ...] = (
	"practical-task",
	"coding-exercise",
	"implementation",
	"design-task",
	"analysis-task",
	"multiple-choice",
	"short-answer",
	"essay",
	"calculation",
)
DEFAULT_KIND = "practical-task"

# Guidance given to the model, and the value used whenever points must be filled in
POINT_BANDS: Dict[str, Tuple[int, int]] = {"easy": (10, 15), "medium": (20, 30), "hard": (35, 50)}
DEFAULT_POINTS: Dict[str, int] = {"easy": 15, "medium": 25, "hard": 40}


def default_points(difficulty: str) -> int:
	return DEFAULT_POINTS.get(difficulty, DEFAULT_POINTS["medium"])


class Task(BaseModel):
	"""One generated lab exercise. Immutable once created."""

	model_config = ConfigDict(frozen=True, populate_by_name=True)

	id: str
	prompt_text: str = Field(alias="question", min_length=1)
	kind: str = Field(default=DEFAULT_KIND, alias="type")
	options: Optional[Tuple[str, ...]] = None
	correct_answer: Optional[str] = Field(default=None, alias="correctAnswer")
	points: int = Field(gt=0)
	explanation: Optional[str] = None
	hints: Optional[Tuple[str, ...]] = None

	def to_dict(self) -> Dict[str, Any]:
		return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Student(BaseModel):
	"""Roster entry as supplied by the caller; referenced, never owned."""

	model_config = ConfigDict(populate_by_name=True)

	id: str
	display_name: str = Field(alias="name")
	email: Optional[str] = None
	roster_id: Optional[str] = Field(default=None, alias="studentId")
	class_label: Optional[str] = Field(default=None, alias="class")
	activity_status: Literal["active", "inactive"] = Field(default="active", alias="status")


class StudentSummary(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	id: Optional[str] = None
	name: str
	class_label: Optional[str] = Field(default=None, alias="class")

	@classmethod
	def of(cls, student: Student) -> "StudentSummary":
		return cls(id=student.roster_id, name=student.display_name, class_label=student.class_label)


class Allocation(BaseModel):
	model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

	student_id: str
	student_name: str
	tasks: List[Task] = Field(alias="questions")
	difficulty: str
	generated_at: datetime

	@property
	def total_points(self) -> int:
		return sum(t.points for t in self.tasks)

	def to_dict(self) -> Dict[str, Any]:
		return {
			"studentId": self.student_id,
			"studentName": self.student_name,
			"questions": [t.to_dict() for t in self.tasks],
			"difficulty": self.difficulty,
			"generatedAt": self.generated_at.isoformat(),
		}


class GenerationRequest(BaseModel):
	"""Inbound request body. Kept loose; bounds are checked by the handler so
	that violations surface as 400 with a readable message."""

	model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

	mode: Optional[str] = None
	difficulty: Optional[str] = None
	subject: Optional[str] = None
	topic: Optional[str] = None
	context: Optional[str] = None
	student_count: Optional[int] = None
	question_count: Optional[int] = 1
	students: Optional[List[Student]] = None


class HistoryRecord(BaseModel):
	model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

	id: str
	generated_at: datetime
	subject: str
	topic: str = ""
	difficulty: str
	mode: str
	total_students: int
	questions_per_student: int
	students_assigned: List[StudentSummary] = Field(default_factory=list)

	def to_dict(self) -> Dict[str, Any]:
		return self.model_dump(by_alias=True, mode="json")
