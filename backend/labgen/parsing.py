"""
Response parsing for model output.

The parser has two layers. The structural check is strict: text that is not
JSON, or a payload without a ``questions`` list, yields ``ParseErr``. The
per-item mapping is lenient: missing or unusable fields are patched with
defaults so that a single sloppy item never discards the whole pool.
"""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass, field
from typing import Any, List, Literal, Optional, Tuple, Union

from .errors import InvalidSchema, LabGenError, MalformedResponse
from .ids import IdSource, uuid_ids
from .schemas import DEFAULT_KIND, TASK_KINDS, Task, default_points


_FENCE_RE = re.compile(r"```(?:json|JSON)?[ \t]*\n?")


@dataclass(frozen=True)
class ParseOk:
	tasks: List[Task] = field(default_factory=list)

	ok: Literal[True] = True


@dataclass(frozen=True)
class ParseErr:
	kind: Literal["malformed", "invalid_schema"]
	detail: str

	ok: Literal[False] = False

	def to_exception(self) -> LabGenError:
		if self.kind == "malformed":
			return MalformedResponse(self.detail)
		return InvalidSchema(self.detail)


ParseResult = Union[ParseOk, ParseErr]


def strip_fences(text: str) -> str:
	return _FENCE_RE.sub("", text).strip()


def _load_json(text: str) -> Any:
	cleaned = strip_fences(text)
	try:
		return json.loads(cleaned)
	except (ValueError, RecursionError):
		pass
	# Prose before or after the object
	first = cleaned.find("{")
	last = cleaned.rfind("}")
	if first != -1 and last > first:
		return json.loads(cleaned[first : last + 1])
	raise ValueError("no JSON object found")


def _string_tuple(value: Any) -> Optional[Tuple[str, ...]]:
	if not isinstance(value, list):
		return None
	items = tuple(str(v).strip() for v in value if v is not None and str(v).strip())
	return items or None


def _points(value: Any, difficulty: str) -> int:
	if isinstance(value, bool):
		return default_points(difficulty)
	if isinstance(value, float) and not math.isfinite(value):
		return default_points(difficulty)
	if isinstance(value, (int, float)) and value > 0 and int(value) == value:
		return int(value)
	# isdecimal, not isdigit: superscripts are digits that int() rejects
	if isinstance(value, str) and value.strip().isdecimal() and int(value) > 0:
		return int(value)
	return default_points(difficulty)


def _optional_text(value: Any) -> Optional[str]:
	if value is None:
		return None
	text = str(value).strip()
	return text or None


def task_from_item(item: Any, index: int, *, topic: str, difficulty: str, id_source: IdSource) -> Task:
	if isinstance(item, str):
		item = {"question": item}
	elif not isinstance(item, dict):
		item = {}
	question = _optional_text(item.get("question")) or f"Lab Task {index + 1}: Implement a practical exercise for {topic}"
	kind = item.get("type")
	if kind not in TASK_KINDS:
		kind = DEFAULT_KIND
	return Task(
		id=id_source(),
		prompt_text=question,
		kind=kind,
		options=_string_tuple(item.get("options")),
		correct_answer=_optional_text(item.get("correctAnswer")),
		points=_points(item.get("points"), difficulty),
		explanation=_optional_text(item.get("explanation")),
		hints=_string_tuple(item.get("hints")),
	)


def parse_response(
	raw: str,
	*,
	topic: str,
	difficulty: str,
	id_source: IdSource = uuid_ids,
) -> ParseResult:
	"""Turn raw model text into tasks.

	Args:
		raw: Text exactly as returned by the generation client.
		topic: Used in placeholder task text; pass the subject when the topic is empty.
		difficulty: Selects the default point value.
		id_source: Supplies a fresh id per task.

	Returns:
		``ParseOk`` with one task per item, or ``ParseErr`` describing why the
		payload was rejected.
	"""
	try:
		data = _load_json(raw)
	except (ValueError, RecursionError) as err:
		return ParseErr("malformed", f"response is not valid JSON: {err}")
	if not isinstance(data, dict) or "questions" not in data:
		return ParseErr("invalid_schema", "response has no 'questions' field")
	items = data["questions"]
	if not isinstance(items, list):
		return ParseErr("invalid_schema", "'questions' is not a list")
	tasks: List[Task] = []
	for i, item in enumerate(items):
		try:
			task = task_from_item(item, i, topic=topic, difficulty=difficulty, id_source=id_source)
		except RecursionError:
			# Nested too deep to stringify; keep the slot as a placeholder task
			task = task_from_item({}, i, topic=topic, difficulty=difficulty, id_source=id_source)
		tasks.append(task)
	return ParseOk(tasks)
