from __future__ import annotations
from typing import List

from .ids import IdSource, uuid_ids
from .schemas import DEFAULT_KIND, Task, default_points


FRIENDLY_HINTS = (
	"Start with basic setup and requirements",
	"Break the task into smaller components",
	"Test each component thoroughly",
	"Document your implementation approach",
)


def generate_fallback_tasks(
	subject: str,
	topic: str,
	difficulty: str,
	mode: str,
	count: int,
	*,
	id_source: IdSource = uuid_ids,
) -> List[Task]:
	"""Template tasks used when the model is unavailable or unusable.

	Content is identical for every task in the batch; only ids differ.
	"""
	focus = topic or subject
	friendly = mode == "friendly"
	points = default_points(difficulty)
	prompt_text = (
		f"Lab Task: Create a practical {difficulty} level implementation demonstrating {focus} concepts in {subject}. "
		"Provide complete working solution with documentation."
	)
	explanation = (
		f"This lab task focuses on hands-on implementation of {focus} concepts in {subject}. "
		"Create a working solution and document your approach."
	)
	return [
		Task(
			id=id_source(),
			prompt_text=prompt_text,
			kind=DEFAULT_KIND,
			points=points,
			explanation=explanation if friendly else None,
			hints=FRIENDLY_HINTS if friendly else None,
		)
		for _ in range(max(count, 0))
	]
