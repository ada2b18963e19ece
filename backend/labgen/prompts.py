from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional

from .schemas import POINT_BANDS


DIFFICULTY_DESCRIPTIONS: Dict[str, str] = {
	"easy": "basic implementation with clear step-by-step guidance",
	"medium": "intermediate tasks requiring problem-solving and application",
	"hard": "complex projects involving multiple concepts and advanced implementation",
}

MODE_INSTRUCTIONS: Dict[str, str] = {
	"exam": "practical lab tasks and hands-on exercises for formal assessment",
	"friendly": "guided lab exercises with step-by-step instructions and helpful tips",
}

OUTPUT_SCHEMA = """{
  "questions": [
    {
      "question": "Lab Task: [Specific practical task with clear deliverables]",
      "type": "practical-task",
      "options": null,
      "correctAnswer": null,
      "points": 25,
      "hints": ["Implementation hint 1", "Approach hint 2", "Testing suggestion 3"],
      "explanation": "Brief methodology guidance"
    }
  ]
}"""


@dataclass(frozen=True)
class PromptPair:
	system: str
	user: str


def _points_guidance() -> str:
	bands = ", ".join(f"{level}: {lo}-{hi}" for level, (lo, hi) in POINT_BANDS.items())
	return f"Point value ({bands} points for substantial lab work)"


def build_prompt(
	subject: str,
	topic: str,
	difficulty: str,
	mode: str,
	count: int,
	context: Optional[str] = None,
) -> PromptPair:
	"""Build the system/user instruction pair for one pool of lab tasks.

	Pure: difficulty and mode are assumed to be validated by the caller.
	"""
	focus = f'about "{topic}"' if topic else f"covering core {subject} concepts"
	lines = [
		f"You are an expert lab instructor creating practical, hands-on {MODE_INSTRUCTIONS[mode]} for {subject}.",
		"",
		f"Generate {count} unique LAB TASKS/EXERCISES {focus} at {difficulty} level ({DIFFICULTY_DESCRIPTIONS[difficulty]}).",
		"",
	]
	if context:
		lines += [f"Additional context: {context}", ""]
	lines += [
		"IMPORTANT: Create PRACTICAL LAB TASKS, not theoretical questions. Each task should:",
		"- Be a specific, actionable exercise or project",
		"- Include clear deliverables and objectives",
		"- Be hands-on and practical",
		"- Specify what students need to create, implement, or demonstrate",
		"",
		"For each lab task, provide:",
		"1. A clear task description with specific objectives and deliverables",
		'2. Task type: "practical-task", "coding-exercise", "implementation", "design-task", or "analysis-task"',
		"3. For coding tasks: specify expected output or functionality",
		f"4. {_points_guidance()}",
	]
	if mode == "friendly":
		lines += [
			"5. 3-4 helpful implementation hints",
			"6. Brief guidance on approach or methodology",
		]
	lines += [
		"",
		"IMPORTANT: Return ONLY valid JSON in this exact format, no additional text:",
		OUTPUT_SCHEMA,
	]
	about = f"about {topic} in {subject}" if topic else f"in {subject}"
	user = (
		f"Generate {count} practical lab tasks/exercises {about} at {difficulty} difficulty level. "
		"Each task should be hands-on and specify clear deliverables."
	)
	return PromptPair(system="\n".join(lines), user=user)
