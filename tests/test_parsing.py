# tests/test_parsing.py

import json

import pytest

from backend.labgen.errors import InvalidSchema, MalformedResponse
from backend.labgen.ids import CounterIds
from backend.labgen.parsing import ParseErr, ParseOk, parse_response, strip_fences


def _parse(raw, difficulty="medium"):
    return parse_response(raw, topic="sorting", difficulty=difficulty, id_source=CounterIds())


def test_parses_fenced_json():
    raw = "```json\n" + json.dumps({
        "questions": [
            {"question": "Implement merge sort", "type": "coding-exercise", "points": 22,
             "hints": ["split", "merge"], "explanation": "Divide and conquer"},
        ]
    }) + "\n```"

    result = _parse(raw)

    assert isinstance(result, ParseOk)
    task = result.tasks[0]
    assert task.id == "t1"
    assert task.prompt_text == "Implement merge sort"
    assert task.kind == "coding-exercise"
    assert task.points == 22
    assert task.hints == ("split", "merge")
    assert task.explanation == "Divide and conquer"
    assert task.options is None


def test_missing_fields_are_patched():
    result = _parse(json.dumps({"questions": [{}, {"type": "poem", "points": -3}]}), difficulty="hard")

    assert isinstance(result, ParseOk)
    first, second = result.tasks
    assert first.prompt_text == "Lab Task 1: Implement a practical exercise for sorting"
    assert first.kind == "practical-task"
    assert first.points == 40
    assert second.prompt_text.startswith("Lab Task 2:")
    assert second.kind == "practical-task"
    assert second.points == 40


def test_options_and_answer_pass_through():
    raw = json.dumps({"questions": [{
        "question": "Which sort is stable?", "type": "multiple-choice",
        "options": ["quick", "merge"], "correctAnswer": "merge", "points": 10,
    }]})

    task = _parse(raw).tasks[0]

    assert task.options == ("quick", "merge")
    assert task.correct_answer == "merge"
    assert task.to_dict()["correctAnswer"] == "merge"
    assert task.to_dict()["type"] == "multiple-choice"


def test_missing_questions_is_invalid_schema():
    result = _parse('{"foo": []}')

    assert isinstance(result, ParseErr)
    assert result.kind == "invalid_schema"
    assert isinstance(result.to_exception(), InvalidSchema)


def test_questions_not_a_list_is_invalid_schema():
    result = _parse('{"questions": {"question": "x"}}')

    assert isinstance(result, ParseErr)
    assert result.kind == "invalid_schema"


def test_non_json_is_malformed():
    result = _parse("Sure! Here are some lab tasks for you.")

    assert isinstance(result, ParseErr)
    assert result.kind == "malformed"
    assert isinstance(result.to_exception(), MalformedResponse)


def test_json_surrounded_by_prose_is_recovered():
    result = _parse('Here you go: {"questions": [{"question": "Build a heap"}]} Enjoy!')

    assert isinstance(result, ParseOk)
    assert result.tasks[0].prompt_text == "Build a heap"


def test_strip_fences():
    assert strip_fences("```json\n{}\n```") == "{}"
    assert strip_fences("```\n[1]\n```") == "[1]"


@pytest.mark.parametrize("points", ["1e999", '"²"', '"-7"', "0"])
def test_unusable_points_fall_back_to_band_default(points):
    raw = '{"questions": [{"question": "Wire a circuit", "points": %s}]}' % points

    result = _parse(raw, difficulty="easy")

    assert isinstance(result, ParseOk)
    assert result.tasks[0].points == 15


def test_decimal_string_points_are_accepted():
    result = _parse('{"questions": [{"question": "Wire a circuit", "points": " 12 "}]}')

    assert result.tasks[0].points == 12


def test_deeply_nested_payload_is_malformed():
    raw = '{"questions": ' + "[" * 100000 + "]" * 100000 + "}"

    result = _parse(raw)

    assert isinstance(result, ParseErr)
    assert result.kind == "malformed"
