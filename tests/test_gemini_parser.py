from types import SimpleNamespace
from unittest.mock import patch

from ai import gemini_parser
from ai.gemini_parser import _strip_fences, parse_employee


def _respond(text):
    return patch.object(gemini_parser._model, "generate_content", return_value=SimpleNamespace(text=text))


def test_strip_fences():
    assert _strip_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert _strip_fences('  {"a": 1} ') == '{"a": 1}'


def test_parse_employee_returns_fields():
    raw = (
        '```json\n{"first_name":"John","last_name":"Doe","email":"john.doe@example.com",'
        '"phone_number":"1234567890","hire_date":"2025-04-24","job_id":"IT_PROG",'
        '"salary":5000,"commission_pct":null,"manager_id":null,"department_id":10}\n```'
    )
    with _respond(raw) as generate:
        result = parse_employee("Hire John Doe as programmer, 5000, dept 10")

    assert result["job_id"] == "IT_PROG"
    assert result["salary"] == 5000
    assert result["commission_pct"] is None
    contents = generate.call_args.args[0]
    assert contents[1]["parts"][0]["text"] == "Hire John Doe as programmer, 5000, dept 10"


def test_parse_employee_passes_the_question_through():
    with _respond('{"error":"unclear","question":"What is the salary?"}'):
        result = parse_employee("Hire John")
    assert result == {"error": "unclear", "question": "What is the salary?"}


def test_parse_employee_non_json():
    with _respond("Sure! John is a programmer."):
        result = parse_employee("Hire John Doe")
    assert result["error"] == "parse_failed"
    assert "question" in result


def test_parse_employee_api_failure():
    with patch.object(gemini_parser._model, "generate_content", side_effect=RuntimeError("quota")):
        result = parse_employee("Hire John Doe")
    assert result["error"] == "api_error"
