import json
import logging
from types import SimpleNamespace

import httpx
import pytest
from openai import APITimeoutError

from mindlog.suggestions.errors import ExtractionError
from mindlog.suggestions.providers.openai import OpenAIExtractionClient
from mindlog.suggestions.providers.parsing import parse_extraction_response


def test_parses_plain_json():
    raw = json.dumps({
        "goals": [{"name": "Run a 10k", "description": "Build up slowly", "category": "Fitness"}],
        "tasks": [{"title": "Book a dentist appointment", "description": "", "goal": None}],
        "habits": [{"title": "Evening walk", "description": "20 minutes", "frequency": "daily"}],
    })
    result = parse_extraction_response(raw)
    assert [g.name for g in result.goals] == ["Run a 10k"]
    assert result.tasks[0].goal is None
    assert result.habits[0].frequency == "daily"


def test_parses_fenced_json_and_missing_keys():
    raw = '```json\n{"goals": [{"title": "Learn Spanish"}]}\n```'
    result = parse_extraction_response(raw)
    assert result.goals[0].name == "Learn Spanish"
    assert result.tasks == [] and result.habits == []


def test_null_lists_are_empty():
    result = parse_extraction_response('{"goals": null, "tasks": [], "habits": null}')
    assert result.goals == [] and result.habits == []


def test_malformed_items_are_skipped_and_logged(caplog):
    raw = json.dumps({
        "goals": ["not an object", {"name": "   "}, {"name": "Save for a bike"}],
        "habits": [{"description": "no title"}],
    })
    with caplog.at_level(logging.WARNING):
        result = parse_extraction_response(raw)
    assert [g.name for g in result.goals] == ["Save for a bike"]
    assert result.habits == []
    assert sum("Skipping" in r.getMessage() for r in caplog.records) == 3


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "   ",
        "Sorry, I can't help with that.",
        "[1, 2, 3]",
        '{"goals": "Run a 10k"}',
    ],
)
def test_invalid_responses_raise(raw):
    with pytest.raises(ExtractionError):
        parse_extraction_response(raw)


def _fake_openai(create):
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def test_openai_client_sends_batch_and_parses_reply():
    captured = {}

    def create(**kwargs):
        captured.update(kwargs)
        return _completion('{"goals": [{"name": "Sleep by 11pm"}], "tasks": [], "habits": []}')

    client = OpenAIExtractionClient(model="test-model", client=_fake_openai(create))
    result = client.extract(
        [{"content": "x" * 5000, "date": "2024-01-02"}],
        [{"name": "Read more books", "progress": 20}],
        [{"title": "Buy running shoes", "completed": False}],
    )

    assert result.goals[0].name == "Sleep by 11pm"
    assert captured["model"] == "test-model"
    assert captured["temperature"] == 0.0
    assert captured["response_format"]["type"] == "json_schema"
    user_prompt = captured["messages"][1]["content"]
    assert "Read more books" in user_prompt
    assert "Buy running shoes" in user_prompt
    assert "x" * 4001 not in user_prompt


def test_openai_timeout_becomes_extraction_error():
    def create(**kwargs):
        raise APITimeoutError(request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"))

    client = OpenAIExtractionClient(model="test-model", client=_fake_openai(create))
    with pytest.raises(ExtractionError, match="timed out"):
        client.extract([{"content": "hello", "date": ""}], [], [])


def test_openai_client_requires_configuration(monkeypatch):
    import mindlog.suggestions.providers.openai as provider

    monkeypatch.setattr(provider, "OPENAI_API_KEY", None)
    monkeypatch.setattr(provider, "OPENAI_CHAT_MODEL", None)
    with pytest.raises(ExtractionError, match="OPENAI_API_KEY"):
        OpenAIExtractionClient(model="test-model")
    with pytest.raises(ExtractionError, match="OPENAI_CHAT_MODEL"):
        OpenAIExtractionClient(api_key="sk-test", model="")
