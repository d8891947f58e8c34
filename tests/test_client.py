import json

import pytest
import responses

from zhv.client import (
    APIError,
    ChatResponse,
    Message,
    OpenAIClient,
    StreamResponse,
    parse_event_stream,
)
from zhv.config import Config

BASE = "http://localhost:8000/v1"
URL = BASE + "/chat/completions"


@pytest.fixture
def client():
    return OpenAIClient(Config(api_url=BASE, model="test-model", api_key="placeholder"))


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def _chunk(content):
    return "data: " + json.dumps(
        {"id": "c1", "choices": [{"index": 0, "delta": {"content": content}, "finish_reason": None}]}
    )


def test_chat_response_from_dict():
    data = {
        "id": "abc",
        "object": "chat.completion",
        "created": 42,
        "model": "test-model",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": "userName"}}],
        "usage": {"prompt_tokens": 3, "completion_tokens": 4, "total_tokens": 7},
    }
    resp = ChatResponse.from_dict(data)
    assert resp.id == "abc"
    assert resp.created == 42
    assert resp.choices[0].message == Message(role="assistant", content="userName")
    assert resp.usage.total_tokens == 7


def test_chat_response_from_dict_missing_fields():
    resp = ChatResponse.from_dict({})
    assert resp.choices == []
    assert resp.usage.prompt_tokens == 0


def test_stream_response_rejects_non_object():
    with pytest.raises(ValueError):
        StreamResponse.from_dict([1, 2])


def test_stream_response_finish_reason():
    resp = StreamResponse.from_dict(
        {"choices": [{"index": 1, "delta": {}, "finish_reason": "stop"}]}
    )
    assert resp.choices[0].finish_reason == "stop"
    assert resp.choices[0].delta.content == ""
    assert resp.choices[0].index == 1


def test_parse_event_stream_filters_and_stops():
    lines = [
        "",
        ": comment",
        _chunk("user"),
        "data: {broken",
        "  " + _chunk("Name") + "  ",
        "data: [DONE]",
        _chunk("ignored"),
    ]
    contents = [r.choices[0].delta.content for r in parse_event_stream(lines)]
    assert contents == ["user", "Name"]


def test_parse_event_stream_skips_non_object_json():
    assert list(parse_event_stream(["data: 5", "data: null"])) == []


def test_chat_sends_request_and_parses(client, mocked):
    mocked.add(
        responses.POST,
        URL,
        json={"id": "x", "choices": [{"index": 0, "message": {"role": "assistant", "content": "dataCount"}}]},
        status=200,
    )
    result = client.chat([Message("system", "sys"), Message("user", "数据数量")])
    assert result.choices[0].message.content == "dataCount"

    request = mocked.calls[0].request
    assert request.headers["Authorization"] == "Bearer placeholder"
    assert request.headers["Content-Type"] == "application/json"
    payload = json.loads(request.body)
    assert payload["model"] == "test-model"
    assert payload["temperature"] == 0.7
    assert payload["max_tokens"] == 1000
    assert "stream" not in payload
    assert payload["messages"] == [
        {"role": "system", "content": "sys"},
        {"role": "user", "content": "数据数量"},
    ]


def test_chat_error_status(client, mocked):
    mocked.add(responses.POST, URL, body="bad things", status=500)
    with pytest.raises(APIError) as info:
        client.chat([Message("user", "hi")])
    assert info.value.status_code == 500
    assert info.value.body == "bad things"


def test_chat_invalid_json(client, mocked):
    mocked.add(responses.POST, URL, body="not json", status=200)
    with pytest.raises(APIError) as info:
        client.chat([Message("user", "hi")])
    assert info.value.status_code is None


def test_chat_stream_yields_chunks(client, mocked):
    body = "\n\n".join([_chunk("is"), _chunk("Active"), "data: [DONE]"]) + "\n\n"
    mocked.add(responses.POST, URL, body=body, status=200, content_type="text/event-stream")
    chunks = list(client.chat_stream([Message("user", "是否激活")]))
    assert "".join(c.choices[0].delta.content for c in chunks) == "isActive"

    request = mocked.calls[0].request
    assert request.headers["Accept"] == "text/event-stream"
    assert request.headers["Cache-Control"] == "no-cache"
    assert json.loads(request.body)["stream"] is True


def test_chat_stream_error_status(client, mocked):
    mocked.add(responses.POST, URL, body="unauthorized", status=401)
    with pytest.raises(APIError) as info:
        list(client.chat_stream([Message("user", "hi")]))
    assert info.value.status_code == 401
    assert info.value.body == "unauthorized"


def test_chat_connection_failure(client, mocked):
    with pytest.raises(APIError) as info:
        client.chat([Message("user", "hi")])
    assert info.value.status_code is None