"""Client for OpenAI-compatible chat completion APIs."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Iterable, Iterator, Optional

import requests

from zhv.config import Config

DEFAULT_TIMEOUT = 30.0
TEMPERATURE = 0.7
MAX_TOKENS = 1000


class APIError(Exception):
    """Raised when a chat request fails."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def _as_dict(data: Any) -> dict:
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object")
    return data


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _int(value: Any) -> int:
    return value if isinstance(value, int) and not isinstance(value, bool) else 0


@dataclass
class Message:
    """One chat message."""

    role: str
    content: str

    @classmethod
    def from_dict(cls, data: Any) -> "Message":
        data = data if isinstance(data, dict) else {}
        return cls(role=_str(data.get("role")), content=_str(data.get("content")))


@dataclass
class Usage:
    """Token counts reported by the API."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class Choice:
    """One completion choice."""

    index: int
    message: Message


@dataclass
class ChatResponse:
    """A complete, non-streamed chat response."""

    id: str = ""
    object: str = ""
    created: int = 0
    model: str = ""
    choices: list[Choice] = field(default_factory=list)
    usage: Usage = field(default_factory=Usage)

    @classmethod
    def from_dict(cls, data: Any) -> "ChatResponse":
        data = _as_dict(data)
        choices = [
            Choice(index=_int(item.get("index")), message=Message.from_dict(item.get("message")))
            for item in data.get("choices") or []
            if isinstance(item, dict)
        ]
        usage_data = data.get("usage") if isinstance(data.get("usage"), dict) else {}
        usage = Usage(
            prompt_tokens=_int(usage_data.get("prompt_tokens")),
            completion_tokens=_int(usage_data.get("completion_tokens")),
            total_tokens=_int(usage_data.get("total_tokens")),
        )
        return cls(
            id=_str(data.get("id")),
            object=_str(data.get("object")),
            created=_int(data.get("created")),
            model=_str(data.get("model")),
            choices=choices,
            usage=usage,
        )


@dataclass
class StreamDelta:
    """Incremental content in a streamed chunk."""

    content: str = ""


@dataclass
class StreamChoice:
    """One choice within a streamed chunk."""

    index: int = 0
    delta: StreamDelta = field(default_factory=StreamDelta)
    finish_reason: Optional[str] = None


@dataclass
class StreamResponse:
    """One chunk of a streamed chat response."""

    id: str = ""
    object: str = ""
    created: int = 0
    model: str = ""
    choices: list[StreamChoice] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "StreamResponse":
        data = _as_dict(data)
        choices = []
        for item in data.get("choices") or []:
            if not isinstance(item, dict):
                continue
            delta = item.get("delta") if isinstance(item.get("delta"), dict) else {}
            reason = item.get("finish_reason")
            choices.append(
                StreamChoice(
                    index=_int(item.get("index")),
                    delta=StreamDelta(content=_str(delta.get("content"))),
                    finish_reason=reason if isinstance(reason, str) else None,
                )
            )
        return cls(
            id=_str(data.get("id")),
            object=_str(data.get("object")),
            created=_int(data.get("created")),
            model=_str(data.get("model")),
            choices=choices,
        )


def parse_event_stream(lines: Iterable[str]) -> Iterator[StreamResponse]:
    """Yield chunks from server-sent event lines, stopping at ``[DONE]``.

    Lines that are not ``data:`` lines or hold unparsable JSON are skipped.
    """
    for raw in lines:
        line = raw.strip()
        if not line.startswith("data: "):
            continue
        data = line[len("data: "):]
        if data == "[DONE]":
            return
        try:
            yield StreamResponse.from_dict(json.loads(data))
        except ValueError:
            continue


class OpenAIClient:
    """Sends chat requests to an OpenAI-compatible endpoint."""

    def __init__(
        self,
        config: Config,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.config = config
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    @property
    def _url(self) -> str:
        return self.config.api_url + "/chat/completions"

    def _payload(self, messages: Iterable[Message], stream: bool) -> dict:
        payload: dict[str, Any] = {
            "model": self.config.model,
            "messages": [asdict(m) for m in messages],
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
        }
        if stream:
            payload["stream"] = True
        return payload

    def _headers(self, stream: bool) -> dict:
        headers = {
            "Content-Type": "application/json",
            "Authorization": "Bearer " + self.config.api_key,
        }
        if stream:
            headers["Accept"] = "text/event-stream"
            headers["Cache-Control"] = "no-cache"
        return headers

    def chat(self, messages: Iterable[Message]) -> ChatResponse:
        """Send a chat request and return the whole response."""
        body = json.dumps(self._payload(messages, stream=False), ensure_ascii=False)
        try:
            resp = self.session.post(
                self._url,
                data=body.encode("utf-8"),
                headers=self._headers(stream=False),
                timeout=self.timeout,
            )
            text = resp.content.decode("utf-8", errors="replace")
        except requests.RequestException as exc:
            raise APIError(f"发送请求失败: {exc}") from exc
        if resp.status_code != 200:
            raise APIError(
                f"API请求失败，状态码: {resp.status_code}, 响应: {text}",
                status_code=resp.status_code,
                body=text,
            )
        try:
            return ChatResponse.from_dict(json.loads(text))
        except ValueError as exc:
            raise APIError(f"解析响应失败: {exc}") from exc

    def chat_stream(self, messages: Iterable[Message]) -> Iterator[StreamResponse]:
        """Send a streaming chat request and yield its chunks as they arrive."""
        body = json.dumps(self._payload(messages, stream=True), ensure_ascii=False)
        try:
            resp = self.session.post(
                self._url,
                data=body.encode("utf-8"),
                headers=self._headers(stream=True),
                timeout=self.timeout,
                stream=True,
            )
        except requests.RequestException as exc:
            raise APIError(f"发送请求失败: {exc}") from exc
        with resp:
            if resp.status_code != 200:
                try:
                    text = resp.content.decode("utf-8", errors="replace")
                except requests.RequestException:
                    text = ""
                raise APIError(
                    f"API请求失败，状态码: {resp.status_code}, 响应: {text}",
                    status_code=resp.status_code,
                    body=text,
                )
            lines = (
                line.decode("utf-8", errors="replace")
                for line in resp.iter_lines()
            )
            try:
                yield from parse_event_stream(lines)
            except requests.RequestException as exc:
                raise APIError(f"读取响应流失败: {exc}") from exc