"""HTTP client for the Ollama chat API."""

from __future__ import annotations

import json
import re
import time
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Iterator, Mapping

import requests

_FRACTION = re.compile(r"\.(\d+)")


class OllamaError(Exception):
    """Raised when talking to the Ollama server fails."""


@dataclass
class Message:
    """A chat message."""

    role: str = ""
    content: str = ""


@dataclass
class Options:
    """Model options sent with a chat request."""

    temperature: float = 0.0


@dataclass
class ChatRequest:
    """A request to the ``/api/chat`` endpoint."""

    model: str
    messages: list[Message] = field(default_factory=list)
    stream: bool = False
    options: Options = field(default_factory=Options)

    def to_dict(self) -> dict[str, Any]:
        options: dict[str, Any] = {}
        if self.options.temperature:
            options["temperature"] = self.options.temperature
        return {
            "model": self.model,
            "messages": [{"role": m.role, "content": m.content} for m in self.messages],
            "stream": self.stream,
            "options": options,
        }


@dataclass
class ChatResponse:
    """One chunk of a streamed chat response."""

    model: str = ""
    created_at: datetime | None = None
    message: Message = field(default_factory=Message)
    done: bool = False
    total_duration: int = 0
    load_duration: int = 0
    prompt_eval_count: int = 0
    prompt_eval_duration: int = 0
    eval_count: int = 0
    eval_duration: int = 0


def _parse_timestamp(text: str) -> datetime:
    value = text.strip()
    if value[-1:] in ("Z", "z"):
        value = value[:-1] + "+00:00"
    value = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value, count=1)
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_chat_response(data: Mapping[str, Any] | str | bytes) -> ChatResponse:
    """Build a ChatResponse from a decoded JSON object or a JSON line."""
    if isinstance(data, (str, bytes, bytearray)):
        try:
            data = json.loads(data)
        except ValueError as exc:
            raise OllamaError(f"failed to unmarshal response: {exc}") from exc
    if not isinstance(data, Mapping):
        raise OllamaError("failed to unmarshal response: expected a JSON object")

    try:
        raw_message = data.get("message") or {}
        created = data.get("created_at")
        return ChatResponse(
            model=str(data.get("model", "")),
            created_at=_parse_timestamp(created) if created else None,
            message=Message(
                role=str(raw_message.get("role", "")),
                content=str(raw_message.get("content", "")),
            ),
            done=bool(data.get("done", False)),
            total_duration=int(data.get("total_duration", 0)),
            load_duration=int(data.get("load_duration", 0)),
            prompt_eval_count=int(data.get("prompt_eval_count", 0)),
            prompt_eval_duration=int(data.get("prompt_eval_duration", 0)),
            eval_count=int(data.get("eval_count", 0)),
            eval_duration=int(data.get("eval_duration", 0)),
        )
    except (ValueError, TypeError, AttributeError) as exc:
        raise OllamaError(f"failed to unmarshal response: {exc}") from exc


class OllamaClient:
    """Client for a local Ollama server."""

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url.removesuffix("/")
        self.session = requests.Session()
        self.http_timeout = 30.0
        self.stream_timeout = 300.0
        self.max_retries = 3

    def chat(self, request: ChatRequest) -> Iterator[ChatResponse]:
        """Stream the model's reply to ``request`` chunk by chunk."""
        payload = replace(request, stream=True).to_dict()
        response = self._post_with_retry(f"{self.base_url}/api/chat", payload)
        with response:
            if response.status_code != 200:
                raise OllamaError(
                    f"ollama request failed with status {response.status_code}: {response.text}"
                )
            try:
                for line in response.iter_lines():
                    if not line:
                        continue
                    chunk = parse_chat_response(line)
                    yield chunk
                    if chunk.done:
                        break
            except requests.RequestException as exc:
                raise OllamaError(f"failed to read response: {exc}") from exc

    def _post_with_retry(self, url: str, payload: dict[str, Any]) -> requests.Response:
        last_error = OllamaError("failed to execute request")
        for attempt in range(self.max_retries):
            try:
                response = self.session.post(
                    url,
                    json=payload,
                    headers={"Accept": "application/json"},
                    stream=True,
                    timeout=(self.http_timeout, self.stream_timeout),
                )
            except requests.RequestException as exc:
                last_error = OllamaError(f"failed to execute request: {exc}")
            else:
                if response.status_code < 500:
                    return response
                last_error = OllamaError(
                    f"ollama request failed with status {response.status_code}: {response.text}"
                )
                response.close()
            if attempt < self.max_retries - 1:
                time.sleep(2**attempt)
        raise last_error

    def ping(self) -> None:
        """Check that the server answers; raise OllamaError if not."""
        try:
            response = self.session.get(f"{self.base_url}/api/tags", timeout=self.http_timeout)
        except requests.RequestException as exc:
            raise OllamaError(f"failed to ping ollama: {exc}") from exc
        with response:
            if response.status_code != 200:
                raise OllamaError(f"ollama ping failed with status {response.status_code}")