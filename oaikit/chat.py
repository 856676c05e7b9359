"""Request construction for the chat completion endpoint."""

from __future__ import annotations

import enum
import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from oaikit.conversation import Conversation

ChatStreamCallback = Callable[[str, Conversation], bool]
StreamCallback = Callable[[str], bool]


class Method(enum.Enum):
    """HTTP methods used by the API endpoints."""

    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"


@dataclass
class ApiRequest:
    """Everything needed to perform one API call, apart from authorisation.

    ``body`` holds a JSON document for JSON requests. ``form`` holds
    ``(name, value)`` parts for multipart requests, where a value that is a
    ``pathlib.Path`` names a file to upload. ``params`` are query
    parameters. ``stream`` receives each chunk of a streamed response and
    returns False to stop the transfer.
    """

    method: Method
    path: str
    content_type: str = "application/json"
    body: str | None = None
    params: dict[str, str] = field(default_factory=dict)
    form: list[tuple[str, Any]] = field(default_factory=list)
    stream: StreamCallback | None = None

    def url(self, root: str) -> str:
        """The full URL of the request under the API root."""
        return root + self.path

    def payload(self) -> Any:
        """The decoded JSON body, or None when the request has no body."""
        return None if self.body is None else json.loads(self.body)


def build_json_body(fields: Mapping[str, Any]) -> str:
    """Serialise request fields, leaving out unset (None) ones.

    A callable value marks a streamed request and is sent as ``true``.
    """
    document: dict[str, Any] = {}
    for name, value in fields.items():
        if value is None:
            continue
        document[name] = True if callable(value) else value
    return json.dumps(document)


def _function_call_field(function_call: str | None) -> Any:
    if function_call is None:
        return None
    if function_call in ("none", "auto"):
        return function_call
    return {"name": function_call}


def chat_completion_request(
    model: str,
    conversation: Conversation,
    function_call: str | None = None,
    temperature: float | None = None,
    top_p: float | None = None,
    n: int | None = None,
    stream: ChatStreamCallback | None = None,
    stop: list[str] | None = None,
    max_tokens: int | None = None,
    presence_penalty: float | None = None,
    frequency_penalty: float | None = None,
    logit_bias: Mapping[str, int] | None = None,
    user: str | None = None,
) -> ApiRequest:
    """Build the request that asks for a completion of ``conversation``.

    ``function_call`` may be ``"none"``, ``"auto"`` or the name of a
    function to call. A ``stream`` callback is handed each chunk of the
    response together with the conversation.
    """
    stripped: StreamCallback | None = None
    if stream is not None:
        callback = stream

        def stripped(data: str) -> bool:
            return callback(data, conversation)

    fields: dict[str, Any] = {
        "model": model,
        "temperature": temperature,
        "top_p": top_p,
        "n": n,
        "stop": list(stop) if stop is not None else None,
        "max_tokens": max_tokens,
        "presence_penalty": presence_penalty,
        "frequency_penalty": frequency_penalty,
        "logit_bias": dict(logit_bias) if logit_bias is not None else None,
        "user": user,
        "function_call": _function_call_field(function_call),
        "stream": stripped,
    }

    document = conversation.to_json()
    if "messages" in document:
        fields["messages"] = document["messages"]
    if conversation.has_functions():
        fields["functions"] = conversation.functions_json()["functions"]

    return ApiRequest(
        method=Method.POST,
        path="/chat/completions",
        content_type="application/json",
        body=build_json_body(fields),
        stream=stripped,
    )