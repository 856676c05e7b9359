"""Chat history kept in the form the chat completion endpoint expects."""

from __future__ import annotations

import copy
import json
import logging
from typing import Any

from oaikit.functions import Functions
from oaikit.streaming import (
    DATA_PREFIX,
    DONE_MARKER,
    StreamUpdate,
    remove_strings,
    split_full_streamed_data,
)

_log = logging.getLogger(__name__)


def _dump(document: Any) -> str:
    return json.dumps(document, indent=4, sort_keys=True, ensure_ascii=False)


def _is_present(value: Any) -> bool:
    """True for a value that is neither null nor an empty array or object."""
    if value is None:
        return False
    if isinstance(value, (dict, list)) and not value:
        return False
    return True


class Conversation:
    """Messages exchanged with the assistant, plus optional function definitions.

    Set the system data and user input, send the conversation to a chat
    completion, then update it with the response (or with streamed chunks)
    and read the assistant's answer back.
    """

    def __init__(self) -> None:
        self._conversation: dict[str, Any] = {"messages": []}
        self._functions: dict[str, Any] | None = None
        self._last_resp_is_fc = False
        self._incomplete_buffer = ""
        self._max_history_size: int | None = None

    @property
    def _messages(self) -> list[dict[str, Any]]:
        return self._conversation.setdefault("messages", [])

    # -- history -----------------------------------------------------------

    def set_max_history_size(self, size: int) -> None:
        """Limit how many messages are kept; older ones are dropped first."""
        self._max_history_size = size

    def _erase_extra(self) -> None:
        messages = self._messages
        if self._max_history_size is None or len(messages) <= self._max_history_size:
            return
        if messages[0].get("role") == "system":
            if len(messages) > 1:
                del messages[1]
        else:
            del messages[0]

    def _append(self, role: Any, content: Any) -> None:
        self._erase_extra()
        self._messages.append({"role": role, "content": content})

    # -- system data ---------------------------------------------------------

    def change_first_system_message(self, new_data: str) -> bool:
        """Replace the content of the leading system message, if there is one."""
        messages = self._messages
        if not new_data or not messages:
            return False
        if messages[0].get("role") != "system":
            return False
        messages[0]["content"] = new_data
        return True

    def set_system_data(self, data: str) -> bool:
        """Add the system message; only one may exist in a conversation."""
        if not data:
            return False
        if any(message.get("role") == "system" for message in self._messages):
            return False
        self._messages.append({"role": "system", "content": data})
        return True

    def pop_system_data(self) -> bool:
        """Remove the system message when it is the first message."""
        messages = self._messages
        if not messages or messages[0].get("role") != "system":
            return False
        del messages[0]
        return True

    # -- user data -----------------------------------------------------------

    def add_user_data(self, data: str, name: str | None = None) -> bool:
        """Append user input, optionally with the author's name."""
        if not data:
            return False
        self._erase_extra()
        message: dict[str, Any] = {"role": "user", "content": data}
        if name is not None:
            message["name"] = name
        self._messages.append(message)
        return True

    def pop_user_data(self) -> bool:
        """Remove the last message if it came from the user."""
        messages = self._messages
        if not messages or messages[-1].get("role") != "user":
            return False
        messages.pop()
        return True

    # -- responses -----------------------------------------------------------

    def last_response(self) -> str:
        """Return the last assistant message, or an empty string."""
        messages = self._messages
        if messages and messages[-1].get("role") == "assistant":
            content = messages[-1].get("content")
            return content if isinstance(content, str) else ""
        return ""

    def last_response_is_function_call(self) -> bool:
        """Whether the most recent response asked for a function call."""
        return self._last_resp_is_fc

    def last_function_call_name(self) -> str:
        """Name of the function requested by the most recent response."""
        return self._conversation.get("function_call", {}).get("name", "")

    def last_function_call_arguments(self) -> str:
        """Raw JSON arguments of the function requested by the most recent response."""
        return self._conversation.get("function_call", {}).get("arguments", "")

    def pop_last_response(self) -> bool:
        """Remove the last message if it came from the assistant."""
        messages = self._messages
        if not messages or messages[-1].get("role") != "assistant":
            return False
        messages.pop()
        return True

    def _clear_function_call(self) -> None:
        if self._last_resp_is_fc:
            self._conversation.pop("function_call", None)
            self._last_resp_is_fc = False

    def _record_function_call(self, message: dict[str, Any]) -> None:
        call = message.get("function_call")
        if call is None and "function_call" not in message:
            return
        record: dict[str, Any] = {}
        if isinstance(call, dict):
            if "name" in call:
                record["name"] = call["name"]
            if "arguments" in call:
                record["arguments"] = call["arguments"]
        self._conversation["function_call"] = record
        self._last_resp_is_fc = True

    def update(self, response: Any) -> bool:
        """Add the reply held in a response body (text or an object with ``content``).

        Raises ``json.JSONDecodeError`` when the body is not JSON.
        """
        text = response if isinstance(response, str) else response.content
        self._clear_function_call()
        if not text:
            return False

        document = json.loads(text)
        if not isinstance(document, dict):
            return False

        if "choices" in document:
            choices = document["choices"] or []
            if not choices:
                return False
            choice = choices[0]
            if not isinstance(choice, dict) or "message" not in choice:
                return False
            message = choice["message"]
            if not isinstance(message, dict) or "role" not in message or "content" not in message:
                return False
            content = message["content"]
            self._append(message["role"], "" if content is None else content)
            self._record_function_call(message)
            return True

        if "message" in document:
            message = document["message"]
            if not isinstance(message, dict) or "role" not in message or "content" not in message:
                return False
            # A single message keeps a null content; any text content is stored as empty.
            self._append(message["role"], None if message["content"] is None else "")
            self._record_function_call(message)
            return True

        if "role" in document and "content" in document:
            # A bare message is looked up under "message", which it lacks.
            self._append(None, None)
            return True

        return False

    # -- persistence ---------------------------------------------------------

    def export(self) -> str:
        """Serialise the messages and any functions to a JSON string."""
        if not self._conversation:
            return ""
        document: dict[str, Any] = {"messages": self._conversation.get("messages")}
        if self._functions is not None:
            document["functions"] = self._functions.get("functions")
        return _dump(document)

    def import_json(self, data: str) -> bool:
        """Load messages (and functions, if present) from an exported string."""
        if not data:
            return False
        document = json.loads(data)
        if not isinstance(document, dict) or "messages" not in document:
            return False
        self._conversation["messages"] = document["messages"]
        if "functions" in document:
            self._functions = {"functions": document["functions"]}
        return True

    # -- streaming -----------------------------------------------------------

    def append_stream_data(self, data: str) -> StreamUpdate | None:
        """Feed a chunk of server-sent events into the pending assistant message.

        Returns what the chunk added, or None when the chunk was empty or
        held an event without choices.
        """
        if not data:
            return None
        return self._parse_stream_data(data)

    def _parse_stream_data(self, data: str) -> StreamUpdate | None:
        if self._incomplete_buffer:
            data = self._incomplete_buffer + data
            self._incomplete_buffer = ""

        lines = split_full_streamed_data(data)
        if not lines:
            return None

        messages = self._messages
        if not messages or "pending" not in messages[-1]:
            messages.append({"role": "", "content": "", "pending": True})

        update = StreamUpdate()
        for line in lines:
            if DONE_MARKER in line:
                messages[-1].pop("pending", None)
                update.completed = True
                continue

            payload = remove_strings(line, DATA_PREFIX)
            try:
                event = json.loads(payload)
            except ValueError as error:
                self._incomplete_buffer = payload
                _log.debug("buffering incomplete stream event: %s", error)
                continue

            if not isinstance(event, dict) or "choices" not in event:
                return None
            self._apply_stream_event(event["choices"], update)

        return update

    def _apply_stream_event(self, choices: Any, update: StreamUpdate) -> None:
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            return
        delta = choices[0].get("delta")
        if not isinstance(delta, dict) or not delta:
            return

        last = self._messages[-1]
        if "role" in delta:
            last["role"] = delta["role"]

        if "content" in delta:
            content = delta["content"]
            if _is_present(content):
                last["content"] = last["content"] + content
                update.delta += content
            self._clear_function_call()

        call = delta.get("function_call")
        if not isinstance(call, dict) or not call:
            return
        if "name" in call:
            if _is_present(call["name"]) and "function_call" not in last:
                self._conversation["function_call"] = {"name": call["name"]}
                self._last_resp_is_fc = True
        elif "arguments" in call and _is_present(call["arguments"]):
            record = self._conversation.setdefault("function_call", {})
            if "arguments" in record:
                record["arguments"] = record["arguments"] + call["arguments"]
            else:
                record["arguments"] = call["arguments"]

    # -- functions -----------------------------------------------------------

    def set_functions(self, functions: Functions) -> bool:
        """Attach function definitions; False when there are none."""
        document = functions.to_json()
        if document and document.get("functions"):
            self._functions = document
            return True
        return False

    def pop_functions(self) -> None:
        """Detach any function definitions."""
        self._functions = None

    def has_functions(self) -> bool:
        """Whether function definitions are attached."""
        return self._functions is not None

    # -- views ---------------------------------------------------------------

    def raw_conversation(self) -> str:
        """The conversation document as indented JSON."""
        return _dump(self._conversation)

    def raw_functions(self) -> str:
        """The functions document as indented JSON, or an empty string."""
        return _dump(self._functions) if self._functions is not None else ""

    def to_json(self) -> dict[str, Any]:
        """A copy of the conversation document."""
        return copy.deepcopy(self._conversation)

    def functions_json(self) -> dict[str, Any]:
        """A copy of the functions document; ValueError when none is attached."""
        if self._functions is None:
            raise ValueError("conversation has no functions")
        return copy.deepcopy(self._functions)

    def __str__(self) -> str:
        return self.raw_conversation() + "\n" + self.raw_functions()