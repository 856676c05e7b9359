"""Helpers for splitting server-sent event streams from chat completions."""

from __future__ import annotations

from dataclasses import dataclass

DATA_PREFIX = "data: "
DONE_MARKER = "data: [DONE]"


@dataclass
class StreamUpdate:
    """What one chunk of streamed data contributed to a conversation.

    ``delta`` holds the text appended to the pending message and
    ``completed`` tells whether the stream's end marker was seen.
    """

    delta: str = ""
    completed: bool = False


def remove_strings(text: str, pattern: str) -> str:
    """Return ``text`` with every occurrence of ``pattern`` removed."""
    if not pattern:
        return text
    return text.replace(pattern, "")


def _non_empty_lines(data: str) -> list[str]:
    return [line for line in data.split("\n") if line]


def split_streamed_data(data: str) -> list[str]:
    """Strip every ``data: `` prefix and return the non-empty lines."""
    return _non_empty_lines(remove_strings(data, DATA_PREFIX))


def split_full_streamed_data(data: str) -> list[str]:
    """Return the non-empty lines of raw stream data, prefixes kept."""
    return _non_empty_lines(data)