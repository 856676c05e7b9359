"""Conversation state, function schemas and request builders for chat-completion APIs."""

__version__ = "4.0.1"