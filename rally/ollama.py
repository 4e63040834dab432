"""Blocking client for a local Ollama server."""

import sys
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

import requests

from .chat_log import Turn
from .config import (
    OLLAMA_BASE_URL,
    OLLAMA_CHAT_ENDPOINT,
    OLLAMA_TAGS_ENDPOINT,
    OLLAMA_TIMEOUT_SECONDS,
)

UNAVAILABLE_REPLY: str = "Error: Unable to get response from Ollama"


@dataclass
class ConnectionStatus:
    connected: bool
    models: List[str] = field(default_factory=list)
    error: Optional[str] = None


def build_messages(
    system_prompt: str,
    history: Iterable[Turn],
    user_message: str,
) -> List[Dict[str, str]]:
    """System message first, then prior turns, then the new user turn."""
    messages: List[Dict[str, str]] = [{"role": "system", "content": system_prompt}]
    messages.extend(turn.as_message() for turn in history)
    messages.append({"role": "user", "content": user_message})
    return messages


class OllamaClient:
    """Thin wrapper around Ollama's /api/chat and /api/tags endpoints."""

    def __init__(
        self,
        base_url: str = OLLAMA_BASE_URL,
        chat_endpoint: str = OLLAMA_CHAT_ENDPOINT,
        tags_endpoint: str = OLLAMA_TAGS_ENDPOINT,
        timeout_seconds: Optional[float] = OLLAMA_TIMEOUT_SECONDS,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._chat_endpoint = chat_endpoint
        self._tags_endpoint = tags_endpoint
        self._timeout_seconds = timeout_seconds

    @property
    def base_url(self) -> str:
        return self._base_url

    def chat(self, messages: List[Dict[str, str]], model: str) -> str:
        """
        Send one non-streaming chat request and return the reply text.

        Failures never raise: a non-2xx status or an unusable body yields a
        readable error string that the caller shows as the assistant reply.
        """
        url = f"{self._base_url}{self._chat_endpoint}"
        payload: Dict[str, Any] = {
            "model": model,
            "messages": messages,
            "stream": False,
        }
        try:
            response = requests.post(url, json=payload, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            print(f"[ollama] Error calling Ollama: {exc}", file=sys.stderr)
            return f"Error: {exc}"

        if not 200 <= response.status_code < 300:
            print(
                f"[ollama] Chat request failed with HTTP {response.status_code} (model={model})",
                file=sys.stderr,
            )
            return UNAVAILABLE_REPLY

        try:
            data = response.json()
            content = data["message"]["content"]
        except (ValueError, KeyError, TypeError) as exc:
            print(f"[ollama] Unexpected chat response: {exc}", file=sys.stderr)
            return f"Error: unexpected response from Ollama ({exc})"
        if not isinstance(content, str):
            print(f"[ollama] Chat response content is {type(content).__name__}", file=sys.stderr)
            return "Error: unexpected response from Ollama (no message content)"
        return content

    def list_models(self) -> List[str]:
        """Installed model names, or an empty list if the server can't be read."""
        return self.check_connection().models

    def check_connection(self) -> ConnectionStatus:
        url = f"{self._base_url}{self._tags_endpoint}"
        try:
            response = requests.get(url, timeout=self._timeout_seconds)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            print(f"[ollama] Failed to list models: {exc}", file=sys.stderr)
            return ConnectionStatus(connected=False, error=str(exc))

        entries = data.get("models") if isinstance(data, dict) else None
        models = [
            m["name"] for m in (entries or []) if isinstance(m, dict) and m.get("name")
        ]
        return ConnectionStatus(connected=True, models=models)
