"""Pytest configuration and shared fixtures."""
from typing import Dict, List, Optional

import pytest

from rally.ollama import ConnectionStatus
from rally.preferences import InMemoryPreferenceStore


class FakeOllamaClient:
    """Records chat calls and answers with a canned reply."""

    def __init__(
        self,
        reply: str = "Sure, here you go.",
        models: Optional[List[str]] = None,
        connected: bool = True,
    ) -> None:
        self.reply = reply
        self.models = list(models or [])
        self.connected = connected
        self.calls: List[Dict] = []

    @property
    def base_url(self) -> str:
        return "http://ollama.test"

    def chat(self, messages, model):
        self.calls.append({"messages": messages, "model": model})
        return self.reply

    def check_connection(self) -> ConnectionStatus:
        if not self.connected:
            return ConnectionStatus(connected=False, error="connection refused")
        return ConnectionStatus(connected=True, models=list(self.models))

    def list_models(self) -> List[str]:
        return self.check_connection().models


@pytest.fixture
def fake_client():
    """Return a fake Ollama client with two installed models."""
    return FakeOllamaClient(models=["llama3.2:1b", "phi4:latest"])


@pytest.fixture
def prefs():
    """Return an empty in-memory preference store."""
    return InMemoryPreferenceStore()


@pytest.fixture
def sample_r_file(tmp_path):
    """Create a small R script."""
    path = tmp_path / "analysis.R"
    path.write_text("x <- c(1, 2, 3)\nmean(x)\n")
    return path


@pytest.fixture
def sample_csv_file(tmp_path):
    """Create a CSV file with a header and 25 rows."""
    path = tmp_path / "data.csv"
    rows = ["id,value"] + [f"{i},{i * 2}" for i in range(25)]
    path.write_text("\n".join(rows) + "\n")
    return path


@pytest.fixture
def make_client():
    """Return the fake client class for tests that need custom replies."""
    return FakeOllamaClient
