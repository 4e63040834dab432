"""Application configuration constants for R-Ally."""

import os
import tempfile
from pathlib import Path
from typing import Optional, Tuple

# === Application Configuration Constants ===================================

# --- Server settings -------------------------------------------------------

APP_TITLE: str = "R-Ally"
SERVER_HOST: str = os.environ.get("RALLY_HOST", "127.0.0.1")
SERVER_PORT: int = int(os.environ.get("RALLY_PORT", "5111"))
SERVER_DEBUG: bool = os.environ.get("RALLY_DEBUG", "") not in ("", "0", "false")

# --- Secret key & sessions -------------------------------------------------

DEFAULT_DEV_SECRET: str = "change-this-secret-key"
FLASK_SECRET_KEY: str = os.environ.get("RALLY_SECRET", DEFAULT_DEV_SECRET)

SESSION_ID_KEY: str = "rally_session_id"
SESSION_TIMEOUT_SECONDS: float = float(os.environ.get("RALLY_SESSION_TIMEOUT", str(3600 * 24)))

# --- Ollama ----------------------------------------------------------------

OLLAMA_BASE_URL: str = os.environ.get("OLLAMA_BASE_URL", "http://localhost:11434")
OLLAMA_CHAT_ENDPOINT: str = "/api/chat"
OLLAMA_TAGS_ENDPOINT: str = "/api/tags"
_timeout_env = os.environ.get("OLLAMA_TIMEOUT")
# None leaves the timeout to requests (wait indefinitely)
OLLAMA_TIMEOUT_SECONDS: Optional[float] = float(_timeout_env) if _timeout_env else None

QUICK_CHAT_MODEL: str = os.environ.get("RALLY_QUICK_MODEL", "llama3.2:1b")

# --- Prompt & context ------------------------------------------------------

DEFAULT_PROMPT_FILE: Path = Path(os.environ.get("RALLY_PROMPT_FILE", "DefaultPrompt.txt"))
MODEL_PREFERENCE_FILE: Path = Path(os.environ.get("RALLY_MODEL_FILE", ".rally_model"))
SAMPLE_CONTEXT_FILES: Tuple[str, ...] = ("sample_context.R", "sample_prompt.txt")
UPLOAD_DIR: Path = Path(
    os.environ.get("RALLY_UPLOAD_DIR", str(Path(tempfile.gettempdir()) / "rally-uploads"))
)

TEXT_EXTENSIONS: Tuple[str, ...] = ("r", "rmd", "md", "txt")
TABULAR_EXTENSIONS: Tuple[str, ...] = ("csv",)
TABULAR_PREVIEW_LINES: int = 10

# --- UI configuration ------------------------------------------------------

MAX_MESSAGE_LENGTH: int = 4000  # characters; oversized input will be truncated
