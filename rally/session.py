"""Per-browser chat sessions."""

import threading
import time
from typing import Callable, Dict, List, Optional, Tuple, Union

from .chat_log import ChatLog, Role, Turn
from .config import MAX_MESSAGE_LENGTH, SESSION_TIMEOUT_SECONDS
from .context import ContextFileSet, PathLike
from .ollama import ConnectionStatus, OllamaClient, build_messages
from .preferences import InMemoryPreferenceStore, ModelPreferenceStore
from .prompt import DEFAULT_SYSTEM_PROMPT, assemble_system_prompt, load_prompt_override

PreferenceStore = Union[ModelPreferenceStore, InMemoryPreferenceStore]

GREETING_WITH_MODEL: str = (
    "Hello! I'm Rally, your R Ally. Please feel free to ask for my help on your R "
    "projects. Keep in mind I probably will work better by asking me to produce small, "
    "testable lines of code as opposed to whole scripts. You can enter context scripts "
    "in the Settings Page, or change my prompt style there as well."
)
GREETING_WITHOUT_MODEL: str = (
    "Welcome to R-Ally! To get started:\n\n"
    "1. **Start Ollama**: Open a command prompt and run `ollama serve`\n"
    "2. **Install a model**: Run `ollama pull llama3.2:1b` (or another model)\n"
    "3. **Select model**: Go to Settings tab and choose your model\n"
    "4. **Start chatting**: Come back here and ask me anything about R programming!"
)
NO_MODEL_MESSAGE: str = "Please select a model in Settings to start chatting!"


class NoModelSelected(RuntimeError):
    """Raised when a message is sent before any model is chosen."""


def greeting_for(model: str) -> str:
    return GREETING_WITH_MODEL if model else GREETING_WITHOUT_MODEL


class ChatSession:
    """
    Conversation state for one user session.

    Owns the chat log, the context file set, the current base system prompt
    and the selected model. The Ollama client and preference store are
    shared collaborators.
    """

    def __init__(
        self,
        client: OllamaClient,
        preferences: PreferenceStore,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        context_files: Optional[ContextFileSet] = None,
        model: Optional[str] = None,
        on_change: Optional[Callable[[ChatLog], None]] = None,
    ) -> None:
        self._client = client
        self._preferences = preferences
        self.system_prompt = system_prompt
        self.context_files = context_files if context_files is not None else ContextFileSet()
        self.model = model if model is not None else (preferences.load() or "")
        self.log = ChatLog(on_change=on_change)
        self.log.add(Role.ASSISTANT, greeting_for(self.model))

    # --- model selection ----------------------------------------------------

    def select_model(self, model: str) -> None:
        """Switch model: reset the log to a single greeting and remember the choice."""
        self.model = (model or "").strip()
        self.log.clear()
        self.log.add(Role.ASSISTANT, greeting_for(self.model))
        if self.model:
            self._preferences.save(self.model)

    def refresh_models(self) -> ConnectionStatus:
        """
        Re-read the model list and reconcile the selection with it.

        The current model is kept while it is still installed; otherwise the
        saved preference is used if installed, else the selection is cleared.
        """
        status = self._client.check_connection()
        if not status.models:
            return status
        if self.model in status.models:
            return status
        saved = self._preferences.load()
        target = saved if saved in status.models else ""
        if target != self.model:
            self.select_model(target)
        return status

    # --- prompt & context ---------------------------------------------------

    def set_system_prompt(self, text: str) -> None:
        self.system_prompt = text

    def load_system_prompt_file(self, path: PathLike) -> bool:
        text = load_prompt_override(path)
        if text is None:
            return False
        self.system_prompt = text
        return True

    def add_context_file(self, display_name: str, source_path: PathLike) -> None:
        self.context_files.add(display_name, source_path)

    def remove_context_file(self, display_name: str) -> bool:
        return self.context_files.remove(display_name)

    def build_system_prompt(self) -> str:
        return assemble_system_prompt(self.system_prompt, self.context_files)

    # --- chatting -----------------------------------------------------------

    def send(self, message: str) -> Optional[Turn]:
        """
        Send one user message and record the reply.

        Returns the assistant turn, or None for blank input. Gateway failures
        come back as an assistant turn holding the error text.
        """
        text = (message or "").strip()
        if not text:
            return None
        if not self.model:
            raise NoModelSelected(NO_MODEL_MESSAGE)
        if len(text) > MAX_MESSAGE_LENGTH:
            text = text[:MAX_MESSAGE_LENGTH]

        history = self.log.turns
        self.log.add(Role.USER, text)
        messages = build_messages(self.build_system_prompt(), history, text)

        started = time.monotonic()
        reply = self._client.chat(messages, self.model)
        print(
            f"[chat] model={self.model} turns={len(messages)} "
            f"context_files={len(self.context_files)} took={time.monotonic() - started:.1f}s"
        )
        return self.log.add(Role.ASSISTANT, reply)


# === Session registry ======================================================


class SessionManager:
    """
    Maps browser session ids to their ChatSession, with idle expiry.

    Each lookup refreshes the session's timestamp. Sessions idle for longer
    than ``timeout_seconds`` are removed on the next lookup, and ``on_drop``
    is called with the id of every removed session so callers can release
    whatever else they keep per session.
    """

    def __init__(
        self,
        timeout_seconds: float = SESSION_TIMEOUT_SECONDS,
        on_drop: Optional[Callable[[str], None]] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._sessions: Dict[str, Tuple[ChatSession, float]] = {}  # id -> (session, last seen)
        self._lock = threading.Lock()
        self._session_timeout_s = timeout_seconds
        self._on_drop = on_drop
        self._clock = clock

    def get_or_create(
        self,
        session_id: str,
        factory: Callable[[], ChatSession],
    ) -> ChatSession:
        self.expire_idle()
        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is None:
                chat_session = factory()
                print(f"[session] Created session {session_id}")
            else:
                chat_session = entry[0]
            self._sessions[session_id] = (chat_session, self._clock())
            return chat_session

    def expire_idle(self) -> List[str]:
        """Remove sessions idle past the timeout and return their ids."""
        now = self._clock()
        with self._lock:
            expired = [
                session_id
                for session_id, (_, last_seen) in self._sessions.items()
                if now - last_seen > self._session_timeout_s
            ]
            for session_id in expired:
                del self._sessions[session_id]
                print(f"[session] Expired session {session_id}")
        for session_id in expired:
            self._notify_drop(session_id)
        return expired

    def drop(self, session_id: str) -> None:
        with self._lock:
            removed = self._sessions.pop(session_id, None) is not None
        if removed:
            print(f"[session] Dropped session {session_id}")
            self._notify_drop(session_id)

    def _notify_drop(self, session_id: str) -> None:
        if self._on_drop is not None:
            self._on_drop(session_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
