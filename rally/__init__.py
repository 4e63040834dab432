"""
R-Ally: a small dashboard chat client for R help from a local Ollama model.

User messages and optional file context go to Ollama's chat API; replies are
rendered with light markdown and copyable code blocks.
"""

from .chat_log import ChatLog, Role, Turn
from .context import ContextFile, ContextFileSet, read_context_file
from .ollama import OllamaClient
from .preferences import InMemoryPreferenceStore, ModelPreferenceStore
from .prompt import assemble_system_prompt
from .render import render_reply
from .session import ChatSession, NoModelSelected

__all__ = [
    "ChatLog",
    "ChatSession",
    "ContextFile",
    "ContextFileSet",
    "InMemoryPreferenceStore",
    "ModelPreferenceStore",
    "NoModelSelected",
    "OllamaClient",
    "Role",
    "Turn",
    "assemble_system_prompt",
    "read_context_file",
    "render_reply",
]
