"""Console helpers: a quick chat loop and an Ollama status check."""

from typing import Callable, Optional

from .config import DEFAULT_PROMPT_FILE, QUICK_CHAT_MODEL
from .ollama import OllamaClient, build_messages
from .prompt import SystemPromptLoader

QUIT_COMMAND = "quit"


def quick_chat(
    client: Optional[OllamaClient] = None,
    model: str = QUICK_CHAT_MODEL,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> None:
    """
    Chat from the terminal until the user types ``quit``.

    Each question is sent on its own with the default system prompt; no
    history or context files are included.
    """
    client = client or OllamaClient()
    system_prompt = SystemPromptLoader(DEFAULT_PROMPT_FILE).get_prompt()

    output_fn("R-Ally - Quick Chat Mode")
    output_fn(f"Using model: {model}")
    output_fn("Type 'quit' to exit\n")

    while True:
        try:
            message = input_fn("You: ")
        except EOFError:
            break
        if message.strip().lower() == QUIT_COMMAND:
            break
        if not message.strip():
            continue
        reply = client.chat(build_messages(system_prompt, (), message.strip()), model)
        output_fn(f"R-Ally: {reply}\n")


def check_ollama(
    client: Optional[OllamaClient] = None,
    output_fn: Callable[[str], None] = print,
) -> bool:
    """Print whether Ollama answers and which models it has installed."""
    client = client or OllamaClient()
    status = client.check_connection()
    if not status.connected:
        output_fn(f"Ollama connection failed: {status.error}")
        output_fn("Make sure Ollama is running: ollama serve")
        return False
    if not status.models:
        output_fn("Ollama is running but no models found")
        output_fn(f"Install models with: ollama pull {QUICK_CHAT_MODEL}")
        return False
    output_fn("Ollama is running")
    output_fn("Available models:")
    for name in status.models:
        output_fn(f"  - {name}")
    return True


def main() -> None:
    quick_chat()


def check_main() -> None:
    raise SystemExit(0 if check_ollama() else 1)


if __name__ == "__main__":
    main()
