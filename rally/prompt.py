"""System prompt loading and assembly."""

from pathlib import Path
from typing import Callable, Iterable, List, Optional

from .context import ContextFile, PathLike, read_context_file

DEFAULT_SYSTEM_PROMPT: str = """You are an expert R programmer and data scientist. Follow these guidelines:

1. **Code Quality**: Write clean, readable R code using tidyverse when appropriate
2. **Best Practices**: Use snake_case for variables, meaningful names, add comments for complex logic
3. **Error Handling**: Include input validation and error messages where relevant
4. **Documentation**: Explain what the code does and why certain approaches were chosen
5. **Examples**: Provide complete, runnable examples with sample data
6. **Performance**: Suggest efficient approaches for large datasets
7. **Packages**: Recommend appropriate R packages and explain their benefits
8. **Debugging**: Help identify and fix common R programming issues

Always format code blocks with ```r and provide context for your recommendations."""

CONTEXT_HEADER: str = "\n\n**Context from files:**\n"
CONTEXT_SEPARATOR: str = "\n\n---\n\n"


# === System Prompt Loader ==================================================


class SystemPromptLoader:
    """Load and cache the default prompt file, falling back to the built-in text."""

    def __init__(self, path: Path, fallback: str = DEFAULT_SYSTEM_PROMPT) -> None:
        self._path = path
        self._fallback = fallback
        self._cached_mtime: Optional[float] = None
        self._cached_text: Optional[str] = None

    def get_prompt(self) -> str:
        try:
            if not self._path.is_file():
                return self._fallback
            mtime = self._path.stat().st_mtime
            if self._cached_text is None or self._cached_mtime != mtime:
                self._cached_text = "\n".join(
                    self._path.read_text(encoding="utf-8").splitlines()
                )
                self._cached_mtime = mtime
        except (OSError, UnicodeDecodeError):
            return self._fallback
        return self._cached_text


def load_prompt_override(path: Optional[PathLike]) -> Optional[str]:
    """Read a user-chosen prompt file; None if it cannot be used."""
    return read_context_file(path)


# === Assembly ==============================================================


def assemble_system_prompt(
    base: str,
    context_files: Iterable[ContextFile] = (),
    reader: Callable[[Path], Optional[str]] = read_context_file,
) -> str:
    """
    Build the system-role message from a base instruction and context files.

    File contents are appended in the order ``context_files`` is traversed,
    under a single header and separated by a horizontal rule. Files the
    reader cannot use are skipped; with nothing usable the base is returned
    unchanged.
    """
    contents: List[str] = []
    for item in context_files:
        text = reader(item.source_path)
        if text:
            contents.append(text)

    if not contents:
        return base
    return base + CONTEXT_HEADER + CONTEXT_SEPARATOR.join(contents)
