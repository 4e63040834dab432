"""Context files folded into the system prompt."""

import itertools
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union

from .config import TABULAR_EXTENSIONS, TABULAR_PREVIEW_LINES, TEXT_EXTENSIONS

PathLike = Union[str, Path]


@dataclass(frozen=True)
class ContextFile:
    """An uploaded file referenced by its display name."""

    display_name: str
    source_path: Path


def _extension(path: Path) -> str:
    return path.suffix.lstrip(".").lower()


def read_context_file(
    path: Optional[PathLike],
    preview_lines: int = TABULAR_PREVIEW_LINES,
) -> Optional[str]:
    """
    Return the text of a supported file, or None when it is unavailable.

    Source, markdown and plain text files are read whole. Tabular files only
    contribute their first ``preview_lines`` lines so a large dataset does not
    flood the prompt. Missing files, unsupported extensions and read or
    decode errors all yield None.
    """
    if path is None:
        return None
    path = Path(path)
    if not path.is_file():
        return None

    ext = _extension(path)
    try:
        if ext in TEXT_EXTENSIONS:
            with path.open() as fh:
                lines = [line.rstrip("\r\n") for line in fh]
        elif ext in TABULAR_EXTENSIONS:
            with path.open() as fh:
                lines = [line.rstrip("\r\n") for line in itertools.islice(fh, preview_lines)]
        else:
            return None
    except (OSError, UnicodeDecodeError) as exc:
        print(f"[context] Could not read {path}: {exc}", file=sys.stderr)
        return None
    return "\n".join(lines)


class ContextFileSet:
    """
    Context files keyed by display name.

    Iteration follows insertion order. Re-adding a name replaces its path but
    keeps its original position.
    """

    def __init__(self, files: Iterable[ContextFile] = ()) -> None:
        self._files: Dict[str, ContextFile] = {}
        for item in files:
            self._files[item.display_name] = item

    def add(self, display_name: str, source_path: PathLike) -> ContextFile:
        item = ContextFile(display_name=display_name, source_path=Path(source_path))
        self._files[display_name] = item
        return item

    def remove(self, display_name: str) -> bool:
        return self._files.pop(display_name, None) is not None

    def names(self) -> List[str]:
        return list(self._files)

    def __iter__(self) -> Iterator[ContextFile]:
        return iter(list(self._files.values()))

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, display_name: object) -> bool:
        return display_name in self._files


def load_sample_context(
    names: Iterable[str],
    base_dir: Optional[Path] = None,
) -> ContextFileSet:
    """Seed a context set with whichever sample files exist on disk."""
    base = base_dir or Path.cwd()
    files = ContextFileSet()
    for name in names:
        candidate = base / name
        if candidate.is_file():
            files.add(name, candidate)
    return files
