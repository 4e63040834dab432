"""In-memory, append-only conversation log."""

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional, Tuple


def utc_now() -> datetime.datetime:
    """Timezone-aware UTC timestamp."""
    return datetime.datetime.now(datetime.timezone.utc)


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Turn:
    """One message in the conversation."""

    role: Role
    content: str
    created_at: datetime.datetime = field(default_factory=utc_now)

    def as_message(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class ChatLog:
    """
    Ordered list of turns for one session.

    Turns are only ever appended; the whole log can be cleared but no single
    turn is removed or edited. ``on_change`` is called after every append and
    clear so a display can refresh.
    """

    def __init__(self, on_change: Optional[Callable[["ChatLog"], None]] = None) -> None:
        self._turns: List[Turn] = []
        self._on_change = on_change

    def append(self, turn: Turn) -> Turn:
        self._turns.append(turn)
        self._notify()
        return turn

    def add(self, role: Role, content: str) -> Turn:
        return self.append(Turn(role=role, content=content))

    def clear(self) -> None:
        self._turns.clear()
        self._notify()

    @property
    def turns(self) -> Tuple[Turn, ...]:
        return tuple(self._turns)

    @property
    def last(self) -> Optional[Turn]:
        return self._turns[-1] if self._turns else None

    def as_messages(self) -> List[Dict[str, str]]:
        return [turn.as_message() for turn in self._turns]

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self)

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(tuple(self._turns))
