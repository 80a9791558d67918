"""Context snapshots: immutable records of one triggering event."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum

from .errors import InvalidContextError
from .globs import normalize_path


class ContextKind(str, Enum):
    PROMPT = "prompt"
    FILE_OP = "fileOp"


class FileOperation(str, Enum):
    """Kind of file operation reported by the host."""

    EDIT = "edit"
    WRITE = "write"
    READ = "read"

    @classmethod
    def parse(cls, value: "FileOperation | str") -> "FileOperation":
        if isinstance(value, FileOperation):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidContextError(f"Unknown file operation: {value!r}") from None


# Host tool names mapped to the operation they perform
TOOL_OPERATIONS: dict[str, FileOperation] = {
    "Edit": FileOperation.EDIT,
    "MultiEdit": FileOperation.EDIT,
    "NotebookEdit": FileOperation.EDIT,
    "Write": FileOperation.WRITE,
    "Read": FileOperation.READ,
}


@dataclass(frozen=True)
class ContextSnapshot:
    """
    What just happened, for one evaluation.

    Exactly one of ``prompt_text`` / ``file_path`` is set, matching ``kind``.
    """

    kind: ContextKind
    prompt_text: str | None = None
    file_path: str | None = None
    operation: FileOperation | None = None
    timestamp: float = field(default_factory=time.time)

    @property
    def is_prompt(self) -> bool:
        return self.kind is ContextKind.PROMPT


def from_prompt(text: str, timestamp: float | None = None) -> ContextSnapshot:
    """Build a prompt snapshot."""
    if not isinstance(text, str):
        raise InvalidContextError(f"Prompt text must be a string, got {type(text).__name__}")
    return ContextSnapshot(
        kind=ContextKind.PROMPT,
        prompt_text=text,
        timestamp=time.time() if timestamp is None else timestamp,
    )


def from_file_op(
    path: str,
    operation: FileOperation | str = FileOperation.EDIT,
    timestamp: float | None = None,
) -> ContextSnapshot:
    """
    Build a file-operation snapshot.

    Raises:
        InvalidContextError: If the path is empty or the operation unknown
    """
    if not isinstance(path, str) or not path.strip():
        raise InvalidContextError("File path must be a non-empty string")
    return ContextSnapshot(
        kind=ContextKind.FILE_OP,
        file_path=normalize_path(path.strip()),
        operation=FileOperation.parse(operation),
        timestamp=time.time() if timestamp is None else timestamp,
    )


__all__ = [
    "ContextKind",
    "ContextSnapshot",
    "FileOperation",
    "TOOL_OPERATIONS",
    "from_file_op",
    "from_prompt",
]
