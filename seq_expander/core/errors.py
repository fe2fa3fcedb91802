from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SeqError(Exception):
    """Base error envelope. Carries a stable code plus the offending location."""

    code: str
    message: str
    file: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None

    def __str__(self) -> str:
        parts: list[str] = [self.file or "<input>"]
        if self.line is not None:
            parts.append(str(self.line))
            if self.column is not None:
                parts.append(str(self.column))
        return f"{':'.join(parts)}: {self.code}: {self.message}"


class SeqLoadError(SeqError):
    pass


class SeqLexError(SeqError):
    pass


class SeqSyntaxError(SeqError):
    pass
