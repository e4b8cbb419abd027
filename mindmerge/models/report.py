"""
Run report models for Mindmerge.

Per-source failures and warnings, plus recoverable note problems, are
collected here during a run and printed once at the end of ingestion.
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class MergeStatus(str, Enum):
    """Outcome of merging one source, with its progress character."""

    OK = "+"
    WARNING = "?"
    FAILURE = "x"


class LogSeverity(str, Enum):
    FAILURE = "failure"
    WARNING = "warning"
    ERROR = "error"


class LogEntry(BaseModel):
    """
    A single problem recorded during a run.
    """

    source: Optional[str] = Field(
        None,
        description="Source file the problem belongs to, if any"
    )

    severity: LogSeverity = Field(
        ...,
        description="How the problem affected the merge"
    )

    message: str = Field(
        ...,
        description="Human-readable description"
    )


class MergeLog:
    """
    Ordered log of everything that went wrong during a run.
    """

    def __init__(self):
        self.entries: List[LogEntry] = []

    def add(self, severity: LogSeverity, message: str, source: Optional[str] = None) -> LogEntry:
        entry = LogEntry(source=source, severity=severity, message=message)
        self.entries.append(entry)
        return entry

    def failure(self, source: str, message: str) -> LogEntry:
        return self.add(LogSeverity.FAILURE, message, source)

    def warning(self, message: str, source: Optional[str] = None) -> LogEntry:
        return self.add(LogSeverity.WARNING, message, source)

    def error(self, message: str, source: Optional[str] = None) -> LogEntry:
        return self.add(LogSeverity.ERROR, message, source)

    def messages(self) -> List[str]:
        return [entry.message for entry in self.entries]

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)
