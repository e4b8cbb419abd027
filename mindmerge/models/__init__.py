"""Data models for Mindmerge."""

from .topic import Sheet, Topic, TopicChildren
from .notes import NoteBundle
from .report import LogEntry, LogSeverity, MergeLog, MergeStatus

__all__ = [
    "Sheet",
    "Topic",
    "TopicChildren",
    "NoteBundle",
    "LogEntry",
    "LogSeverity",
    "MergeLog",
    "MergeStatus"
]
