"""
Checked view of topic notes.

A note holds the same content three ways: plain text, an HTML-like list of
paragraphs, and an optional list of delta insert operations. ``NoteBundle``
validates that shape before anything is changed, so an edit either updates
every representation or none of them.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, ValidationError

from ..errors import NoteShapeError


class PlainNote(BaseModel):
    model_config = ConfigDict(extra="allow")

    content: str


class HtmlContent(BaseModel):
    model_config = ConfigDict(extra="allow")

    paragraphs: List[Dict[str, Any]]


class HtmlNote(BaseModel):
    model_config = ConfigDict(extra="allow")

    content: HtmlContent


class OpsNote(BaseModel):
    model_config = ConfigDict(extra="allow")

    ops: List[Dict[str, Any]]


class NoteBundle(BaseModel):
    """
    A topic note whose plain and html parts are present and well formed.
    """

    model_config = ConfigDict(extra="allow")

    plain: PlainNote
    html: HtmlNote
    ops: Optional[OpsNote] = None

    @classmethod
    def check(cls, raw: Any) -> "NoteBundle":
        """
        Validate raw note JSON.

        Raises:
            NoteShapeError: If the note does not match the expected shape
        """
        if not isinstance(raw, dict):
            raise NoteShapeError(f"note is a {type(raw).__name__}, not an object")
        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )
            raise NoteShapeError(problems) from e

    @classmethod
    def from_line(cls, line: str) -> "NoteBundle":
        """Build a fresh note holding a single line in all three representations."""
        return cls(
            plain=PlainNote(content=line),
            ops=OpsNote(ops=[{"insert": line + "\n"}]),
            html=HtmlNote(content=HtmlContent(paragraphs=[{"spans": [{"text": line}]}])),
        )

    def append_line(self, line: str) -> None:
        """Append a line of text to every representation present."""
        self.plain.content = self.plain.content + "\n" + line
        self.html.content.paragraphs.append({"spans": [{"text": line}]})
        if self.ops is not None:
            self.ops.ops.append({"insert": line + "\n"})

    def extend(self, other: "NoteBundle") -> None:
        """Append another note's content after this one's."""
        self.plain.content = self.plain.content + "\n" + other.plain.content
        self.html.content.paragraphs = self.html.content.paragraphs + other.html.content.paragraphs
        if other.ops is not None:
            if self.ops is not None:
                self.ops.ops = self.ops.ops + other.ops.ops
            else:
                self.ops = other.ops.model_copy(deep=True)

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)
