"""
Topic tree models for Mindmerge.

These models mirror the JSON stored in a mind-map workbook's content.json.
Only the fields the merge engines touch are declared; everything else a
topic carries (styles, markers, images, positions) rides along as extra data
and is written back unchanged.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class TopicChildren(BaseModel):
    """
    The child slots of a topic.

    ``attached`` children render nested under the topic, ``detached`` ones
    float freely. Either, both or neither may be present.
    """

    model_config = ConfigDict(extra="allow")

    attached: Optional[List['Topic']] = None
    detached: Optional[List['Topic']] = None
    callout: Optional[List['Topic']] = None
    summary: Optional[List['Topic']] = None

    @field_validator("attached", "detached", "callout", "summary", mode="before")
    @classmethod
    def _drop_malformed_slot(cls, value: Any) -> Any:
        # A slot that is not a list is treated as missing
        if value is not None and not isinstance(value, list):
            return None
        return value

    def topic_slots(self) -> List[List['Topic']]:
        """Return every present child list, attached first."""
        return [slot for slot in (self.attached, self.detached, self.callout, self.summary)
                if slot is not None]


class Topic(BaseModel):
    """
    A node in the mind-map tree.
    """

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = Field(
        default=None,
        description="Unique topic identifier, reissued whenever a tree is merged"
    )

    title: Optional[str] = Field(
        default=None,
        description="Display title, also the consolidation and sort key"
    )

    children: Optional[TopicChildren] = None

    notes: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Raw note JSON (plain, html and optional ops representations)"
    )

    branch: Optional[str] = Field(
        default=None,
        description="Presentation marker, 'folded' for collapsed branches"
    )

    boundaries: Optional[List[Dict[str, Any]]] = None

    summaries: Optional[List[Dict[str, Any]]] = None

    @property
    def attached(self) -> List['Topic']:
        """Attached children, or an empty list when there are none."""
        if self.children is None or self.children.attached is None:
            return []
        return self.children.attached

    def ensure_attached(self) -> List['Topic']:
        """Return the attached list, creating ``children``/``attached`` if absent."""
        if self.children is None:
            self.children = TopicChildren()
        if self.children.attached is None:
            self.children.attached = []
        return self.children.attached


class Sheet(BaseModel):
    """
    One sheet of a workbook. Only the first sheet of a source is merged.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    root_topic: Optional[Topic] = Field(default=None, alias="rootTopic")

    def to_json(self) -> Dict[str, Any]:
        """Serialise the sheet in content.json form."""
        # Explicit nulls are kept; fields the source never had stay absent
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


TopicChildren.model_rebuild()
Topic.model_rebuild()
