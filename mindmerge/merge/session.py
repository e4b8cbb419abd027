"""
Merge session for Mindmerge.

A MergeSession owns the master sheet being built, the resource collector and
the run log. Sources are merged into it one at a time; the consolidation,
sort and fold passes then run over the accumulated tree.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from pydantic import ValidationError

from ..errors import FatalMergeError
from ..importers.archive import SourceArchive
from ..models import MergeLog, MergeStatus, Sheet, Topic, TopicChildren
from .attribution import ATTRIBUTION_TAG, annotate_topics
from .consolidation import consolidate_topics
from .identity import IdentityGenerator
from .ordering import fold_topics, sort_topics
from .resources import ResourceCollector


@dataclass
class MergeOptions:
    """
    Switches controlling a merge run.
    """
    attribution: bool = False
    deeper: bool = False
    sort_topics: bool = False
    fold: bool = False
    debug: bool = False
    attribution_tag: str = ATTRIBUTION_TAG


class MergeSession:
    """
    Accumulates source trees into one master sheet.
    """

    def __init__(self, master: Sheet, options: Optional[MergeOptions] = None,
                 collector: Optional[ResourceCollector] = None,
                 identity: Optional[IdentityGenerator] = None):
        """
        Initialize the session.

        Args:
            master: Template sheet to merge into; its root topic must have a
                detached merge-log topic
            options: Merge switches (defaults if None)
            collector: Resource collector (a new one if None)
            identity: Id generator (a new one if None)

        Raises:
            FatalMergeError: If the master sheet has no merge-log topic
        """
        if master.root_topic is None:
            raise FatalMergeError("Template has no root topic")
        root = master.root_topic
        if root.children is None or not root.children.detached:
            raise FatalMergeError("Template root topic has no detached merge log topic")

        self.master = master
        self.options = options or MergeOptions()
        self.collector = collector or ResourceCollector()
        self.identity = identity or IdentityGenerator()
        self.log = MergeLog()
        self.merged_sources: List[str] = []

        root.ensure_attached()

    @property
    def root(self) -> Topic:
        return self.master.root_topic

    @property
    def merge_log_topic(self) -> Topic:
        return self.root.children.detached[0]

    def record_source_error(self, source_label: str, message: str) -> MergeStatus:
        """Record a source that failed before it could be merged."""
        logging.error(message)
        self.log.failure(source_label, message)
        return MergeStatus.FAILURE

    def merge_source(self, content_json: str, source_label: str,
                     archive: SourceArchive) -> MergeStatus:
        """
        Merge one source's content.json into the master sheet.

        Args:
            content_json: Raw content.json text of the source
            source_label: Source file name, used in the log and the merge summary
            archive: Source archive, for staging its resources

        Returns:
            MergeStatus.OK, WARNING if the source had no attached topics, or
            FAILURE if it could not be parsed or had no root topic
        """
        try:
            sheet = self._first_sheet(content_json)
        except (ValueError, ValidationError) as e:
            return self.record_source_error(
                source_label, f"Unable to parse JSON in '{source_label}': {e}")

        if sheet.root_topic is None:
            return self.record_source_error(source_label, f"No root topic in '{source_label}'")

        status = MergeStatus.OK
        clean = self.identity.reissue(sheet.root_topic)
        resource_count = self.collector.stage(archive, source_label)

        children = clean.children or TopicChildren()
        if self.options.attribution:
            for slot in (children.attached, children.detached):
                if slot is not None:
                    for message in annotate_topics(slot, source_label, self.options.deeper,
                                                   self.options.attribution_tag):
                        self.log.error(message, source_label)

        topic_count = 0
        if children.attached is not None:
            self.root.ensure_attached().extend(children.attached)
            topic_count += len(children.attached)
        else:
            status = MergeStatus.WARNING
            message = f"No attached subtopics found in '{source_label}'"
            logging.warning(message)
            self.log.warning(message, source_label)

        if children.detached is not None:
            self.root.children.detached.extend(children.detached)
            topic_count += len(children.detached)

        self.merge_log_topic.ensure_attached().append(
            self._summary_topic(clean.title, source_label, topic_count, resource_count))
        self.merged_sources.append(source_label)

        logging.info(f"Merged {topic_count} top-level topics and {resource_count} resources "
                     f"from {source_label}")
        return status

    def _first_sheet(self, content_json: str) -> Sheet:
        workbook: Any = json.loads(content_json)
        if not isinstance(workbook, list) or not workbook:
            raise ValueError("content is not a non-empty list of sheets")
        return Sheet.model_validate(workbook[0])

    def _summary_topic(self, title: Optional[str], source_label: str,
                       topic_count: int, resource_count: int) -> Topic:
        lines = [f"Merged {topic_count} top-level topics"]
        if resource_count > 0:
            lines.append(f"Merged {resource_count} resources")
        lines.append(f"Source file was {source_label}")
        return Topic(
            id=self.identity.new_id(),
            title=title,
            children=TopicChildren(attached=[
                Topic(id=self.identity.new_id(), title=line) for line in lines
            ]),
        )

    def finish_ingestion(self) -> None:
        """Wait for resource staging and record any resources that were lost."""
        for message in self.collector.wait():
            self.log.warning(message)
        if self.options.debug:
            logging.debug(f"Merged JSON: {json.dumps([self.master.to_json()])}")

    def consolidate(self) -> int:
        """Consolidate matching top-level topics, returning the number of consolidations."""
        return consolidate_topics(self.root, report=self.log.warning)

    def sort_topics(self) -> None:
        sort_topics(self.root)

    def fold(self) -> int:
        return fold_topics(self.root)

    def workbook_json(self) -> List[Any]:
        """The master workbook in content.json form."""
        return [self.master.to_json()]
