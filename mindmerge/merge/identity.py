"""
Topic identifier reissuance.

Every tree merged into the master gets brand new ids, so two sources (or the
same source merged twice) can never collide.
"""

import uuid
from typing import Dict

from ..models import Topic


class IdentityGenerator:
    """
    Issues fresh topic ids and rewrites whole trees with them.
    """

    def new_id(self) -> str:
        return str(uuid.uuid4())

    def reissue(self, topic: Topic) -> Topic:
        """
        Return a copy of topic where every id in the tree is freshly issued.

        Walks the topic's own id, all child slots recursively, and the ids
        of boundaries and summaries. Summary ``topicId`` links are remapped
        to the new ids of the topics they point at.
        """
        clean = topic.model_copy(deep=True)
        id_map: Dict[str, str] = {}
        self._visit(clean, id_map)
        self._relink_summaries(clean, id_map)
        return clean

    def _visit(self, topic: Topic, id_map: Dict[str, str]) -> None:
        new_id = self.new_id()
        if topic.id is not None:
            id_map[topic.id] = new_id
        topic.id = new_id

        for extra in (topic.boundaries, topic.summaries):
            for item in extra or []:
                if "id" in item:
                    item["id"] = self.new_id()

        if topic.children is not None:
            for slot in topic.children.topic_slots():
                for child in slot:
                    self._visit(child, id_map)

    def _relink_summaries(self, topic: Topic, id_map: Dict[str, str]) -> None:
        for item in topic.summaries or []:
            old = item.get("topicId")
            if old in id_map:
                item["topicId"] = id_map[old]
        if topic.children is not None:
            for slot in topic.children.topic_slots():
                for child in slot:
                    self._relink_summaries(child, id_map)
