from mindmerge.merge import annotate_topics
from mindmerge.models import Topic
from factories import plain_note, topic


def _topics(*raw):
    return [Topic.model_validate(item) for item in raw]


def test_topic_without_notes_gets_fresh_note():
    topics = _topics(topic("Plan"))

    errors = annotate_topics(topics, "file.ext", recursive=False)

    notes = topics[0].notes
    assert errors == []
    assert notes["plain"]["content"] == "Merge-Source: file.ext"
    assert notes["ops"]["ops"] == [{"insert": "Merge-Source: file.ext\n"}]
    assert notes["html"]["content"]["paragraphs"] == [{"spans": [{"text": "Merge-Source: file.ext"}]}]


def test_existing_note_is_appended():
    topics = _topics(topic("Plan", notes=plain_note("X")))

    annotate_topics(topics, "file.ext", recursive=False)

    notes = topics[0].notes
    assert notes["plain"]["content"] == "X\nMerge-Source: file.ext"
    assert notes["ops"]["ops"][-1] == {"insert": "Merge-Source: file.ext\n"}
    assert notes["html"]["content"]["paragraphs"][-1] == {"spans": [{"text": "Merge-Source: file.ext"}]}


def test_ops_only_appended_when_present():
    topics = _topics(topic("Plan", notes=plain_note("X", with_ops=False)))

    annotate_topics(topics, "file.ext", recursive=False)

    assert "ops" not in topics[0].notes
    assert topics[0].notes["plain"]["content"] == "X\nMerge-Source: file.ext"


def test_non_recursive_leaves_descendants_alone():
    topics = _topics(topic("Plan", topic("Child")))

    annotate_topics(topics, "a.xmind", recursive=False)

    assert topics[0].notes is not None
    assert topics[0].attached[0].notes is None


def test_recursive_covers_attached_and_detached_descendants():
    topics = _topics(topic("Plan", topic("Child", topic("Grandchild")), detached=[topic("Float")]))

    annotate_topics(topics, "a.xmind", recursive=True)

    plan = topics[0]
    assert plan.attached[0].notes["plain"]["content"] == "Merge-Source: a.xmind"
    assert plan.attached[0].attached[0].notes["plain"]["content"] == "Merge-Source: a.xmind"
    assert plan.children.detached[0].notes["plain"]["content"] == "Merge-Source: a.xmind"


def test_malformed_note_is_reported_and_left_unchanged():
    broken = {"plain": {"content": "X"}, "html": {"content": "not paragraphs"}}
    topics = _topics(topic("Broken", notes=broken), topic("Fine"))

    errors = annotate_topics(topics, "b.xmind", recursive=False)

    assert len(errors) == 1
    assert "Unable to add to existing note in 'b.xmind'" in errors[0]
    assert topics[0].notes == broken
    assert topics[1].notes["plain"]["content"] == "Merge-Source: b.xmind"


def test_custom_tag():
    topics = _topics(topic("Plan"))
    annotate_topics(topics, "c.xmind", recursive=False, tag="From: ")
    assert topics[0].notes["plain"]["content"] == "From: c.xmind"
