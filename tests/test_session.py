import json

import pytest

from mindmerge.errors import FatalMergeError
from mindmerge.merge import MergeSession
from mindmerge.models import LogSeverity, MergeStatus, Sheet
from factories import archive_for, collect_ids, plain_note, topic, workbook_json


def _merge(session, root, label, resources=None):
    return session.merge_source(workbook_json(root), label, archive_for(root, resources))


def _titles(topics):
    return [t.title for t in topics]


def test_merges_attached_and_detached_topics(make_session):
    session = make_session()
    root = topic("Source A", topic("Plan"), topic("Budget"), detached=[topic("Loose")])

    status = _merge(session, root, "a.xmind")

    assert status is MergeStatus.OK
    assert _titles(session.root.attached) == ["Plan", "Budget"]
    assert _titles(session.root.children.detached) == ["Merge Log", "Loose"]
    assert session.merged_sources == ["a.xmind"]
    assert len(session.log) == 0


def test_summary_topic_records_counts_and_source(make_session):
    session = make_session()
    root = topic("Source A", topic("Plan"), detached=[topic("Loose")])

    _merge(session, root, "a.xmind", resources={"img.png": b"x"})

    summary = session.merge_log_topic.attached[-1]
    assert summary.title == "Source A"
    assert _titles(summary.attached) == [
        "Merged 2 top-level topics",
        "Merged 1 resources",
        "Source file was a.xmind",
    ]


def test_summary_omits_resource_line_without_resources(make_session):
    session = make_session()

    _merge(session, topic("Source", topic("Plan")), "a.xmind")

    summary = session.merge_log_topic.attached[-1]
    assert _titles(summary.attached) == ["Merged 1 top-level topics", "Source file was a.xmind"]


def test_count_conservation_across_sources(make_session):
    session = make_session()
    sources = {
        "a.xmind": topic("A", topic("1"), topic("2"), detached=[topic("f1")]),
        "b.xmind": topic("B", topic("3")),
        "c.xmind": topic("C", topic("4"), detached=[topic("f2"), topic("f3")]),
    }
    for label, root in sources.items():
        _merge(session, root, label)

    top_level = len(session.root.attached) + len(session.root.children.detached) - 1
    assert top_level == 3 + 1 + 3


def test_ids_unique_and_never_from_a_source(make_session):
    session = make_session()
    root = topic("Same", topic("Plan", topic("Step")), detached=[topic("Float")])
    source_ids = set(collect_ids(root))

    _merge(session, root, "a.xmind")
    _merge(session, root, "b.xmind")

    ids = collect_ids(session.workbook_json()[0]["rootTopic"])
    assert len(ids) == len(set(ids))
    assert source_ids.isdisjoint(ids)


def test_missing_attached_is_a_warning(make_session):
    session = make_session()

    status = _merge(session, topic("Only floats", detached=[topic("Float")]), "floaty.xmind")

    assert status is MergeStatus.WARNING
    assert session.log.entries[0].severity is LogSeverity.WARNING
    assert session.log.messages() == ["No attached subtopics found in 'floaty.xmind'"]
    assert _titles(session.root.children.detached) == ["Merge Log", "Float"]
    assert _titles(session.merge_log_topic.attached[-1].attached)[0] == "Merged 1 top-level topics"


def test_malformed_attached_list_is_a_warning(make_session):
    session = make_session()
    root = {"id": "r", "title": "Odd", "children": {"attached": {"not": "a list"}}}

    assert _merge(session, root, "odd.xmind") is MergeStatus.WARNING
    assert session.root.attached == []


def test_invalid_json_is_a_failure(make_session):
    session = make_session()

    status = session.merge_source("{not json", "bad.xmind", archive_for())

    assert status is MergeStatus.FAILURE
    assert session.log.messages()[0].startswith("Unable to parse JSON in 'bad.xmind'")
    assert session.merge_log_topic.attached == []


@pytest.mark.parametrize("content", ["[]", "{}", "[42]"])
def test_unusable_workbook_is_a_failure(make_session, content):
    session = make_session()

    assert session.merge_source(content, "odd.xmind", archive_for()) is MergeStatus.FAILURE


def test_missing_root_topic_is_a_failure(make_session):
    session = make_session()

    status = session.merge_source(json.dumps([{"id": "sheet"}]), "rootless.xmind", archive_for())

    assert status is MergeStatus.FAILURE
    assert session.log.messages() == ["No root topic in 'rootless.xmind'"]


def test_only_first_sheet_is_merged(make_session):
    session = make_session()
    content = json.dumps([
        {"rootTopic": topic("First", topic("Kept"))},
        {"rootTopic": topic("Second", topic("Ignored"))},
    ])

    session.merge_source(content, "two-sheets.xmind", archive_for())

    assert _titles(session.root.attached) == ["Kept"]


def test_attribution_annotates_top_level_only_without_deeper(make_session):
    session = make_session(attribution=True)

    _merge(session, topic("A", topic("Plan", topic("Step")), detached=[topic("Float")]), "a.xmind")

    plan = session.root.attached[0]
    assert plan.notes["plain"]["content"] == "Merge-Source: a.xmind"
    assert plan.attached[0].notes is None
    assert session.root.children.detached[1].notes["plain"]["content"] == "Merge-Source: a.xmind"


def test_attribution_recurses_with_deeper(make_session):
    session = make_session(attribution=True, deeper=True)

    _merge(session, topic("A", topic("Plan", topic("Step"))), "a.xmind")

    assert session.root.attached[0].attached[0].notes["plain"]["content"] == "Merge-Source: a.xmind"


def test_attribution_problem_is_logged_not_fatal(make_session):
    session = make_session(attribution=True)
    root = topic("A", topic("Plan", notes={"plain": {"content": "x"}}))

    status = _merge(session, root, "a.xmind")

    assert status is MergeStatus.OK
    assert session.log.entries[0].severity is LogSeverity.ERROR
    assert "Unable to add to existing note in 'a.xmind'" in session.log.messages()[0]


def test_scenario_two_sources_with_consolidation(make_session):
    session = make_session(deeper=True)
    _merge(session, topic("A", topic("Plan", topic("a-step"), notes=plain_note("from a")),
                          topic("Budget")), "a.xmind")
    _merge(session, topic("B", topic("plan", topic("b-step"), notes=plain_note("from b"))), "b.xmind")

    count = session.consolidate()

    assert count == 1
    assert _titles(session.root.attached) == ["Plan", "Budget"]
    plan = session.root.attached[0]
    assert _titles(plan.attached) == ["a-step", "b-step"]
    assert plan.notes["plain"]["content"] == "from a\nfrom b"
    assert len(session.merge_log_topic.attached) == 2


def test_consolidation_warning_lands_in_log(make_session):
    session = make_session(deeper=True)
    _merge(session, topic("A", topic("Plan", notes={"plain": {"content": "x"}})), "a.xmind")
    _merge(session, topic("B", topic("plan", notes=plain_note("y"))), "b.xmind")

    session.consolidate()

    assert session.log.entries[-1].severity is LogSeverity.WARNING
    assert "possible note data loss" in session.log.messages()[-1]


def test_finish_ingestion_waits_for_resources(make_session):
    session = make_session()
    _merge(session, topic("A", topic("Plan")), "a.xmind",
           resources={f"r{i}.bin": b"x" * 2048 for i in range(10)})

    session.finish_ingestion()

    assert session.collector.pending() == []
    assert len(list(session.collector.staged())) == 10


def test_template_without_merge_log_is_fatal(collector):
    sheet = Sheet.model_validate({"rootTopic": topic("Root", topic("A"))})

    with pytest.raises(FatalMergeError):
        MergeSession(sheet, collector=collector)
