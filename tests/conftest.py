import pytest

from mindmerge.config import DEFAULT_TEMPLATE_DIR
from mindmerge.merge import MergeOptions, MergeSession, ResourceCollector
from mindmerge.models import Sheet
from mindmerge.writer import load_template_sheet


@pytest.fixture
def collector(tmp_path):
    scratch_parent = tmp_path / "scratch"
    scratch_parent.mkdir()
    with ResourceCollector(str(scratch_parent), max_workers=2) as resource_collector:
        yield resource_collector


@pytest.fixture
def template_sheet() -> Sheet:
    return load_template_sheet(DEFAULT_TEMPLATE_DIR)


@pytest.fixture
def make_session(template_sheet, collector):
    def _make(**option_values):
        return MergeSession(template_sheet, MergeOptions(**option_values), collector=collector)
    return _make
