import pytest

from boxgrid.core.models import Box, Layout
from boxgrid.infra.config import EditorSettings


class RecordingPersistence:
    def __init__(self) -> None:
        self.saved: list[Layout] = []

    def save_layout(self, layout: Layout) -> None:
        self.saved.append(layout)


@pytest.fixture
def settings() -> EditorSettings:
    return EditorSettings()


@pytest.fixture
def box_a() -> Box:
    return Box(id="a", title="A", x=0, y=0, w=4, h=4)


@pytest.fixture
def box_b() -> Box:
    return Box(id="b", title="B", x=10, y=0, w=4, h=4)


@pytest.fixture
def two_box_layout(box_a: Box, box_b: Box) -> Layout:
    return Layout(name="Board", boxes=(box_a, box_b))


@pytest.fixture
def persistence() -> RecordingPersistence:
    return RecordingPersistence()


@pytest.fixture(autouse=True)
def _clean_boxgrid_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (
        "BOXGRID_MIN_BOX_SIZE",
        "BOXGRID_DRAG_THRESHOLD_PX",
        "BOXGRID_DEFAULT_BOX_WIDTH",
        "BOXGRID_DEFAULT_BOX_HEIGHT",
        "BOXGRID_HANDLE_RADIUS_PX",
        "BOXGRID_LOG_LEVEL",
        "BOXGRID_LOG_FILE",
        "LOG_LEVEL",
        "LOG_FORMAT",
    ):
        # setenv first so keys written by env-file loaders are removed on teardown.
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
