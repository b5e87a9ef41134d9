from unittest.mock import MagicMock

import pytest

from clip_notes.config import Settings
from clip_notes.models import Clip
from clip_notes.playback import PlaybackController


def make_clips(*spans):
    return [
        Clip(id=f"clip-{i}", start_time=start, end_time=end, text=f"Clip {i + 1}")
        for i, (start, end) in enumerate(spans)
    ]


@pytest.fixture
def surface():
    """Mock Video Surface parked at 0s."""
    s = MagicMock()
    s.get_current_time.return_value = 0.0
    s.get_duration.return_value = 60.0
    return s


@pytest.fixture
def two_clips():
    return make_clips((0.0, 10.0), (20.0, 30.0))


@pytest.fixture
def controller(surface, two_clips):
    return PlaybackController(surface, two_clips, Settings())


def seek_targets(surface):
    return [c.args[0] for c in surface.seek_to.call_args_list]
