"""Test configuration.

Ensures the project root is importable so that the `paging`, `discovery` and
`api` packages can be imported when running tests where CWD may not be on
`sys.path` by default, and provides shared fixtures.
"""

from pathlib import Path
import sys

import pytest


def _ensure_project_root_on_path() -> None:
    project_root = Path(__file__).resolve().parent.parent
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))


_ensure_project_root_on_path()

from shared.scheduler import VirtualScheduler  # noqa: E402

from fakes import RecordingTracker, ScriptedApi  # noqa: E402


@pytest.fixture()
def api() -> ScriptedApi:
    return ScriptedApi()


@pytest.fixture()
def scheduler() -> VirtualScheduler:
    return VirtualScheduler()


@pytest.fixture()
def tracking() -> RecordingTracker:
    return RecordingTracker()
