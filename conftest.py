import os
import sys
from pathlib import Path

import pytest

# Ensure repo root on sys.path for imports from anywhere in tests tree.
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("CHOREO_LOG_LEVEL", "DEBUG")

from choreo.animator.ticker import set_animator  # noqa: E402
from choreo.choreography.action_library import set_action_library  # noqa: E402
from choreo.logging.event_log import set_event_logger  # noqa: E402
from choreo.pose_kernel.library import set_pose_library  # noqa: E402


@pytest.fixture(autouse=True)
def reset_process_defaults():
    """Drop process-wide singletons so each test starts from the built-in libraries."""
    yield
    set_animator(None)
    set_pose_library(None)
    set_action_library(None)
    set_event_logger(None)
