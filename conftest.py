# Ensure project root is on sys.path so 'ircpipe' is importable when running pytest from
# environments that don't automatically include it.
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).parent.resolve()
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def reset_error_tally():
    """Start every test with an empty structured-error tally."""
    from ircpipe.logging_config import error_tally

    error_tally.reset()
    yield
    error_tally.reset()
