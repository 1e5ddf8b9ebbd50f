import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parent.parent))

from sortedsearch import observability


@pytest.fixture(autouse=True)
def _fresh_counters():
    # Counters are process-wide; start every test from zero.
    observability.reset_counters()
    yield
    observability.reset_counters()
