import sys
from pathlib import Path

import pytest

# Add repo root to path
ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from fractal_explorer import ViewState  # noqa: E402


@pytest.fixture
def default_view():
    return ViewState()
