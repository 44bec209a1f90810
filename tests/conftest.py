import sys
from pathlib import Path

# Make "src/" importable when running pytest from a plain checkout
SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests with no network access")
    config.addinivalue_line(
        "markers", "integration: tests against a live Perx server (TEST_PERX_* env vars)"
    )
