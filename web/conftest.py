# Makes 'gateway' and 'apps' (inside web/) importable before collection
import sys
import pytest
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent  # .../web
p = str(BASE_DIR)
if p not in sys.path:
    sys.path.insert(0, p)

@pytest.fixture(autouse=True)
def use_stubs_for_tests(settings):
    settings.USE_HTTP_ADAPTERS = False
    settings.PAYMENTS_BASE_URL = "http://payments:9002"
    settings.HTTP_TIMEOUT_SECS = 1.0

@pytest.fixture(autouse=True)
def reset_throttles():
    # DRF throttle history lives in the default cache
    from django.core.cache import cache
    cache.clear()
