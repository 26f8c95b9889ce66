# Points the service at a throwaway SQLite file and makes 'main' / 'repo'
# importable before collection
import os
import sys
import tempfile
from pathlib import Path

SERVICE_DIR = Path(__file__).resolve().parent  # .../services/payments
p = str(SERVICE_DIR)
if p not in sys.path:
    sys.path.insert(0, p)

os.environ["DATABASE_URL"] = f"sqlite:///{tempfile.mkdtemp()}/payments.db"
