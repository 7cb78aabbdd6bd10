import sys
from pathlib import Path


# Tests import the flat modules under backend/src (config, models, services.*) without installing.
ROOT = Path(__file__).resolve().parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
