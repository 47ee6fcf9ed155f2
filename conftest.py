"""Make ``stronghold_bot`` importable when pytest runs from a checkout."""

import sys
from pathlib import Path

# ``python -m pytest`` puts the working directory on ``sys.path`` but the bare
# ``pytest`` entry point does not.
ROOT_DIR = str(Path(__file__).resolve().parent)
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)
