#!/usr/bin/env python3
"""Check stored fiscal configuration JSON files from a source checkout.

Usage: ``scripts/validate_config.py saved-config.json [...]``. Exit status is
non-zero when any file fails to load or reports an issue.
"""

from __future__ import annotations

import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from fiscaltracker.config.validator import main  # noqa: E402


if __name__ == "__main__":
    raise SystemExit(main())
