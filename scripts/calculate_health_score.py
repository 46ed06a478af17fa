#!/usr/bin/env python3
"""
Calculate the project health score from a measurements file.

Usage:
    python scripts/calculate_health_score.py --measurements measurements.json
    python scripts/calculate_health_score.py --measurements m.json --hierarchy h.yaml --strict
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Configure logging first (before importing other modules)
from healthscore.core.logging import configure_logging

configure_logging()

from healthscore.cli import main


if __name__ == "__main__":
    sys.exit(main())
