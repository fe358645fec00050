#!/usr/bin/env python3
"""``kymotools`` kymograph/montage runner.

Usage:
    python scripts/run_kymograph.py scripts/user_config.py --input movie.nc
    python scripts/run_kymograph.py scripts/user_config.py --input movie.nc --mode montage
    python scripts/run_kymograph.py --input movie.nc --output kymo.nc -v
"""

import sys

from kymotools.cli.run_kymograph import main


if __name__ == "__main__":
    sys.exit(main())
