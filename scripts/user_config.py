"""kymotools User Configuration.

This is the user-facing configuration file. Modify settings here to customize
the build. Expert defaults live in kymotools.schemas.param.ParamConfig.

Usage:
    python scripts/run_kymograph.py scripts/user_config.py
    python scripts/run_kymograph.py scripts/user_config.py --input movie.nc
    python scripts/run_kymograph.py scripts/user_config.py --mode montage
"""

CONFIG = {
    # ========================================================================
    # MODE & FILES
    # ========================================================================
    "MODE": "kymograph",      # "kymograph" or "montage"
    "INPUT_PATH": None,       # NetCDF volume with x/y/time[/channel] dims
    "OUTPUT_PATH": None,      # None = <BASE_DIR>/<mode>s/<input>_<mode>.nc
    "BASE_DIR": "./output",

    # ========================================================================
    # KYMOGRAPH SETTINGS
    # ========================================================================
    "PATH": [(5.0, 10.0), (15.0, 10.0)],  # polyline vertices (x, y) in pixels
    "WIDTH": 3,               # band width perpendicular to the path

    # ========================================================================
    # FRAME SETTINGS
    # ========================================================================
    "MIN_T": None,            # first frame (None = 0)
    "MAX_T": None,            # last frame (None = last)
    "REDUCTION_METHOD": "none",  # "none", "skip", "average" or "sum"
    "REDUCTION_FACTOR": 1,

    # ========================================================================
    # FILTER SETTINGS
    # ========================================================================
    "FILTER_METHOD": "none",  # "none", "median", "gaussian" or "tophat"
    "FILTER_SIZE": 1,         # radius (median/tophat) or sigma (gaussian)
    # Per-channel filters replace the global one, e.g.
    # "CHANNEL_FILTERS": {1: {"method": "tophat", "size": 3}},
    "RESOLUTION_FACTOR": 1.0,
    "VERTICAL_REFLECTION": False,
    "HORIZONTAL_REFLECTION": False,
    "THREADS": 1,

    # ========================================================================
    # MONTAGE SETTINGS
    # ========================================================================
    "SPACING": 2,
    "COLUMNS": -1,            # -1 = derive from LAYOUT
    "LAYOUT": "horizontal",   # "horizontal" or "vertical"
}
