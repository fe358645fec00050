"""
Directory setup for kymograph and montage output.

    <base>/kymographs/   projected kymographs (NetCDF)
    <base>/montages/     montage canvases (NetCDF)
    <base>/logs/         run logs
"""

import logging
from pathlib import Path
from typing import Dict, Union

logger = logging.getLogger(__name__)

OUTPUT_SUBDIRS = ("kymographs", "montages", "logs")


def setup_output_directories(base_output_dir: Union[str, Path]) -> Dict[str, Path]:
    """
    Create the output directory tree.

    Parameters
    ----------
    base_output_dir : str or Path
        Base output directory; ``~`` is expanded.

    Returns
    -------
    dict
        Paths keyed by 'base', 'kymographs', 'montages', 'logs'.
    """
    base_output_dir = Path(base_output_dir).expanduser().resolve()

    directories = {"base": base_output_dir}
    for name in OUTPUT_SUBDIRS:
        directories[name] = base_output_dir / name

    for path in directories.values():
        path.mkdir(parents=True, exist_ok=True)

    logger.debug("Output directories ready under %s", base_output_dir)
    return directories


def get_output_path(output_dirs: Dict[str, Path], mode: str, source_name: str) -> Path:
    """Default output file for a build: ``<base>/<mode>s/<source>_<mode>.nc``."""
    stem = Path(source_name).stem or "volume"
    return output_dirs[f"{mode}s"] / f"{stem}_{mode}.nc"
