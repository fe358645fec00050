"""NetCDF persistence for labeled volumes."""

import logging
from pathlib import Path
from typing import Union

import xarray as xr

from kymotools.volume.labeled import LabeledVolume

__all__ = ["save_volume", "load_volume"]

logger = logging.getLogger(__name__)


def save_volume(volume: LabeledVolume, path: Union[str, Path],
                engine: str = "netcdf4") -> Path:
    """Write ``volume`` to NetCDF, keeping axis names and calibration.

    Returns
    -------
    Path
        The written file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    da = volume.to_dataarray()
    # NetCDF variable names cannot carry the display name's whitespace
    ds = da.to_dataset(name="_".join(str(da.name).split()))
    ds.attrs["volume_name"] = volume.name
    ds.to_netcdf(path, engine=engine)
    logger.info("Saved %s to %s", volume, path)
    return path


def load_volume(path: Union[str, Path], variable: str = None,
                engine: str = "netcdf4") -> LabeledVolume:
    """Read a volume written by save_volume (or any NetCDF with Axis-named dims).

    Parameters
    ----------
    path : str or Path
        NetCDF file.
    variable : str, optional
        Data variable to read. Defaults to the only variable in the file.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    ValueError
        If ``variable`` is omitted and the file holds several variables.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Volume not found: {path}")

    # calibration units such as "seconds" must stay plain attrs
    with xr.open_dataset(path, engine=engine, decode_times=False,
                         decode_timedelta=False) as ds:
        if variable is None:
            names = list(ds.data_vars)
            if len(names) != 1:
                raise ValueError(
                    f"{path} holds {len(names)} variables, pass variable= to choose"
                )
            variable = names[0]
        da = ds[variable].load()
        name = ds.attrs.get("volume_name", variable)

    volume = LabeledVolume.from_dataarray(da.rename(name))
    logger.debug("Loaded %s from %s", volume, path)
    return volume
