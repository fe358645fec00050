"""CLIConfig: Command-line operational overrides.

Minimal configuration for operational parameters that commonly change
between runs: mode, input/output paths, molecule, threads, verbosity.
"""

from typing import Literal, Optional

from pydantic import Field

from kymotools.schemas.base import KymoBaseModel


class CLIConfig(KymoBaseModel):
    """Command-line configuration overrides.

    Operational-only settings that override user and param configs.
    Highest priority in config resolution.

    Usage
    -----
        cli_cfg = CLIConfig(
            mode="montage",
            input_path="movie.nc",
            output_path="montage.nc",
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    mode: Optional[Literal["kymograph", "montage"]] = None
    input_path: Optional[str] = None
    output_path: Optional[str] = None
    base_dir: Optional[str] = None
    molecule: Optional[str] = None
    threads: Optional[int] = Field(None, ge=1)
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None

    def to_internal_overrides(self) -> dict:
        """Convert CLI config to internal config structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        if self.mode is not None:
            overrides["mode"] = self.mode
        if self.input_path is not None:
            overrides["input_path"] = str(self.input_path)
        if self.output_path is not None:
            overrides["output_path"] = str(self.output_path)
        if self.base_dir is not None:
            overrides["output"] = {"base_dir": str(self.base_dir)}
        if self.molecule is not None:
            overrides["region"] = {"molecule": self.molecule}
        if self.threads is not None:
            overrides["pipeline"] = {"threads": self.threads}
        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
