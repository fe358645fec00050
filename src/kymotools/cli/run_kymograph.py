"""Core kymograph/montage execution logic.

This module contains the actual runner, separated from argument parsing.
Scripts are thin wrappers; this is the real implementation.
"""

import argparse
import importlib.util
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from kymotools.contracts.failure import ConfigurationError, KymoError
from kymotools.kymograph.builder import KymographBuilder
from kymotools.montage.builder import MontageBuilder
from kymotools.schemas import CLIConfig, ParamConfig, UserConfig, resolve_config
from kymotools.setup_directories import get_output_path, setup_output_directories
from kymotools.volume.io import load_volume, save_volume

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'


def load_user_config_dict(config_path: str) -> dict:
    """Load user config dict from Python file.

    Returns the raw dict before Pydantic validation.

    Parameters
    ----------
    config_path : str
        Path to user config Python file containing CONFIG dict.

    Returns
    -------
    dict
        Raw user configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ValueError
        If no CONFIG dict found in file.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    spec = importlib.util.spec_from_file_location("config_module", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    # Find CONFIG dict
    for name in dir(module):
        if name.startswith('CONFIG'):
            obj = getattr(module, name)
            if isinstance(obj, dict):
                return obj

    raise ValueError(f"No CONFIG dict found in {path}")


def setup_logging(level: str = "INFO", log_path: Optional[Path] = None) -> None:
    """Configure the root logger with a console handler and optional file handler."""
    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    # Clear existing handlers and add new ones
    root = logging.getLogger()
    root.setLevel(log_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    if log_path is not None:
        fh = logging.FileHandler(log_path)
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        root.addHandler(fh)

    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    root.addHandler(ch)


def run_kymograph_pipeline(
    user_config_path: Optional[str] = None,
    cli_args: Optional[Dict[str, Any]] = None,
    verbose: bool = False,
    configure_logging: bool = True,
) -> Optional[Path]:
    """Build a kymograph or montage from a NetCDF volume and save it.

    Steps:
    1. Load and resolve configuration (Param < User < CLI)
    2. Set up output directories and logging
    3. Load the input volume
    4. Run KymographBuilder or MontageBuilder
    5. Save the result as NetCDF

    Parameters
    ----------
    user_config_path : str, optional
        Path to user config file (Python file with CONFIG dict).
    cli_args : dict, optional
        CLI overrides. Keys: mode, input_path, output_path, base_dir,
        molecule, threads, log_level. All optional.
    verbose : bool, optional
        Log the full resolved config.
    configure_logging : bool, optional
        Install root log handlers (disable when embedding).

    Returns
    -------
    Path or None
        The written file, or None when the build reported an error.

    Raises
    ------
    FileNotFoundError
        If the config or input file does not exist.
    ConfigurationError
        If no input file is configured, or a kymograph has no path.
    ValidationError
        If configuration validation fails.
    """
    user_cfg = {}
    if user_config_path is not None:
        user_cfg = UserConfig.model_validate(load_user_config_dict(user_config_path))
    cli_cfg = CLIConfig.model_validate(cli_args or {})
    config = resolve_config(ParamConfig(), user_cfg, cli_cfg)

    output_dirs = setup_output_directories(config.output.base_dir)
    if configure_logging:
        log_path = output_dirs["logs"] / f"kymotools_{config.mode}.log" if config.logging.log_file else None
        setup_logging(config.logging.level, log_path)

    logger.info("=" * 60)
    logger.info("kymotools %s build", config.mode)
    logger.info("=" * 60)
    if verbose:
        logger.info("Resolved configuration:\n%s", json.dumps(config.model_dump(), indent=2, default=str))

    if config.input_path is None:
        raise ConfigurationError("No input volume configured (INPUT_PATH or --input)")
    source = load_volume(config.input_path)

    if config.mode == "kymograph":
        if not config.kymograph.path:
            raise ConfigurationError("Kymograph mode needs PATH vertices")
        builder = KymographBuilder.from_config(config).set_source(source)
    else:
        builder = MontageBuilder.from_config(config).set_source(source)

    result = builder.build()
    if result is None:
        logger.error("No %s produced: %s", config.mode, builder.last_error)
        return None

    out_path = Path(config.output_path) if config.output_path else get_output_path(
        output_dirs, config.mode, config.input_path
    )
    save_volume(result, out_path, engine=config.output.engine)
    logger.info("Wrote %s", out_path)
    return out_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Build a kymograph or montage from an image volume")
    parser.add_argument("config", nargs="?", help="Path to user config file")
    parser.add_argument("--mode", choices=["kymograph", "montage"], help="Override mode")
    parser.add_argument("--input", dest="input_path", help="Input NetCDF volume")
    parser.add_argument("--output", dest="output_path", help="Output NetCDF file")
    parser.add_argument("--base-dir", help="Output directory")
    parser.add_argument("--molecule", help="Molecule UID")
    parser.add_argument("--threads", type=int, help="Filter worker threads")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    cli_args = {
        k: v
        for k, v in {
            "mode": args.mode,
            "input_path": args.input_path,
            "output_path": args.output_path,
            "base_dir": args.base_dir,
            "molecule": args.molecule,
            "threads": args.threads,
            "log_level": "DEBUG" if args.verbose else None,
        }.items()
        if v is not None
    }

    try:
        out_path = run_kymograph_pipeline(args.config, cli_args, verbose=args.verbose)
    except (KymoError, FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 1
    return 0 if out_path is not None else 1


if __name__ == "__main__":
    sys.exit(main())
