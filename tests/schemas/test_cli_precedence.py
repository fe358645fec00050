import pytest
from pydantic import ValidationError

from kymotools.schemas.cli import CLIConfig
from kymotools.schemas.param import ParamConfig
from kymotools.schemas.resolve import resolve_config
from kymotools.schemas.user import UserConfig

pytestmark = pytest.mark.unit


def test_cli_overrides_do_not_mutate_user():
    user = UserConfig.model_validate({"MOLECULE": "a", "MODE": "kymograph", "BASE_DIR": "/tmp"})

    cli = CLIConfig.model_validate({"molecule": "b"})

    internal = resolve_config(ParamConfig(), user, cli)

    # CLI should take precedence
    assert internal.region.molecule == "b"

    # But the original user model should remain unchanged
    assert user.molecule == "a"


def test_cli_mode_override_keeps_user_values():
    """CLI mode wins, other user values are preserved."""
    user = UserConfig(BASE_DIR="/tmp/out", MODE="kymograph", WIDTH=3)
    cli = CLIConfig(mode="montage")

    config = resolve_config(ParamConfig(), user, cli)

    assert config.mode == "montage"
    assert config.kymograph.width == 3
    assert config.output.base_dir == "/tmp/out"


def test_cli_threads_merge_into_pipeline():
    """CLI threads override without discarding the user's filter."""
    user = UserConfig(FILTER_METHOD="median", THREADS=2)
    cli = CLIConfig(threads=8)

    config = resolve_config(ParamConfig(), user, cli)

    assert config.pipeline.threads == 8
    assert config.pipeline.filter.spec.method == "median"


def test_cli_log_level():
    config = resolve_config(ParamConfig(), None, CLIConfig(log_level="DEBUG"))

    assert config.logging.level == "DEBUG"


def test_cli_rejects_bad_threads():
    with pytest.raises(ValidationError):
        CLIConfig(threads=0)


def test_cli_precedence_no_user_config():
    cli = CLIConfig(input_path="movie.nc", output_path="out.nc")

    config = resolve_config(ParamConfig(), None, cli)

    assert config.input_path == "movie.nc"
    assert config.output_path == "out.nc"
    assert config.kymograph.width == 1
