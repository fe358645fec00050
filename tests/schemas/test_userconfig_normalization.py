"""UserConfig alias handling and normalization."""

import pytest
from pydantic import ValidationError

from kymotools.schemas import ParamConfig, UserConfig, resolve_config
from kymotools.schemas.user import filter_spec_dict, reduction_spec_dict

pytestmark = pytest.mark.unit


class TestUserConfigAliases:
    """Test UserConfig flat aliases map correctly."""

    def test_filter_alias(self, make_config):
        """FILTER_METHOD + FILTER_SIZE map to pipeline.filter.spec."""
        config = make_config(FILTER_METHOD="Median", FILTER_SIZE=2)

        assert config.pipeline.filter.spec.method == "median"
        assert config.pipeline.filter.spec.radius == 2

    @pytest.mark.parametrize("name,method", [
        ("avg", "average"), ("mean", "average"), ("skip_frames", "skip"),
        ("SUM", "sum"), ("all", "none"),
    ])
    def test_reduction_spellings(self, make_config, name, method):
        """Common reduction spellings resolve to the canonical method."""
        config = make_config(REDUCTION_METHOD=name, REDUCTION_FACTOR=3)

        assert config.pipeline.reduction.method == method

    def test_reduction_factor_goes_to_group(self, make_config):
        config = make_config(REDUCTION_METHOD="average", REDUCTION_FACTOR=4)

        assert config.pipeline.reduction.group == 4

    def test_unknown_filter_rejected(self):
        with pytest.raises(ValidationError, match="Unknown filter"):
            UserConfig(FILTER_METHOD="bilateral")

    def test_channel_filters(self, make_config):
        """CHANNEL_FILTERS builds per-channel specs keyed by 0-based index."""
        config = make_config(CHANNEL_FILTERS={1: {"method": "gauss", "size": 1.5}})

        channels = config.pipeline.filter.channels
        assert set(channels) == {1}
        assert channels[1].method == "gaussian"
        assert channels[1].sigma == 1.5
        assert config.pipeline.filter.per_channel

    def test_layout_alias(self, make_config):
        config = make_config(LAYOUT="Vertical", COLUMNS=2)

        assert config.montage.horizontal_layout is False
        assert config.montage.columns == 2

    def test_path_alias(self, make_config):
        config = make_config(PATH=[[0, 0], [10, 5]])

        assert config.kymograph.path == [(0.0, 0.0), (10.0, 5.0)]

    def test_region_aliases(self, make_config):
        config = make_config(MOLECULE="m1", BORDER_WIDTH=4, BORDER_HEIGHT=6)

        assert config.region.molecule == "m1"
        assert config.region.border_width == 4
        assert config.region.border_height == 6

    def test_unknown_keys_ignored(self):
        """Legacy or unrelated keys in a user file are ignored."""
        user = UserConfig.model_validate({"WIDTH": 3, "SOMETHING_ELSE": 1})

        assert user.width == 3

    def test_nested_pipeline_wins_over_flat(self):
        """Explicit nested pipeline values override flat aliases."""
        user = UserConfig.model_validate({"THREADS": 2, "pipeline": {"threads": 4}})
        config = resolve_config(ParamConfig(), user)

        assert config.pipeline.threads == 4


class TestSpecHelpers:

    def test_filter_spec_dict_sizes(self):
        assert filter_spec_dict("median", 2) == {"method": "median", "radius": 2}
        assert filter_spec_dict("gaussian", 2) == {"method": "gaussian", "sigma": 2.0}
        assert filter_spec_dict("none", 5) == {"method": "none"}

    def test_reduction_spec_dict_sizes(self):
        assert reduction_spec_dict("skip", 2) == {"method": "skip", "factor": 2}
        assert reduction_spec_dict("sum", 3) == {"method": "sum", "group": 3}

    def test_unknown_names(self):
        with pytest.raises(ValueError):
            filter_spec_dict("sobel")
        with pytest.raises(ValueError):
            reduction_spec_dict("max")
