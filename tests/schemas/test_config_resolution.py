"""Test config resolution and validation with Pydantic."""

import pytest
from pydantic import ValidationError

from kymotools.schemas import InternalConfig, ParamConfig, UserConfig
from kymotools.schemas.resolve import deep_merge, resolve_config

pytestmark = pytest.mark.unit


class TestConfigResolution:
    """Test resolve_config() precedence and merging."""

    def test_resolve_config_all_defaults(self, internal_config):
        """Resolving with no user/CLI overrides uses all ParamConfig defaults."""
        assert isinstance(internal_config, InternalConfig)
        assert internal_config.mode == "kymograph"
        assert internal_config.kymograph.width == 1
        assert internal_config.pipeline.reduction.method == "none"
        assert internal_config.pipeline.filter.is_noop
        assert internal_config.montage.columns == -1
        assert internal_config.region.border_width == 10

    def test_user_config_overrides_param_config(self, make_config):
        """UserConfig values override ParamConfig defaults."""
        config = make_config(WIDTH=5, SPACING=2)

        assert config.kymograph.width == 5
        assert config.montage.spacing == 2

    def test_dict_inputs_are_validated(self):
        """Plain dicts are accepted for every layer."""
        config = resolve_config({}, {"MODE": "montage"}, {"threads": 3})

        assert config.mode == "montage"
        assert config.pipeline.threads == 3

    def test_internal_config_is_frozen(self, internal_config):
        """InternalConfig cannot be mutated after resolution."""
        with pytest.raises(ValidationError):
            internal_config.mode = "montage"

    def test_invalid_time_bounds_rejected(self, make_config):
        """min_t after max_t fails validation of the pipeline section."""
        with pytest.raises(ValidationError, match="min_t"):
            make_config(MIN_T=5, MAX_T=2)

    def test_invalid_width_rejected(self, make_config):
        with pytest.raises(ValidationError):
            make_config(WIDTH=0)


class TestTaggedSpecMerge:
    """Filter and reduction specs are replaced whole, never merged key by key."""

    def test_switching_filter_method_drops_old_fields(self):
        """A gaussian override does not inherit the median's radius."""
        param = ParamConfig.model_validate(
            {"pipeline": {"filter": {"spec": {"method": "median", "radius": 3}}}}
        )
        config = resolve_config(param, UserConfig(FILTER_METHOD="gaussian", FILTER_SIZE=2))

        spec = config.pipeline.filter.spec
        assert spec.method == "gaussian"
        assert spec.sigma == 2.0
        assert not hasattr(spec, "radius")

    def test_deep_merge_nested(self):
        base = {"a": 1, "b": {"c": 2, "d": 3}}
        override = {"b": {"d": 4, "e": 5}, "f": 6}

        assert deep_merge(base, override) == {"a": 1, "b": {"c": 2, "d": 4, "e": 5}, "f": 6}

    def test_deep_merge_replaces_tagged(self):
        base = {"spec": {"method": "median", "radius": 2}}
        merged = deep_merge(base, {"spec": {"method": "none"}})

        assert merged == {"spec": {"method": "none"}}

    def test_deep_merge_does_not_mutate_base(self):
        base = {"b": {"c": 1}}
        deep_merge(base, {"b": {"c": 2}})

        assert base == {"b": {"c": 1}}
