"""RegionBuilder tests."""

import numpy as np
import pytest

from kymotools.contracts import ConfigurationError, FailurePolicy, TypeMismatchError
from kymotools.regions import (
    ArraySourceProvider,
    ChannelSource,
    LineShape,
    MoleculeArchive,
    MoleculeRecord,
    PolygonShape,
    RegionBuilder,
)
from kymotools.volume import Axis

pytestmark = pytest.mark.unit


@pytest.fixture
def archive():
    return MoleculeArchive([
        MoleculeRecord(uid="line", metadata_uid="movie",
                       line=LineShape(x1=4, y1=5, x2=8, y2=5),
                       shapes={0: PolygonShape(xs=(0,), ys=(0,))}),
        MoleculeRecord(uid="shapes", metadata_uid="movie",
                       shapes={1: PolygonShape(xs=(3, 6), ys=(2, 4))}),
        MoleculeRecord(uid="bare", metadata_uid="movie"),
        MoleculeRecord(uid="mixed", metadata_uid="mixed",
                       line=LineShape(x1=1, y1=1, x2=5, y2=1)),
    ])


@pytest.fixture
def provider():
    provider = ArraySourceProvider()
    provider.register("movie", [ChannelSource("c0", stack=np.ones((3, 12, 12), dtype=np.uint16))])
    provider.register("mixed", [
        ChannelSource("a", stack=np.ones((3, 12, 12), dtype=np.uint16)),
        ChannelSource("b", stack=np.ones((3, 12, 12), dtype=np.float32)),
    ])
    return provider


class TestRegionBuilder:

    def test_line_preferred_over_shapes(self, archive, provider):
        builder = RegionBuilder(archive, provider, border_width=2, border_height=1)
        interval = builder.set_molecule("line").interval()
        assert (interval.min_x, interval.min_y, interval.max_x, interval.max_y) == (2, 4, 10, 6)

    def test_shapes_used_without_line(self, archive, provider):
        interval = RegionBuilder(archive, provider, 0, 0).set_molecule("shapes").interval()
        assert (interval.min_x, interval.min_y, interval.max_x, interval.max_y) == (3, 2, 6, 4)

    def test_fetch(self, archive, provider):
        volume = (RegionBuilder(archive, provider)
                  .set_border_width(1)
                  .set_border_height(1)
                  .set_molecule("line")
                  .fetch(min_t=1))
        assert volume.size(Axis.TIME) == 2
        assert volume.size(Axis.X) == 7
        assert volume.size(Axis.Y) == 3

    def test_no_molecule(self, archive, provider):
        with pytest.raises(ConfigurationError, match="No molecule"):
            RegionBuilder(archive, provider).fetch()

    def test_no_geometry(self, archive, provider):
        with pytest.raises(ConfigurationError, match="neither a line nor shapes"):
            RegionBuilder(archive, provider).set_molecule("bare").interval()

    def test_build_reports(self, archive, provider):
        builder = RegionBuilder(archive, provider).set_molecule("mixed")
        assert builder.build() is None
        assert isinstance(builder.last_error, TypeMismatchError)

    def test_build_raise_policy(self, archive, provider):
        builder = RegionBuilder(archive, provider, policy=FailurePolicy.RAISE).set_molecule("nope")
        with pytest.raises(ConfigurationError):
            builder.build()
