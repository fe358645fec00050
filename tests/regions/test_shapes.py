"""Molecule geometry and interval tests."""

import pytest
from pydantic import ValidationError

from kymotools.contracts import ConfigurationError
from kymotools.regions import Interval, LineShape, MoleculeArchive, MoleculeRecord, PolygonShape

pytestmark = pytest.mark.unit


class TestInterval:

    def test_around_line_with_border(self):
        line = LineShape(x1=15.7, y1=10, x2=5.2, y2=12)
        interval = Interval.around_line(line, border_width=3, border_height=1)

        assert (interval.min_x, interval.max_x) == (2, 18)
        assert (interval.min_y, interval.max_y) == (9, 13)
        assert interval.width == 17
        assert interval.height == 5

    def test_around_shapes_covers_all_frames(self):
        shapes = [PolygonShape(xs=(1, 4), ys=(2, 3)), PolygonShape(xs=(6,), ys=(0.5,))]
        interval = Interval.around_shapes(shapes)
        assert (interval.min_x, interval.min_y, interval.max_x, interval.max_y) == (1, 0, 6, 3)

    def test_around_no_shapes(self):
        with pytest.raises(ValueError, match="No shape points"):
            Interval.around_shapes([])

    def test_empty_interval_rejected(self):
        with pytest.raises(ValidationError, match="Empty interval"):
            Interval(min_x=5, min_y=0, max_x=4, max_y=0)


class TestPolygonShape:

    def test_mismatched_lengths(self):
        with pytest.raises(ValidationError):
            PolygonShape(xs=(1, 2), ys=(1,))

    def test_needs_a_point(self):
        with pytest.raises(ValidationError):
            PolygonShape(xs=(), ys=())


class TestMoleculeArchive:

    def test_lookup(self):
        archive = MoleculeArchive([MoleculeRecord(uid="m1", metadata_uid="movie")])
        assert "m1" in archive
        assert len(archive) == 1
        assert archive.get("m1").metadata_uid == "movie"

    def test_unknown_uid(self):
        with pytest.raises(ConfigurationError, match="Unknown molecule"):
            MoleculeArchive().get("m9")

    def test_replace_warns(self, caplog):
        archive = MoleculeArchive([MoleculeRecord(uid="m1", metadata_uid="a")])
        archive.add(MoleculeRecord(uid="m1", metadata_uid="b"))
        assert archive.get("m1").metadata_uid == "b"
        assert "Replacing molecule m1" in caplog.text
