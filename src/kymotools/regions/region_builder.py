"""RegionBuilder: molecule -> interval -> region volume."""

import logging
from typing import Optional

from kymotools.contracts.failure import ConfigurationError, FailurePolicy, KymoError, TypeMismatchError
from kymotools.regions.archive import MoleculeRecord, ShapeProvider
from kymotools.regions.provider import SourceVolumeProvider
from kymotools.regions.shapes import Interval
from kymotools.volume.labeled import LabeledVolume

__all__ = ["RegionBuilder"]

logger = logging.getLogger(__name__)


class RegionBuilder:
    """Cut the region around a molecule out of its source.

    The region is the bounding box of the molecule's line, or of all its
    per-frame shapes when it has no line, grown by the border width and
    height on every side.

    Parameters
    ----------
    archive : ShapeProvider
        Molecule lookup.
    provider : SourceVolumeProvider
        Region volume source.
    border_width, border_height : int
        Pixels added left/right and above/below the bounding box.
    """

    def __init__(self, archive: ShapeProvider, provider: SourceVolumeProvider,
                 border_width: int = 10, border_height: int = 10,
                 policy: FailurePolicy = FailurePolicy.REPORT):
        self.archive = archive
        self.provider = provider
        self.border_width = border_width
        self.border_height = border_height
        self.policy = FailurePolicy(policy)
        self.molecule_uid: Optional[str] = None
        self.last_error: Optional[KymoError] = None

    def set_molecule(self, uid: str) -> "RegionBuilder":
        self.molecule_uid = uid
        return self

    def set_border_width(self, width: int) -> "RegionBuilder":
        self.border_width = width
        return self

    def set_border_height(self, height: int) -> "RegionBuilder":
        self.border_height = height
        return self

    def molecule(self) -> MoleculeRecord:
        if self.molecule_uid is None:
            raise ConfigurationError("No molecule set")
        return self.archive.get(self.molecule_uid)

    def interval(self) -> Interval:
        """Bounding interval of the molecule's geometry plus borders."""
        record = self.molecule()
        if record.line is not None:
            return Interval.around_line(record.line, self.border_width, self.border_height)
        if record.shapes:
            return Interval.around_shapes(record.shapes.values(),
                                          self.border_width, self.border_height)
        raise ConfigurationError(f"Molecule {record.uid} has neither a line nor shapes")

    def fetch(self, min_t: Optional[int] = None, max_t: Optional[int] = None) -> LabeledVolume:
        """Region volume for the current molecule.

        Raises
        ------
        ConfigurationError
            No molecule set, unknown molecule, or no geometry.
        TypeMismatchError
            The provider could not combine the molecule's sources.
        """
        record = self.molecule()
        interval = self.interval()
        volume = self.provider.fetch(record.metadata_uid, interval, min_t, max_t)
        if volume is None:
            raise TypeMismatchError(
                f"No region volume for molecule {record.uid} "
                f"(source '{record.metadata_uid}')"
            )
        return volume

    def build(self, min_t: Optional[int] = None,
              max_t: Optional[int] = None) -> Optional[LabeledVolume]:
        """fetch(), reporting errors instead of raising them."""
        self.last_error = None
        try:
            return self.fetch(min_t, max_t)
        except KymoError as e:
            self.last_error = e
            logger.error("RegionBuilder failed: %s", e)
            if self.policy == FailurePolicy.RAISE:
                raise
            return None
