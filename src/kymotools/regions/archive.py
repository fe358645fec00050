"""In-memory molecule archive.

Holds what the builders need to know about a molecule: which source it was
imaged in (metadata UID), an optional fixed line and optional per-frame
shapes.
"""

import logging
from typing import Dict, Iterable, Optional, Protocol

from pydantic import Field

from kymotools.contracts.failure import ConfigurationError
from kymotools.regions.shapes import LineShape, PolygonShape
from kymotools.schemas.base import FrozenModel

__all__ = ["MoleculeRecord", "ShapeProvider", "MoleculeArchive"]

logger = logging.getLogger(__name__)


class MoleculeRecord(FrozenModel):
    uid: str
    metadata_uid: str
    line: Optional[LineShape] = None
    shapes: Dict[int, PolygonShape] = Field(default_factory=dict)


class ShapeProvider(Protocol):
    """Anything that can look up molecules by UID."""

    def get(self, uid: str) -> MoleculeRecord:
        ...


class MoleculeArchive:
    """Dictionary-backed ShapeProvider.

    Examples
    --------
    >>> archive = MoleculeArchive()
    >>> archive.add(MoleculeRecord(uid="m1", metadata_uid="movie",
    ...                            line=LineShape(x1=5, y1=10, x2=15, y2=10)))
    >>> archive.get("m1").line.x2
    15.0
    """

    def __init__(self, records: Iterable[MoleculeRecord] = ()):
        self._records: Dict[str, MoleculeRecord] = {}
        for record in records:
            self.add(record)

    def add(self, record: MoleculeRecord) -> None:
        if record.uid in self._records:
            logger.warning("Replacing molecule %s", record.uid)
        self._records[record.uid] = record

    def get(self, uid: str) -> MoleculeRecord:
        """Record for ``uid``.

        Raises
        ------
        ConfigurationError
            If the UID is unknown.
        """
        try:
            return self._records[uid]
        except KeyError:
            raise ConfigurationError(f"Unknown molecule: {uid}") from None

    def __contains__(self, uid: str) -> bool:
        return uid in self._records

    def __len__(self) -> int:
        return len(self._records)
