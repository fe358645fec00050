"""Molecule geometry, region intervals and source-volume providers."""

from kymotools.regions.shapes import Interval, LineShape, PolygonShape
from kymotools.regions.archive import MoleculeArchive, MoleculeRecord, ShapeProvider
from kymotools.regions.provider import (
    ArraySourceProvider,
    ChannelSource,
    SourceCache,
    SourceVolumeProvider,
)
from kymotools.regions.region_builder import RegionBuilder

__all__ = [
    "Interval",
    "LineShape",
    "PolygonShape",
    "MoleculeArchive",
    "MoleculeRecord",
    "ShapeProvider",
    "ArraySourceProvider",
    "ChannelSource",
    "SourceCache",
    "SourceVolumeProvider",
    "RegionBuilder",
]
