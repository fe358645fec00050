"""Kymographs: path geometry, band sampling, projection and the fluent builder."""

from kymotools.kymograph.path_sampler import BandSample, Path, PathPoint, PathSampler, Segment
from kymotools.kymograph.assembler import KymographAssembler
from kymotools.kymograph.builder import KymographBuilder

__all__ = [
    "BandSample",
    "Path",
    "PathPoint",
    "PathSampler",
    "Segment",
    "KymographAssembler",
    "KymographBuilder",
]
