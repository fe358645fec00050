"""`kymotools` - kymograph and montage builders for time-lapse image volumes.

Subpackages:
- volume: Labeled volumes with named axes and NetCDF persistence
- kymograph: Path sampling, band assembly and projection
- pipeline: Frame reduction, filtering, resolution and reflection
- montage: Grid layout and fused tiling
- regions: Molecule shapes, region intervals and source providers
"""

__version__ = "0.1.0"
