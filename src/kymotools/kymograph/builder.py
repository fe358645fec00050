"""KymographBuilder: the fluent entry point for kymographs.

A build resolves its source and path (an explicit volume and path, or a
molecule whose line is looked up in an archive and cut out of its source
with a border), assembles and projects the band, then post-processes the
projected position-by-time image with the FramePipeline.
"""

import logging
from typing import Optional, Sequence, Tuple, TYPE_CHECKING

from kymotools.contracts.failure import (
    ConfigurationError,
    ContractViolation,
    FailurePolicy,
    KymoError,
)
from kymotools.kymograph.assembler import KymographAssembler
from kymotools.kymograph.path_sampler import Path
from kymotools.pipeline.frame_pipeline import FramePipeline
from kymotools.pipeline.reduction import resolve_time_range
from kymotools.pipeline.settings import PipelineSettings
from kymotools.regions.archive import ShapeProvider
from kymotools.regions.provider import SourceVolumeProvider
from kymotools.regions.region_builder import RegionBuilder
from kymotools.schemas.specs import PipelineConfig
from kymotools.volume.axes import Axis
from kymotools.volume.labeled import LabeledVolume

if TYPE_CHECKING:
    from kymotools.schemas import InternalConfig

__all__ = ["KymographBuilder"]

logger = logging.getLogger(__name__)


class KymographBuilder(PipelineSettings):
    """Build a projected kymograph with optional post-processing.

    Parameters
    ----------
    archive : ShapeProvider, optional
        Molecule lookup, needed only with ``set_molecule``.
    provider : SourceVolumeProvider, optional
        Region source, needed only with ``set_molecule``.
    config : PipelineConfig, optional
        Initial pipeline settings; setters override them.
    border_width, border_height : int
        Pixels around the molecule's line included in the fetched region
        along X and Y.
    policy : FailurePolicy
        REPORT logs and returns None on user errors, RAISE re-raises.

    Examples
    --------
    >>> kymo = (KymographBuilder()
    ...         .set_source(volume)
    ...         .set_path(Path.straight(5, 10, 15, 10))
    ...         .set_projection_width(3)
    ...         .average_frames(2)
    ...         .build())
    """

    def __init__(self, archive: Optional[ShapeProvider] = None,
                 provider: Optional[SourceVolumeProvider] = None,
                 config: Optional[PipelineConfig] = None,
                 border_width: int = 10, border_height: int = 10,
                 policy: FailurePolicy = FailurePolicy.REPORT):
        self._init_settings(config, policy)
        self.archive = archive
        self.provider = provider
        self.border_width = border_width
        self.border_height = border_height
        self.width = 1
        self.molecule_uid: Optional[str] = None
        self.source: Optional[LabeledVolume] = None
        self.path: Optional[Path] = None
        self.kymograph: Optional[LabeledVolume] = None
        self.projected_kymograph: Optional[LabeledVolume] = None

    @classmethod
    def from_config(cls, config: "InternalConfig", archive: Optional[ShapeProvider] = None,
                    provider: Optional[SourceVolumeProvider] = None) -> "KymographBuilder":
        builder = cls(archive, provider, config=config.pipeline,
                      border_width=config.region.border_width,
                      border_height=config.region.border_height)
        builder.set_projection_width(config.kymograph.width)
        if config.region.molecule is not None:
            builder.set_molecule(config.region.molecule)
        if config.kymograph.path:
            builder.set_path(config.kymograph.path)
        return builder

    # ------------------------------------------------------------------
    # Setters
    # ------------------------------------------------------------------

    def set_molecule(self, uid: str) -> "KymographBuilder":
        self.molecule_uid = uid
        return self

    def set_source(self, volume: LabeledVolume) -> "KymographBuilder":
        self.source = volume
        return self

    def set_path(self, path) -> "KymographBuilder":
        """Sampling path, as a Path or a sequence of (x, y) vertices."""
        self.path = path if isinstance(path, Path) else Path.from_points(path)
        return self

    def set_projection_width(self, width: int) -> "KymographBuilder":
        self.width = width
        return self

    def set_border_width(self, width: int) -> "KymographBuilder":
        self.border_width = width
        return self

    def set_border_height(self, height: int) -> "KymographBuilder":
        self.border_height = height
        return self

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def _resolve_inputs(self) -> Tuple[LabeledVolume, Path, bool]:
        """(source, path in source pixels, whether time bounds were already applied)."""
        if self.source is not None:
            if self.path is None:
                raise ConfigurationError("Source set but no path to sample")
            return self.source, self.path, False

        if self.molecule_uid is None:
            raise ConfigurationError("No source volume or molecule set")
        if self.archive is None or self.provider is None:
            raise ConfigurationError("Molecule set but no archive/provider to resolve it")

        region = RegionBuilder(self.archive, self.provider,
                               self.border_width, self.border_height)
        region.set_molecule(self.molecule_uid)
        record = region.molecule()
        if record.line is None:
            raise ConfigurationError(f"Molecule {record.uid} has no line to sample")
        interval = region.interval()
        volume = region.fetch(self._min_t, self._max_t)

        line = record.line
        path = Path.straight(line.x1, line.y1, line.x2, line.y2)
        return volume, path.translated(-interval.min_x, -interval.min_y), True

    def _crop_time(self, volume: LabeledVolume) -> LabeledVolume:
        if self._min_t is None and self._max_t is None:
            return volume
        start, end = resolve_time_range(volume.size(Axis.TIME), self._min_t, self._max_t)
        if start == 0 and end == volume.size(Axis.TIME) - 1:
            return volume
        t_axis = volume.axis_index(Axis.TIME)
        values = volume.values.take(list(range(start, end + 1)), axis=t_axis)
        return volume.with_values(values)

    def build(self) -> Optional[LabeledVolume]:
        """Run the build.

        Returns
        -------
        LabeledVolume or None
            Projected (position, time, channel) kymograph, or None after a
            reported error. The 4-axis intermediate is kept as ``kymograph``.

        Raises
        ------
        ContractViolation
            If a stage broke its output contract (never swallowed).
        """
        self.last_error = None
        self.errors = []
        self.kymograph = None
        self.projected_kymograph = None

        try:
            config = self.pipeline_config()
            source, path, time_applied = self._resolve_inputs()
            if not time_applied:
                source = self._crop_time(source)
            missing = [a.value for a in (Axis.X, Axis.Y, Axis.TIME) if not source.has_axis(a)]
            if missing:
                raise ConfigurationError(f"Source '{source.name}' lacks axes {missing}")
            self._require_numeric(source)
            self._check_channel_filters(max(1, source.size(Axis.CHANNEL)))

            logger.info("Building kymograph from %s, %d segment(s), width %d",
                        source, len(path), self.width)
            assembler = KymographAssembler(path, self.width)
            kymograph, projected = assembler.build_both(source)
            self.kymograph = kymograph

            # time bounds were applied to the source already
            pipeline = FramePipeline(config.model_copy(update={"min_t": None, "max_t": None}))
            result = pipeline.run(projected)
            self.errors = list(pipeline.errors)
            if self.errors:
                logger.warning("Kymograph built with %d stage error(s)", len(self.errors))

            self.projected_kymograph = result
            logger.info("Kymograph ready: %s", result)
            return result

        except ContractViolation as e:
            logger.critical("Kymograph contract violated: %s", e)
            raise
        except KymoError as e:
            self._report(e)
            return None
