"""MontageBuilder: the fluent entry point for montages."""

import logging
from typing import Optional, TYPE_CHECKING

from kymotools.contracts.failure import (
    ConfigurationError,
    ContractViolation,
    FailurePolicy,
    KymoError,
)
from kymotools.montage.assembler import MontageAssembler
from kymotools.pipeline.frame_pipeline import FramePipeline
from kymotools.pipeline.settings import PipelineSettings
from kymotools.regions.archive import ShapeProvider
from kymotools.regions.provider import SourceVolumeProvider
from kymotools.regions.region_builder import RegionBuilder
from kymotools.schemas.specs import PipelineConfig
from kymotools.volume.axes import Axis
from kymotools.volume.labeled import LabeledVolume

if TYPE_CHECKING:
    from kymotools.schemas import InternalConfig

__all__ = ["MontageBuilder"]

logger = logging.getLogger(__name__)


class MontageBuilder(PipelineSettings):
    """Build a montage of selected frames.

    Filtering and resolution scaling run over the whole source first;
    reduction and reflection happen while tiles are copied.

    Examples
    --------
    >>> montage = (MontageBuilder()
    ...            .set_source(volume)
    ...            .set_spacing(2)
    ...            .set_columns(3)
    ...            .skip_frames(2)
    ...            .build())
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
        self.spacing = 0
        self.columns = -1
        self.horizontal_layout = True
        self.molecule_uid: Optional[str] = None
        self.source: Optional[LabeledVolume] = None
        self.layout = None

    @classmethod
    def from_config(cls, config: "InternalConfig", archive: Optional[ShapeProvider] = None,
                    provider: Optional[SourceVolumeProvider] = None) -> "MontageBuilder":
        builder = cls(archive, provider, config=config.pipeline,
                      border_width=config.region.border_width,
                      border_height=config.region.border_height)
        builder.set_spacing(config.montage.spacing)
        builder.set_columns(config.montage.columns)
        builder.set_horizontal_layout(config.montage.horizontal_layout)
        if config.region.molecule is not None:
            builder.set_molecule(config.region.molecule)
        return builder

    # ------------------------------------------------------------------
    # Setters
    # ------------------------------------------------------------------

    def set_source(self, volume: LabeledVolume) -> "MontageBuilder":
        self.source = volume
        return self

    def set_molecule(self, uid: str) -> "MontageBuilder":
        self.molecule_uid = uid
        return self

    def set_spacing(self, spacing: int) -> "MontageBuilder":
        self.spacing = max(0, int(spacing))
        return self

    def set_columns(self, columns: int) -> "MontageBuilder":
        self.columns = int(columns)
        return self

    def set_horizontal_layout(self, horizontal: bool = True) -> "MontageBuilder":
        self.horizontal_layout = bool(horizontal)
        return self

    def set_border_width(self, width: int) -> "MontageBuilder":
        self.border_width = width
        return self

    def set_border_height(self, height: int) -> "MontageBuilder":
        self.border_height = height
        return self

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def _resolve_source(self) -> LabeledVolume:
        if self.source is not None:
            return self.source
        if self.molecule_uid is None:
            raise ConfigurationError("No source volume or molecule set")
        if self.archive is None or self.provider is None:
            raise ConfigurationError("Molecule set but no archive/provider to resolve it")
        region = RegionBuilder(self.archive, self.provider,
                               self.border_width, self.border_height)
        # full time range; the tiler applies min_t/max_t
        return region.set_molecule(self.molecule_uid).fetch()

    def build(self) -> Optional[LabeledVolume]:
        """Run the build.

        Returns
        -------
        LabeledVolume or None
            Canvas with axes (y, x[, channel]), or None after a reported error.

        Raises
        ------
        ContractViolation
            If the canvas does not match its layout (never swallowed).
        """
        self.last_error = None
        self.errors = []
        self.layout = None

        try:
            config = self.pipeline_config()
            source = self._resolve_source()
            self._require_numeric(source)
            self._check_channel_filters(max(1, source.size(Axis.CHANNEL)))

            pipeline = FramePipeline(config)
            processed = pipeline.run(source, stages=("filter", "resolution"))
            self.errors = list(pipeline.errors)

            assembler = MontageAssembler(
                spacing=self.spacing,
                columns=self.columns,
                horizontal_layout=self.horizontal_layout,
                reduction=config.reduction,
                vertical_reflection=config.vertical_reflection,
                horizontal_reflection=config.horizontal_reflection,
                min_t=config.min_t,
                max_t=config.max_t,
            )
            result = assembler.assemble(processed)
            self.layout = assembler.layout
            if self.errors:
                logger.warning("Montage built with %d stage error(s)", len(self.errors))
            return result

        except ContractViolation as e:
            logger.critical("Montage contract violated: %s", e)
            raise
        except KymoError as e:
            self._report(e)
            return None
