"""Frame processing: reduction, filters, resolution, reflection and the slice scheduler."""

from kymotools.pipeline.frame_pipeline import FramePipeline, STAGES
from kymotools.pipeline.scheduler import SliceScheduler
from kymotools.pipeline.reduction import plan_frames, reduce_frames, resolve_time_range

__all__ = [
    "FramePipeline",
    "STAGES",
    "SliceScheduler",
    "plan_frames",
    "reduce_frames",
    "resolve_time_range",
]
