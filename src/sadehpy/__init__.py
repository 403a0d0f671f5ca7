"""Sleep scoring of actigraphy epochs with the Sadeh algorithm."""

from sadehpy.core import orchestrator
from sadehpy.core.models import SleepState
from sadehpy.processing.sadeh import apply_sadeh, apply_sadeh_by_group

run = orchestrator.run

__all__ = ["run", "apply_sadeh", "apply_sadeh_by_group", "SleepState"]
