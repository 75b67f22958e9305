from headsetkit.reconstruction.localizer import Signal, SlamLocalizer
from headsetkit.reconstruction.slam_checker import CheckerState, SlamChecker, localize_map_future

__all__ = ["Signal", "SlamLocalizer", "CheckerState", "SlamChecker", "localize_map_future"]
