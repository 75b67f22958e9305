from headsetkit import errors
from headsetkit.api import (
    CalibrationParameterLoader,
    EnvironmentProfile,
    EnvironmentProfileCollection,
    EnvironmentProfileJsonParser,
    load_calibration_file,
    load_environment_profiles,
    save_environment_profiles,
)
from headsetkit.core.calibration_profile import CalibrationProfile
from headsetkit.reconstruction import SlamChecker, localize_map_future

__all__ = [
    "errors",
    "CalibrationProfile",
    "CalibrationParameterLoader",
    "load_calibration_file",
    "EnvironmentProfile",
    "EnvironmentProfileCollection",
    "EnvironmentProfileJsonParser",
    "load_environment_profiles",
    "save_environment_profiles",
    "SlamChecker",
    "localize_map_future",
]
