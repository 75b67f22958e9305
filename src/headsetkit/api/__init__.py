from headsetkit.api.calibration_loader import (
    CalibrationDiagnostic,
    CalibrationLoadResult,
    CalibrationParameterLoader,
    file_source,
    load_calibration_file,
    static_source,
)
from headsetkit.api.environment_profiles import (
    EnvironmentProfile,
    EnvironmentProfileCollection,
    EnvironmentProfileJsonParser,
    load_environment_profiles,
    save_environment_profiles,
)

__all__ = [
    "CalibrationDiagnostic",
    "CalibrationLoadResult",
    "CalibrationParameterLoader",
    "file_source",
    "load_calibration_file",
    "static_source",
    "EnvironmentProfile",
    "EnvironmentProfileCollection",
    "EnvironmentProfileJsonParser",
    "load_environment_profiles",
    "save_environment_profiles",
]
