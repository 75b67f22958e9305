from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Literal, Optional

from headsetkit.core.calibration_profile import (
    POSE_VALUE_COUNT,
    CalibrationProfile,
    PoseLayout,
    pose_from_array,
    zero_pose,
)
from headsetkit.errors import MalformedEntryError

logger = logging.getLogger(__name__)

# Native interop boundary: returns the driver's JSON payload, or None/"" when
# the device has no calibration to offer.
CalibrationSource = Callable[[], Optional[str]]

DiagnosticKind = Literal["malformed_entry", "pose_array_too_short", "unparsable_json"]


@dataclass(frozen=True)
class CalibrationDiagnostic:
    kind: DiagnosticKind
    message: str
    index: int | None = None
    name: str | None = None


@dataclass
class CalibrationLoadResult:
    profiles: dict[str, CalibrationProfile] | None
    diagnostics: list[CalibrationDiagnostic] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return self.profiles is not None


def static_source(text: str | None) -> CalibrationSource:
    return lambda: text


def file_source(path: str | Path) -> CalibrationSource:
    """Use a JSON dump of the driver payload as the interop source."""
    p = Path(path)

    def _fetch() -> str | None:
        if not p.exists():
            return None
        return p.read_text(encoding="utf-8")

    return _fetch


def _parse_number(raw: Any) -> float:
    # The driver emits either JSON numbers or numeric strings.
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        raise ValueError(f"expected a number or numeric string, got {type(raw).__name__}")
    if isinstance(raw, str) and "_" in raw:
        raise ValueError(f"not a decimal literal: {raw!r}")
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"non-finite value: {raw!r}")
    return value


def _parse_number_array(node: dict[str, Any], key: str) -> list[float]:
    raw = node.get(key)
    if not isinstance(raw, list):
        raise ValueError(f"'{key}' must be an array")
    return [_parse_number(x) for x in raw]


def parse_calibration_entry(
    node: Any,
    index: int,
    *,
    pose_layout: PoseLayout = "row_major",
    diagnostics: list[CalibrationDiagnostic] | None = None,
) -> CalibrationProfile:
    """
    Parse one element of the driver's calibration array.

    A `relative_pose` shorter than 12 values is reported (logged and appended to
    `diagnostics`) and replaced by the zero pose; the camera model is still parsed.
    Any other problem raises MalformedEntryError.
    """
    name: str | None = None
    try:
        if not isinstance(node, dict):
            raise ValueError("entry must be an object")
        raw_name = node.get("name")
        if not isinstance(raw_name, str):
            raise ValueError("'name' must be a string")
        name = raw_name

        pose_values = _parse_number_array(node, "relative_pose")
        if len(pose_values) < POSE_VALUE_COUNT:
            msg = (
                f"CalibrationParameterLoader: relative_pose array was too short for '{name}' "
                f"({len(pose_values)} < {POSE_VALUE_COUNT}); using zero pose."
            )
            logger.error(msg)
            if diagnostics is not None:
                diagnostics.append(CalibrationDiagnostic("pose_array_too_short", msg, index=index, name=name))
            pose = zero_pose()
        else:
            pose = pose_from_array(pose_values, pose_layout)

        camera_model = _parse_number_array(node, "camera_model")
    except (ValueError, TypeError, OverflowError) as e:
        raise MalformedEntryError(str(e), index=index, name=name) from e

    return CalibrationProfile(name=name, relative_pose=pose, camera_model=camera_model)


class CalibrationParameterLoader:
    """
    Loads per-camera calibration profiles from the native driver payload.

    Loading is best-effort: a malformed entry is logged and skipped, the rest of
    the batch is kept. `load()` returns None only when there is no payload or it
    is not a JSON array at all.
    """

    def __init__(self, source: CalibrationSource, *, pose_layout: PoseLayout = "row_major") -> None:
        if pose_layout not in ("row_major", "column_major"):
            raise ValueError(f"unknown pose layout: {pose_layout}")
        self.source = source
        self.pose_layout: PoseLayout = pose_layout

    def load(self) -> dict[str, CalibrationProfile] | None:
        return self.load_with_diagnostics().profiles

    def load_with_diagnostics(self) -> CalibrationLoadResult:
        text = self.source()
        if not text:
            logger.debug("No calibration data available from the interop source")
            return CalibrationLoadResult(profiles=None)

        try:
            nodes = json.loads(text)
        except (json.JSONDecodeError, RecursionError) as e:
            msg = f"CalibrationParameter parsing error: payload is not valid JSON ({e})"
            logger.error(msg)
            return CalibrationLoadResult(profiles=None, diagnostics=[CalibrationDiagnostic("unparsable_json", msg)])
        if not isinstance(nodes, list):
            msg = f"CalibrationParameter parsing error: expected a JSON array, got {type(nodes).__name__}"
            logger.error(msg)
            return CalibrationLoadResult(profiles=None, diagnostics=[CalibrationDiagnostic("unparsable_json", msg)])

        diagnostics: list[CalibrationDiagnostic] = []
        profiles: dict[str, CalibrationProfile] = {}
        for index, node in enumerate(nodes):
            try:
                profile = parse_calibration_entry(
                    node, index, pose_layout=self.pose_layout, diagnostics=diagnostics
                )
                if profile.name in profiles:
                    raise MalformedEntryError("duplicate profile name", index=index, name=profile.name)
            except MalformedEntryError as e:
                msg = f"CalibrationParameter parsing error: {e.label} was not formatted correctly ({e})."
                logger.error(msg)
                diagnostics.append(CalibrationDiagnostic("malformed_entry", msg, index=e.index, name=e.name))
                continue
            profiles[profile.name] = profile

        logger.info(f"Loaded {len(profiles)} calibration profile(s) from {len(nodes)} entries")
        return CalibrationLoadResult(profiles=profiles, diagnostics=diagnostics)


def load_calibration_file(
    path: str | Path, *, pose_layout: PoseLayout = "row_major"
) -> dict[str, CalibrationProfile] | None:
    return CalibrationParameterLoader(file_source(path), pose_layout=pose_layout).load()
