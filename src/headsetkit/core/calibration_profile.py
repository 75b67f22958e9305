from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Sequence

import numpy as np


PoseLayout = Literal["row_major", "column_major"]

POSE_VALUE_COUNT = 12


def zero_pose() -> np.ndarray:
    """Fallback extrinsic used when the driver sends a truncated pose array."""
    return np.zeros((4, 4), dtype=np.float64)


def pose_from_array(values: Sequence[float] | np.ndarray, layout: PoseLayout = "row_major") -> np.ndarray:
    """
    Build a 4x4 homogeneous transform from a flat array of at least 12 values.

    Only the first 12 values are used; they hold the 3x4 block [R | t].

      row_major:    r00 r01 r02 tx  r10 r11 r12 ty  r20 r21 r22 tz
      column_major: r00 r10 r20  r01 r11 r21  r02 r12 r22  tx ty tz

    The bottom row is always [0, 0, 0, 1].
    """
    v = np.asarray(values, dtype=np.float64).reshape(-1)
    if v.shape[0] < POSE_VALUE_COUNT:
        raise ValueError(f"pose array needs at least {POSE_VALUE_COUNT} values, got {v.shape[0]}")
    v = v[:POSE_VALUE_COUNT]

    if layout == "row_major":
        block = v.reshape(3, 4)
    elif layout == "column_major":
        block = v.reshape(4, 3).T
    else:
        raise ValueError(f"unknown pose layout: {layout}")

    pose = np.eye(4, dtype=np.float64)
    pose[:3, :] = block
    return pose


@dataclass(frozen=True, eq=False)
class CalibrationProfile:
    """
    Named extrinsic pose + intrinsic camera model for one camera of the headset.

    `relative_pose` is (4,4) and relates the camera frame to the device reference
    frame. `camera_model` is the driver-defined intrinsic parameter vector; the
    common leading layout is fx, fy, cx, cy followed by distortion terms.
    """

    name: str
    relative_pose: np.ndarray  # (4,4)
    camera_model: np.ndarray  # (N,)

    def __post_init__(self) -> None:
        pose = np.array(self.relative_pose, dtype=np.float64).reshape(4, 4)
        model = np.array(self.camera_model, dtype=np.float64).reshape(-1)
        pose.setflags(write=False)
        model.setflags(write=False)
        object.__setattr__(self, "relative_pose", pose)
        object.__setattr__(self, "camera_model", model)

    @property
    def has_pose(self) -> bool:
        return bool(np.any(self.relative_pose))

    @property
    def rotation(self) -> np.ndarray:
        return self.relative_pose[:3, :3].copy()

    @property
    def translation(self) -> np.ndarray:
        return self.relative_pose[:3, 3].copy()

    def rotation_vector(self) -> np.ndarray:
        """Rodrigues vector of the rotation block, as expected by cv2.projectPoints."""
        import cv2  # type: ignore

        rvec, _ = cv2.Rodrigues(np.ascontiguousarray(self.rotation))
        return np.asarray(rvec, dtype=np.float64).reshape(3)

    def camera_matrix(self) -> np.ndarray:
        if self.camera_model.shape[0] < 4:
            raise ValueError("camera_model needs at least fx, fy, cx, cy")
        fx, fy, cx, cy = (float(x) for x in self.camera_model[:4])
        return np.array([[fx, 0.0, cx], [0.0, fy, cy], [0.0, 0.0, 1.0]], dtype=np.float64)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "relative_pose": self.relative_pose.reshape(-1).tolist(),
            "camera_model": self.camera_model.tolist(),
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CalibrationProfile):
            return NotImplemented
        return (
            self.name == other.name
            and np.array_equal(self.relative_pose, other.relative_pose)
            and np.array_equal(self.camera_model, other.camera_model)
        )
