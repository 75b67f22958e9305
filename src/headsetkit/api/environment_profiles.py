from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Iterable

from headsetkit.errors import InvalidArgumentError, SchemaViolationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnvironmentProfile:
    """
    Persisted record of a previously mapped physical space.

    `slam_map` is the path of the SLAM map file handed to the localizer;
    `reconstructions` lists the mesh files built for the same space.
    """

    id: str
    name: str
    slam_map: str
    reconstructions: tuple[str, ...]
    last_updated: str
    description: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "reconstructions", tuple(self.reconstructions))


_REQUIRED_MEMBERS = ("id", "name", "slam_map", "reconstructions", "last_updated")
_KNOWN_MEMBERS = frozenset(f.name for f in fields(EnvironmentProfile))


class EnvironmentProfileCollection(dict):
    """Environment profiles keyed by profile name."""

    @classmethod
    def from_profiles(cls, profiles: Iterable[EnvironmentProfile]) -> "EnvironmentProfileCollection":
        return cls((p.name, p) for p in profiles)


def _require(cond: bool, msg: str) -> None:
    if not cond:
        raise SchemaViolationError(msg)


def _require_str(record: dict[str, Any], key: str, where: str) -> str:
    value = record[key]
    _require(isinstance(value, str), f"{where}.{key} must be a string")
    return value


def parse_environment_profile(record: Any, where: str = "profile") -> EnvironmentProfile:
    _require(isinstance(record, dict), f"{where} must be an object")

    unknown = sorted(set(record) - _KNOWN_MEMBERS)
    _require(not unknown, f"{where} has unknown member(s): {', '.join(unknown)}")
    missing = [k for k in _REQUIRED_MEMBERS if k not in record]
    _require(not missing, f"{where} is missing required member(s): {', '.join(missing)}")

    reconstructions = record["reconstructions"]
    _require(isinstance(reconstructions, list), f"{where}.reconstructions must be an array")
    _require(
        all(isinstance(r, str) for r in reconstructions),
        f"{where}.reconstructions must only contain strings",
    )

    description = record.get("description")
    _require(description is None or isinstance(description, str), f"{where}.description must be a string or null")

    return EnvironmentProfile(
        id=_require_str(record, "id", where),
        name=_require_str(record, "name", where),
        slam_map=_require_str(record, "slam_map", where),
        reconstructions=tuple(reconstructions),
        last_updated=_require_str(record, "last_updated", where),
        description=description,
    )


def environment_profile_to_dict(profile: EnvironmentProfile) -> dict[str, Any]:
    return {
        "id": profile.id,
        "name": profile.name,
        "slam_map": profile.slam_map,
        "reconstructions": list(profile.reconstructions),
        "last_updated": profile.last_updated,
        "description": profile.description,
    }


class EnvironmentProfileJsonParser:
    """
    Strict JSON codec for environment profile collections.

    Unknown members, missing required members and mistyped members all raise
    SchemaViolationError; nothing is silently dropped.
    """

    def deserialize_environment_profiles(self, data: str | None) -> EnvironmentProfileCollection:
        if not data:
            raise InvalidArgumentError("data must be a non-empty string")
        try:
            root = json.loads(data)
        except (json.JSONDecodeError, RecursionError) as e:
            raise SchemaViolationError(f"environment profiles are not valid JSON: {e}") from e
        _require(isinstance(root, dict), "environment profiles must be a JSON object keyed by profile name")

        collection = EnvironmentProfileCollection()
        for key, record in root.items():
            profile = parse_environment_profile(record, where=f"profiles[{key!r}]")
            _require(profile.name == key, f"profiles[{key!r}].name must match its key, got {profile.name!r}")
            collection[key] = profile
        return collection

    def serialize_environment_profiles(self, environment_profiles: EnvironmentProfileCollection | None) -> str:
        if environment_profiles is None:
            raise InvalidArgumentError("environment_profiles must not be None")
        payload = {str(k): environment_profile_to_dict(v) for k, v in environment_profiles.items()}
        return json.dumps(payload, indent=2, sort_keys=True)


def save_environment_profiles(
    path: Path, environment_profiles: EnvironmentProfileCollection, *, parser: EnvironmentProfileJsonParser | None = None
) -> Path:
    parser = parser or EnvironmentProfileJsonParser()
    path = Path(path)
    text = parser.serialize_environment_profiles(environment_profiles)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text + "\n", encoding="utf-8")
    logger.info(f"Saved {len(environment_profiles)} environment profile(s) to {path}")
    return path


def load_environment_profiles(
    path: Path, *, parser: EnvironmentProfileJsonParser | None = None
) -> EnvironmentProfileCollection:
    parser = parser or EnvironmentProfileJsonParser()
    path = Path(path)
    if not path.exists():
        logger.debug(f"No environment profiles at {path}")
        return EnvironmentProfileCollection()
    return parser.deserialize_environment_profiles(path.read_text(encoding="utf-8"))
