from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from headsetkit.api.calibration_loader import CalibrationParameterLoader, file_source
from headsetkit.api.environment_profiles import (
    EnvironmentProfileJsonParser,
    load_environment_profiles,
    save_environment_profiles,
)
from headsetkit.errors import InvalidArgumentError, SchemaViolationError
from headsetkit.utils.logging_utils import setup_logging


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="headsetkit")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    parser.add_argument("--log-dir", type=Path, default=None, help="Also write headsetkit.log to this directory.")
    sub = parser.add_subparsers(dest="cmd", required=True)

    cal = sub.add_parser(
        "load-calibration",
        help="Load a calibration payload dumped from the driver and print the parsed profiles as JSON.",
    )
    cal.add_argument("payload", type=Path)
    cal.add_argument(
        "--pose-layout",
        type=str,
        default="row_major",
        choices=["row_major", "column_major"],
        help="Layout of the 12-value relative_pose array (driver convention).",
    )
    cal.add_argument("--out", type=Path, default=None, help="Write the JSON here instead of stdout.")

    val = sub.add_parser("validate-profiles", help="Strictly parse an environment profile file.")
    val.add_argument("profiles", type=Path)

    fmt = sub.add_parser("format-profiles", help="Rewrite an environment profile file in canonical form.")
    fmt.add_argument("profiles", type=Path)
    fmt.add_argument("--out", type=Path, default=None, help="Output file (default: rewrite in place).")

    args = parser.parse_args(argv)
    setup_logging(debug_mode=args.debug, output_dir=args.log_dir)

    if args.cmd == "load-calibration":
        loader = CalibrationParameterLoader(file_source(args.payload), pose_layout=args.pose_layout)
        profiles = loader.load()
        if profiles is None:
            print(f"No calibration data in {args.payload}", file=sys.stderr)
            return 1
        text = json.dumps([p.to_dict() for p in profiles.values()], indent=2)
        if args.out:
            args.out.parent.mkdir(parents=True, exist_ok=True)
            args.out.write_text(text + "\n", encoding="utf-8")
            print(f"Wrote {args.out}")
        else:
            print(text)
        return 0

    if args.cmd == "validate-profiles":
        try:
            collection = EnvironmentProfileJsonParser().deserialize_environment_profiles(
                args.profiles.read_text(encoding="utf-8")
            )
        except (FileNotFoundError, InvalidArgumentError, SchemaViolationError) as e:
            print(f"{args.profiles}: {e}", file=sys.stderr)
            return 1
        for name in sorted(collection):
            print(name)
        return 0

    if args.cmd == "format-profiles":
        try:
            collection = load_environment_profiles(args.profiles)
        except (InvalidArgumentError, SchemaViolationError) as e:
            print(f"{args.profiles}: {e}", file=sys.stderr)
            return 1
        out = save_environment_profiles(args.out or args.profiles, collection)
        print(f"Wrote {out}")
        return 0

    raise AssertionError(f"Unhandled cmd: {args.cmd}")
