"""
Create master derivatives for oversized images without starting the server.

Usage:
    python scripts/optimize_media.py [--config lavender.toml] [--relpath artwork]

Prints one line per written/failed file and a summary; exits 1 when any file failed.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lavender.config import load_config  # noqa: E402
from lavender.services import media_service  # noqa: E402
from lavender.services.exceptions import ConfigError, ServiceError  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--config", type=Path, default=None, help="path to lavender.toml")
    parser.add_argument("--relpath", default=None, help="sub-directory of the media root to process")
    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        print(f"[optimize] {exc}")
        return 2

    try:
        report = media_service.optimize(config, args.relpath)
    except ServiceError as exc:
        print(f"[optimize] aborted: {exc}")
        return 2

    for failure in report.failed:
        print(f"  - {failure.path}: {failure.reason}")
    return 1 if report.failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
