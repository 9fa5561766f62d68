#!/usr/bin/env python3
"""Watch the locks on a Dwelo gateway and optionally lock/unlock one.

Usage
-----
Set environment variables and run::

    export DWELO_TOKEN="..."
    export DWELO_GATEWAY_ID="12345"
    python scripts/watch_locks.py

Options::

    --lock UID           Send a lock request to this device
    --unlock UID         Send an unlock request to this device
    --duration SECONDS   How long to watch before exiting (default: 60)
    --poll-ms MS         Override DWELO_LOCK_POLL_MS
    --auto-lock MINUTES  Override DWELO_AUTO_LOCK_MINUTES
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pydwelo import DweloClient, DweloConfig, DweloError, DweloPlatform, LockAttributes, TargetState  # noqa: E402
from pydwelo.models import Device  # noqa: E402


def _printing_attributes(device: Device) -> LockAttributes:
    attributes = LockAttributes()
    label = device.given_name or str(device.uid)

    def _print(name: str, value: Any) -> None:
        shown = value.name if hasattr(value, "name") else value
        print(f"[{label}] {name} = {shown}")

    attributes.add_listener(_print)
    return attributes


async def main() -> int:
    parser = argparse.ArgumentParser(description="Watch Dwelo locks and send lock/unlock requests.")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--lock", type=int, metavar="UID", help="Lock this device")
    group.add_argument("--unlock", type=int, metavar="UID", help="Unlock this device")
    parser.add_argument("--duration", type=float, default=60.0, help="Seconds to watch (default: 60)")
    parser.add_argument("--poll-ms", type=int, help="Poll interval in milliseconds")
    parser.add_argument("--auto-lock", type=float, help="Auto-lock delay in minutes (0 disables)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    overrides: dict[str, Any] = {}
    if args.poll_ms is not None:
        overrides["lock_poll_ms"] = args.poll_ms
    if args.auto_lock is not None:
        overrides["auto_lock_minutes"] = args.auto_lock

    try:
        config = DweloConfig.from_env(**overrides)
    except DweloError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    async with DweloClient(config) as client, DweloPlatform(client, exposition_factory=_printing_attributes) as platform:
        accessories = await platform.discover_locks()
        if not accessories:
            print("No locks found on this gateway", file=sys.stderr)
            return 1
        platform.start()

        uid = args.lock if args.lock is not None else args.unlock
        if uid is not None:
            target = TargetState.SECURED if args.lock is not None else TargetState.UNSECURED
            accessory = next((a for a in accessories if a.lock_id == uid), None)
            if accessory is None:
                print(f"No lock with uid {uid}", file=sys.stderr)
                return 1
            await accessory.request_target(target)

        await asyncio.sleep(args.duration)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
