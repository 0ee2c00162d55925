#!/usr/bin/env python3
"""Submit one emergency through the alert pipeline and report the outcome.

Usage::

    # Simulated run (no vendor credentials configured)
    python scripts/run.py --device-id 4096 --contact 9876543210

    # Custom config file, with location
    python scripts/run.py --config config/settings.yaml \\
        --device-id 4096 --contact 9876543210 --lat 12.97 --lon 77.59

    # List the vendor names accepted by cpaas.provider
    python scripts/run.py --list-providers
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

import structlog

from safealert.core.config import load_settings
from safealert.core.logging import setup_logging
from safealert.dispatch.factory import create_alert_pipeline
from safealert.incidents.exceptions import ValidationError
from safealert.providers.exceptions import UnknownProviderError
from safealert.providers.factory import supported_providers

logger = structlog.get_logger(__name__)


def _payload(args: argparse.Namespace) -> dict[str, object]:
    payload: dict[str, object] = {
        "deviceId": args.device_id,
        "emergencyContacts": args.contact or [],
    }
    optional = {
        "latitude": args.lat,
        "longitude": args.lon,
        "batteryLevel": args.battery,
        "sequenceNumber": args.sequence,
    }
    payload.update({k: v for k, v in optional.items() if v is not None})
    return payload


async def run(args: argparse.Namespace) -> int:
    """Build the pipeline, submit, wait for dispatch, print the incident."""
    settings = load_settings(args.config)
    setup_logging(level=args.log_level, fmt=args.log_format)

    try:
        pipeline = create_alert_pipeline(settings)
    except UnknownProviderError as exc:
        logger.error("unknown_provider", provider=exc.name, supported=exc.supported)
        print(str(exc), file=sys.stderr)
        return 2

    try:
        try:
            incident = await pipeline.submit(_payload(args))
        except ValidationError as exc:
            print(f"Rejected: {exc}", file=sys.stderr)
            return 1

        print(json.dumps({"accepted": incident.to_dict()}, indent=2))

        await pipeline.drain()

        final = await pipeline.tracker.get(incident.id)
        stats = await pipeline.tracker.stats()
        print(json.dumps(
            {
                "incident": final.to_dict() if final else None,
                "stats": stats.to_dict(),
            },
            indent=2,
        ))
    finally:
        await pipeline.close()

    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Send an emergency alert to contacts over SMS and voice.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level override: DEBUG, INFO, WARNING, ERROR",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Log renderer override",
    )
    parser.add_argument("--device-id", type=int, help="Device identifier")
    parser.add_argument(
        "--contact",
        action="append",
        help="Emergency contact phone number (repeatable)",
    )
    parser.add_argument("--lat", type=float, default=None, help="Latitude")
    parser.add_argument("--lon", type=float, default=None, help="Longitude")
    parser.add_argument("--battery", type=int, default=None, help="Battery level 0-100")
    parser.add_argument("--sequence", type=int, default=None, help="Sequence number")
    parser.add_argument(
        "--list-providers",
        action="store_true",
        help="Print supported CPaaS provider names and exit",
    )
    args = parser.parse_args()

    if args.list_providers:
        print("\n".join(sorted(supported_providers())))
        sys.exit(0)

    code = asyncio.run(run(args))
    sys.exit(code)


if __name__ == "__main__":
    main()
