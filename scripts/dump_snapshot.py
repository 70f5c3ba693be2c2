#!/usr/bin/env python3
"""Run one aggregation cycle and dump the resulting snapshot.

Prints every normalized point (tier, position, attributes) per category
**and** the per-category provider error, so provider fields that are not
mapped yet are easy to spot.

Usage
-----
Point the client at a backend and run::

    export DRIVEN_API_BASE_URL="http://localhost:5000"
    python scripts/dump_snapshot.py --country Germany

Options::

    --country NAME       Country name or code (default: DRIVEN_DEFAULT_COUNTRY)
    --lat/--lng          Pretend the device reported this position
    --category NAME      Only fetch this category (repeatable)
    --token TOKEN        Session token forwarded as bearer token
    --json               Output as machine-readable JSON
    --output FILE        Write output to FILE instead of stdout
    --cities             Also list the parking cities
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pydriven import (  # noqa: E402
    AggregationSnapshot,
    Category,
    DrivenClient,
    DrivenConfig,
    DrivenError,
    FixedDeviceLocation,
    PointOfInterest,
)
from pydriven.projection import category_counts  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _format_point(point: PointOfInterest) -> list[str]:
    position = f"{point.longitude:.5f}, {point.latitude:.5f}" if point.coordinates else "unresolved"
    lines = [f"  - {point.id}  {point.name or '<unnamed>'}"]
    lines.append(f"      tier     : {point.tier.value}")
    lines.append(f"      position : {position}")
    if point.raw_status:
        lines.append(f"      status   : {point.raw_status}")
    for key, value in sorted(point.attributes.items()):
        lines.append(f"      {key}: {value}")
    return lines


def _print_snapshot(snapshot: AggregationSnapshot, out: list[str]) -> None:
    counts = category_counts(snapshot)
    location = snapshot.location
    out.append(_section(f"SNAPSHOT  cycle={snapshot.cycle}"))
    out.append(f"  country   : {snapshot.country_code}")
    out.append(f"  location  : {location.latitude:.5f}, {location.longitude:.5f} ({location.source.value})")
    for category in snapshot.per_category:
        out.append(_section(f"{category.value.upper()}  points={counts[category]}"))
        error = snapshot.error(category)
        if error is not None:
            out.append(f"  !! {error.kind.value}: {error.message}")
            continue
        timestamp = snapshot.payload_timestamps.get(category)
        if timestamp is not None:
            out.append(f"  provider timestamp: {timestamp.isoformat()}")
        for point in snapshot.points(category):
            out.extend(_format_point(point))


def _snapshot_to_dict(snapshot: AggregationSnapshot) -> dict[str, Any]:
    return snapshot.model_dump(mode="json")


# ── main ─────────────────────────────────────────────────────


async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Dump one pydriven aggregation snapshot for debugging / development.",
    )
    parser.add_argument("--country", help="Country name or code (default: from config)")
    parser.add_argument("--lat", type=float, help="Device latitude")
    parser.add_argument("--lng", type=float, help="Device longitude")
    parser.add_argument(
        "--category",
        action="append",
        dest="categories",
        help="Only fetch this category (repeatable)",
    )
    parser.add_argument("--token", help="Session token forwarded to the providers")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--cities", action="store_true", help="Also list the parking cities")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    if (args.lat is None) != (args.lng is None):
        parser.error("--lat and --lng must be given together")

    config = DrivenConfig.from_env(api_trace_enabled=args.verbose)
    categories = {Category(name) for name in args.categories} if args.categories else None
    device = FixedDeviceLocation(args.lat, args.lng) if args.lat is not None else None

    result: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "api_base_url": config.api_base_url,
    }
    out: list[str] = [_section("pydriven dump_snapshot")]
    out.append(f"  time      : {result['timestamp']}")
    out.append(f"  backend   : {config.api_base_url}")

    async with DrivenClient(config, device_source=device) as client:
        if args.cities:
            try:
                cities = await client.get_parking_cities(token=args.token)
            except DrivenError as exc:
                out.append(f"  !! parking cities failed: {exc}")
                result["cities"] = {"error": str(exc)}
            else:
                out.append(f"  cities    : {', '.join(cities) or '-'}")
                result["cities"] = cities

        snapshot = await client.refresh(args.country, categories=categories, token=args.token)

    if snapshot is None:
        print("Cycle was superseded; nothing to dump.", file=sys.stderr)
        sys.exit(1)

    _print_snapshot(snapshot, out)
    result["snapshot"] = _snapshot_to_dict(snapshot)

    # ── Output ──
    if args.json_mode:
        payload = json.dumps(result, indent=2, default=str, ensure_ascii=False)
        if args.output:
            Path(args.output).write_text(payload, encoding="utf-8")
            print(f"JSON written to {args.output}", file=sys.stderr)
        else:
            print(payload)
        return

    text = "\n".join(out)
    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        print(f"Dump written to {args.output}")
    else:
        print(text)


if __name__ == "__main__":
    asyncio.run(main())
