"""
FactoryNear CLI entrypoint.

This CLI is intended for quick local demos and debugging without a web UI.
It delegates all location and filtering logic to `factorynear.session.controller`.
"""

from __future__ import annotations

import argparse
import asyncio
import json
from typing import Any

from factorynear.catalog.loader import load_dataset
from factorynear.config.settings import get_settings
from factorynear.core.logging import configure_logging
from factorynear.display import location_status, one_line_summary, truncation_note
from factorynear.domain.models import FilterCriteria
from factorynear.filtering.engine import FilterOptions
from factorynear.location.resolver import LocationResolver
from factorynear.session.controller import SessionController


def _controller(args: argparse.Namespace) -> SessionController:
    settings = get_settings()
    # A failed load leaves the dataset unavailable (None); filtering then returns nothing.
    dataset = load_dataset(settings, path=args.dataset) if args.dataset else load_dataset(settings)
    return SessionController(
        dataset=dataset,
        resolver=LocationResolver.from_settings(settings),
        options=FilterOptions.from_settings(settings),
    )


def _build_controller(args: argparse.Namespace) -> SessionController:
    controller = _controller(args)
    asyncio.run(controller.start())
    return controller


def _apply_manual(controller: SessionController, lat: str | None, lon: str | None) -> None:
    if lat is not None and lon is not None:
        controller.set_manual_location(lat, lon)


def _cmd_filter(args: argparse.Namespace) -> int:
    """Handle the `filter` subcommand."""
    controller = _build_controller(args)
    _apply_manual(controller, args.lat, args.lon)

    criteria = FilterCriteria(
        search_text=args.search or "",
        categories=frozenset(args.category or []),
        districts=frozenset(args.district or []),
        radius_only=bool(args.radius_only),
        high_risk_only=bool(args.high_risk_only),
    )
    result = controller.filter(criteria)
    views = controller.views(result)

    if args.json:
        payload = {
            "location": controller.location.model_dump(mode="json"),
            "total_count": result.total_count,
            "display_cap": result.display_cap,
            "items": [v.model_dump(mode="json") for v in views],
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    print(f"Location: {location_status(controller.location)}")
    print(f"Matches: {result.total_count}")
    for i, view in enumerate(views, start=1):
        print(f"{i:>2}. {one_line_summary(view)}")
    note = truncation_note(result)
    if note:
        print(note)
    return 0


def _cmd_locate(args: argparse.Namespace) -> int:
    controller = _build_controller(args)
    _apply_manual(controller, args.manual_lat, args.manual_lon)
    print(json.dumps(controller.location.model_dump(mode="json"), ensure_ascii=False, indent=2))
    return 0


def _cmd_meta(args: argparse.Namespace) -> int:
    controller = _controller(args)
    payload = controller.catalog_meta().model_dump(mode="json")
    payload["risk_criteria"] = get_settings().risk.criteria
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the FactoryNear CLI."""
    parser = argparse.ArgumentParser(prog="factorynear")
    sub = parser.add_subparsers(dest="command", required=True)

    flt = sub.add_parser("filter", help="Filter factories around the working location.")
    flt.add_argument("--dataset", type=str, default=None, help="GeoJSON path (default: settings)")
    flt.add_argument("--search", type=str, default=None, help="Match name, owner or business (case-insensitive)")
    flt.add_argument("--category", action="append", default=[], help="Repeatable category code filter")
    flt.add_argument("--district", action="append", default=[], help="Repeatable district filter")
    flt.add_argument("--radius-only", action="store_true", help="Only factories within the configured radius")
    flt.add_argument("--high-risk-only", action="store_true", help="Only high-risk category codes")
    flt.add_argument("--lat", type=str, default=None, help="Manual latitude (overrides detected location)")
    flt.add_argument("--lon", type=str, default=None, help="Manual longitude (overrides detected location)")
    flt.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    flt.set_defaults(func=_cmd_filter)

    loc = sub.add_parser("locate", help="Resolve the working location and print its state.")
    loc.add_argument("--dataset", type=str, default=None)
    loc.add_argument("--manual-lat", type=str, default=None)
    loc.add_argument("--manual-lon", type=str, default=None)
    loc.set_defaults(func=_cmd_locate)

    meta = sub.add_parser("meta", help="Dataset summary: counts, categories, districts.")
    meta.add_argument("--dataset", type=str, default=None)
    meta.set_defaults(func=_cmd_meta)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m factorynear.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
