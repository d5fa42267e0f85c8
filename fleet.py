#!/usr/bin/env python3
"""
Unified CLI for fleet maintenance urgency.

Commands:
  rank           - Rank the fleet by one maintenance deadline
  show           - Show all maintenance deadlines for one vehicle
  due            - List every deadline that needs attention, grouped by urgency
  update-mileage - Update current vehicle mileage
  set-date       - Set or clear an inspection, tires or insurance date
  set-service    - Set or clear the next service mileage
"""

import argparse
import logging
import math
import sys
from datetime import date
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from urgency import (
    InvalidArgumentError,
    SortKey,
    UrgencyLevel,
    UrgencyResult,
    VehicleUrgency,
    evaluate_fleet,
    evaluate_vehicle,
    format_days_remaining,
    load_fleet,
    load_vehicle,
    rank_vehicles,
    save_current_mileage,
    save_maintenance_date,
    save_next_service_mileage,
)
from urgency.loader import find_vehicle_file
from urgency.vehicle import FACT_LABELS

# =============================================================================
# Formatting helpers
# =============================================================================


def format_km(km: Optional[float]) -> str:
    """Format kilometers for display."""
    return f"{km:,.0f} km" if km is not None else "-"


def format_date(value: Optional[date]) -> str:
    """Format a date for display."""
    return value.isoformat() if value is not None else "-"


def format_result(result: UrgencyResult) -> str:
    """Format a classified fact as 'LEVEL label' (e.g., 'CRITICAL 3 days')."""
    if not result.is_tracked:
        return "-"
    return f"{result.level.name} {result.label}"


def format_outlook(fact: str, result: UrgencyResult) -> str:
    """Long-form countdown for date facts, the label for mileage."""
    if fact == "service":
        return result.label
    return format_days_remaining(result.remaining)


def parse_date_arg(value: str) -> date:
    """argparse type for YYYY-MM-DD dates."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}' (expected YYYY-MM-DD)")


def is_valid_mileage(value: float) -> bool:
    """Mileage must be a real odometer value (no nan, inf or negatives)."""
    return math.isfinite(value) and value >= 0


def parse_optional(value: str) -> Optional[str]:
    """Map 'none' / '-' to None so a value can be cleared."""
    return None if value.lower() in ("none", "-", "") else value


# =============================================================================
# Rank command
# =============================================================================


def make_rank_table(bundles: List[VehicleUrgency]) -> List[List[str]]:
    """Convert ranked bundles to table rows."""
    rows = []
    for position, bundle in enumerate(bundles, start=1):
        vehicle = bundle.vehicle
        rows.append(
            [
                position,
                vehicle.name if vehicle else bundle.vehicle_id,
                format_result(bundle.inspection),
                format_result(bundle.tires),
                format_result(bundle.insurance),
                format_result(bundle.service),
                FACT_LABELS[bundle.most_urgent_fact],
            ]
        )
    return rows


def cmd_rank(args):
    """Rank the fleet by one maintenance deadline."""
    sort_key = SortKey.parse(args.sort_by)
    bundles = evaluate_fleet(load_fleet(args.fleet_dir), args.today)
    ranked = rank_vehicles(bundles, sort_key)

    print(f"Fleet: {args.fleet_dir} ({len(ranked)} vehicles)")
    print(f"As of: {args.today.isoformat()}")
    print(f"Sorted by: {FACT_LABELS[sort_key.value]}")
    print()

    if not ranked:
        print("No vehicles found.")
        return 0

    headers = ["#", "Vehicle", "Inspection", "Tires", "Insurance", "Service", "Most urgent"]
    print(tabulate(make_rank_table(ranked), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Show command
# =============================================================================


def make_vehicle_table(bundle: VehicleUrgency) -> List[List[str]]:
    """Convert one vehicle's facts to table rows."""
    vehicle = bundle.vehicle
    deadlines = {
        "inspection": format_date(vehicle.inspection_expiry),
        "tires": format_date(vehicle.tires_next_change_date),
        "insurance": format_date(vehicle.insurance_expiry),
        "service": format_km(vehicle.next_service_mileage),
    }
    rows = []
    for fact, result in bundle.facts:
        rows.append(
            [
                FACT_LABELS[fact],
                deadlines[fact],
                result.level.name,
                format_outlook(fact, result),
            ]
        )
    return rows


def cmd_show(args):
    """Show all maintenance deadlines for one vehicle."""
    path = find_vehicle_file(args.fleet_dir, args.vehicle_id)
    if path is None:
        print(f"Error: Unknown vehicle '{args.vehicle_id}'")
        return 1

    vehicle = load_vehicle(path)
    bundle = evaluate_vehicle(vehicle, args.today)

    print(f"Vehicle: {vehicle.name}")
    print(f"Current mileage: {format_km(vehicle.current_mileage)} (as of {args.today.isoformat()})")
    print(
        f"Most urgent: {FACT_LABELS[bundle.most_urgent_fact]} "
        f"({bundle.most_urgent.level.name}, {bundle.most_urgent.label})"
    )
    print()

    headers = ["Item", "Deadline", "Status", "Remaining"]
    print(tabulate(make_vehicle_table(bundle), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Due command
# =============================================================================


def collect_due(bundles: List[VehicleUrgency], level: UrgencyLevel) -> List[List[str]]:
    """Rows for every fact at the given level, most urgent first."""
    matches = [
        (bundle, fact, result)
        for bundle in bundles
        for fact, result in bundle.facts
        if result.level is level
    ]
    matches.sort(key=lambda m: m[2].remaining)
    return [
        [
            bundle.vehicle.name if bundle.vehicle else bundle.vehicle_id,
            FACT_LABELS[fact],
            result.label,
        ]
        for bundle, fact, result in matches
    ]


def cmd_due(args):
    """List every deadline that needs attention, grouped by urgency."""
    bundles = evaluate_fleet(load_fleet(args.fleet_dir), args.today)

    print(f"Fleet: {args.fleet_dir} ({len(bundles)} vehicles)")
    print(f"As of: {args.today.isoformat()}")
    print()

    headers = ["Vehicle", "Item", "Remaining"]
    found = False
    for level in UrgencyLevel:
        if level is UrgencyLevel.OK:
            continue
        rows = collect_due(bundles, level)
        if rows:
            found = True
            print(f"{level.name}:")
            print(tabulate(rows, headers=headers, tablefmt="simple"))
            print()

    if not found:
        print("Nothing due.")
    return 0


# =============================================================================
# Update commands
# =============================================================================


def cmd_update_mileage(args):
    """Update current vehicle mileage."""
    path = find_vehicle_file(args.fleet_dir, args.vehicle_id)
    if path is None:
        print(f"Error: Unknown vehicle '{args.vehicle_id}'")
        return 1
    if not is_valid_mileage(args.mileage):
        print("Error: Mileage must be a finite number >= 0")
        return 1

    vehicle = load_vehicle(path)

    print(f"Vehicle: {vehicle.name}")
    print(f"Current mileage: {format_km(vehicle.current_mileage)}")
    print(f"New mileage:     {format_km(args.mileage)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_current_mileage(path, args.mileage)
    print("Mileage updated.")
    return 0


def cmd_set_date(args):
    """Set or clear an inspection, tires or insurance date."""
    path = find_vehicle_file(args.fleet_dir, args.vehicle_id)
    if path is None:
        print(f"Error: Unknown vehicle '{args.vehicle_id}'")
        return 1

    raw = parse_optional(args.date)
    new_date = None
    if raw is not None:
        try:
            new_date = date.fromisoformat(raw)
        except ValueError:
            print(f"Error: Invalid date '{args.date}' (expected YYYY-MM-DD or 'none')")
            return 1

    vehicle = load_vehicle(path)
    print(f"Vehicle: {vehicle.name}")
    print(f"{FACT_LABELS[args.fact]}: {format_date(new_date)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_maintenance_date(path, args.fact, new_date)
    print("Date updated.")
    return 0


def cmd_set_service(args):
    """Set or clear the next service mileage."""
    path = find_vehicle_file(args.fleet_dir, args.vehicle_id)
    if path is None:
        print(f"Error: Unknown vehicle '{args.vehicle_id}'")
        return 1

    raw = parse_optional(args.mileage)
    mileage = None
    if raw is not None:
        try:
            mileage = float(raw)
        except ValueError:
            mileage = None
        if mileage is None or not is_valid_mileage(mileage):
            print(f"Error: Invalid mileage '{args.mileage}'")
            return 1

    vehicle = load_vehicle(path)
    print(f"Vehicle: {vehicle.name}")
    print(f"Next service: {format_km(mileage)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_next_service_mileage(path, mileage)
    print("Service mileage updated.")
    return 0


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fleet maintenance urgency",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s vehicles rank
  %(prog)s vehicles rank --sort-by service
  %(prog)s vehicles --today 2026-03-01 due
  %(prog)s vehicles show yaris
  %(prog)s vehicles update-mileage yaris 48250
  %(prog)s vehicles set-date yaris inspection 2027-05-01
  %(prog)s vehicles set-service yaris none
""",
    )
    parser.add_argument(
        "fleet_dir",
        type=Path,
        help="Directory containing vehicle YAML files",
    )
    parser.add_argument(
        "--today",
        type=parse_date_arg,
        default=None,
        help="Evaluate as of this date, YYYY-MM-DD (default: today)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Rank subcommand
    rank_parser = subparsers.add_parser(
        "rank", help="Rank the fleet by one maintenance deadline"
    )
    rank_parser.add_argument(
        "--sort-by",
        choices=[k.value for k in SortKey],
        default=SortKey.INSPECTION.value,
        help="Deadline to rank by (default: inspection)",
    )

    # Show subcommand
    show_parser = subparsers.add_parser(
        "show", help="Show all maintenance deadlines for one vehicle"
    )
    show_parser.add_argument("vehicle_id", type=str, help="Vehicle id (file name)")

    # Due subcommand
    subparsers.add_parser(
        "due", help="List every deadline that needs attention, grouped by urgency"
    )

    # Update Mileage subcommand
    update_miles_parser = subparsers.add_parser(
        "update-mileage", help="Update current vehicle mileage"
    )
    update_miles_parser.add_argument("vehicle_id", type=str, help="Vehicle id")
    update_miles_parser.add_argument("mileage", type=float, help="Current mileage (km)")
    update_miles_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be updated without saving",
    )

    # Set Date subcommand
    set_date_parser = subparsers.add_parser(
        "set-date", help="Set or clear an inspection, tires or insurance date"
    )
    set_date_parser.add_argument("vehicle_id", type=str, help="Vehicle id")
    set_date_parser.add_argument(
        "fact", choices=["inspection", "tires", "insurance"], help="Which date to set"
    )
    set_date_parser.add_argument(
        "date", type=str, help="Date in YYYY-MM-DD format, or 'none' to clear"
    )
    set_date_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be updated without saving",
    )

    # Set Service subcommand
    set_service_parser = subparsers.add_parser(
        "set-service", help="Set or clear the next service mileage"
    )
    set_service_parser.add_argument("vehicle_id", type=str, help="Vehicle id")
    set_service_parser.add_argument(
        "mileage", type=str, help="Service due mileage (km), or 'none' to clear"
    )
    set_service_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be updated without saving",
    )

    return parser


COMMANDS = {
    "rank": cmd_rank,
    "show": cmd_show,
    "due": cmd_due,
    "update-mileage": cmd_update_mileage,
    "set-date": cmd_set_date,
    "set-service": cmd_set_service,
}


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # "Now" is read here, never inside the urgency core
    if args.today is None:
        args.today = date.today()

    # Validate fleet directory exists
    if not args.fleet_dir.is_dir():
        print(f"Error: Directory not found: {args.fleet_dir}")
        return 1

    try:
        return COMMANDS[args.command](args)
    except InvalidArgumentError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
