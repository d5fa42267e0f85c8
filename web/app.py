"""Flask web application for the fleet maintenance urgency dashboard."""

import math
import os
from datetime import date
from pathlib import Path
from typing import Optional

from flask import Flask, render_template, request, redirect, url_for, flash

# Add parent directory to path for model imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from urgency import (
    InvalidArgumentError,
    SortKey,
    UrgencyLevel,
    count_by_level,
    evaluate_fleet,
    evaluate_vehicle,
    format_days_remaining,
    rank_vehicles,
)
from urgency.loader import (
    DATE_FIELDS,
    find_vehicle_file,
    get_vehicle_files,
    load_vehicle,
    save_current_mileage,
    save_maintenance_date,
    save_next_service_mileage,
)
from urgency.vehicle import FACT_LABELS

app = Flask(__name__)
app.secret_key = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")

# Directory of vehicle YAML files (defaults to <project>/vehicles)
app.config["FLEET_DIR"] = Path(
    os.environ.get("FLEET_DIR", Path(__file__).parent.parent / "vehicles")
)


def get_fleet_dir() -> Path:
    return Path(app.config["FLEET_DIR"])


def get_vehicle_path(vehicle_id: str) -> Optional[Path]:
    """Get full path for a vehicle ID (.yaml or .yml), None if unknown."""
    return find_vehicle_file(get_fleet_dir(), vehicle_id)


def parse_mileage(value: str) -> float:
    """Parse a form mileage; nan, inf and negatives raise ValueError."""
    km = float(value)
    if not math.isfinite(km) or km < 0:
        raise ValueError(f"Invalid mileage {value!r}")
    return km


def get_today() -> date:
    """Evaluation date: ?today=YYYY-MM-DD, otherwise the current date."""
    value = request.args.get("today")
    if value:
        try:
            return date.fromisoformat(value)
        except ValueError:
            flash(f"Invalid date '{value}', showing today", "error")
    return date.today()


def level_color(level: UrgencyLevel) -> str:
    """Get Tailwind color classes for an urgency level."""
    colors = {
        UrgencyLevel.EXPIRED: "bg-red-100 text-red-800 border-red-200",
        UrgencyLevel.CRITICAL: "bg-orange-100 text-orange-800 border-orange-200",
        UrgencyLevel.WARNING: "bg-amber-100 text-amber-800 border-amber-200",
        UrgencyLevel.SOON: "bg-yellow-100 text-yellow-800 border-yellow-200",
        UrgencyLevel.OK: "bg-green-100 text-green-800 border-green-200",
    }
    return colors.get(level, "bg-gray-100 text-gray-800")


def token_badge_color(token: str) -> str:
    """Get Tailwind color classes for a severity token badge."""
    colors = {
        "expired": "bg-red-600 text-white",
        "critical": "bg-red-500 text-white",
        "warning": "bg-orange-500 text-white",
        "soon": "bg-yellow-500 text-white",
        "ok": "bg-green-500 text-white",
    }
    return colors.get(token, "bg-gray-500 text-white")


def format_km(km):
    """Format kilometers with comma separator."""
    if km is None:
        return "—"
    return f"{km:,.0f} km"


def format_date(value):
    """Format date for display."""
    if value is None:
        return "—"
    return value.isoformat()


# Register template filters
app.jinja_env.filters["format_km"] = format_km
app.jinja_env.filters["format_date"] = format_date
app.jinja_env.filters["format_days_remaining"] = format_days_remaining
app.jinja_env.filters["level_color"] = level_color
app.jinja_env.filters["token_badge_color"] = token_badge_color


@app.route("/")
def index():
    """Dashboard: the fleet ranked by the selected deadline."""
    try:
        sort_key = SortKey.parse(request.args.get("sort", SortKey.INSPECTION.value))
    except InvalidArgumentError as e:
        flash(str(e), "error")
        sort_key = SortKey.INSPECTION

    today = get_today()
    vehicles = [load_vehicle(path) for path in get_vehicle_files(get_fleet_dir())]
    bundles = evaluate_fleet(vehicles, today)
    ranked = rank_vehicles(bundles, sort_key)
    app.logger.debug("Ranked %d vehicles by %s", len(ranked), sort_key.value)

    level_counts = {
        level.token: count for level, count in count_by_level(bundles).items()
    }

    return render_template(
        "index.html",
        bundles=ranked,
        sort_key=sort_key,
        sort_keys=list(SortKey),
        fact_labels=FACT_LABELS,
        level_counts=level_counts,
        today=today,
    )


@app.route("/vehicle/<vehicle_id>")
def vehicle_detail(vehicle_id: str):
    """Vehicle detail page with all four deadlines."""
    path = get_vehicle_path(vehicle_id)
    if path is None:
        flash(f"Vehicle '{vehicle_id}' not found", "error")
        return redirect(url_for("index"))

    today = get_today()
    vehicle = load_vehicle(path)
    bundle = evaluate_vehicle(vehicle, today)

    return render_template(
        "vehicle.html",
        vehicle_id=vehicle_id,
        vehicle=vehicle,
        bundle=bundle,
        fact_labels=FACT_LABELS,
        today=today,
    )


@app.route("/vehicle/<vehicle_id>/mileage", methods=["POST"])
def update_mileage(vehicle_id: str):
    """Handle update mileage form submission."""
    path = get_vehicle_path(vehicle_id)
    if path is None:
        flash(f"Vehicle '{vehicle_id}' not found", "error")
        return redirect(url_for("index"))

    mileage = request.form.get("mileage")
    if not mileage:
        flash("Please enter mileage", "error")
        return redirect(url_for("vehicle_detail", vehicle_id=vehicle_id))

    try:
        km = parse_mileage(mileage)
        save_current_mileage(path, km)
    except ValueError:
        flash("Invalid mileage value", "error")
        return redirect(url_for("vehicle_detail", vehicle_id=vehicle_id))

    flash(f"Updated mileage to {km:,.0f} km", "success")
    return redirect(url_for("vehicle_detail", vehicle_id=vehicle_id))


@app.route("/vehicle/<vehicle_id>/deadlines", methods=["POST"])
def update_deadlines(vehicle_id: str):
    """
    Handle deadlines form submission.

    Empty fields clear the deadline (the item is then shown as not set).
    """
    path = get_vehicle_path(vehicle_id)
    if path is None:
        flash(f"Vehicle '{vehicle_id}' not found", "error")
        return redirect(url_for("index"))

    # Parse everything before writing anything
    dates = {}
    for fact in DATE_FIELDS:
        value = request.form.get(fact) or None
        try:
            dates[fact] = date.fromisoformat(value) if value else None
        except ValueError:
            flash(f"Invalid {FACT_LABELS[fact].lower()} date '{value}'", "error")
            return redirect(url_for("vehicle_detail", vehicle_id=vehicle_id))

    service = request.form.get("service") or None
    try:
        service_km = parse_mileage(service) if service else None
    except ValueError:
        flash(f"Invalid service mileage '{service}'", "error")
        return redirect(url_for("vehicle_detail", vehicle_id=vehicle_id))

    for fact, value in dates.items():
        save_maintenance_date(path, fact, value)
    save_next_service_mileage(path, service_km)

    flash("Deadlines updated", "success")
    return redirect(url_for("vehicle_detail", vehicle_id=vehicle_id))


@app.errorhandler(InvalidArgumentError)
def handle_invalid_argument(error):
    """Out-of-range vehicle data (e.g., negative mileage) in a fleet file."""
    app.logger.error("Invalid vehicle data: %s", error)
    return render_template("error.html", message=str(error)), 400


if __name__ == "__main__":
    # Run with debug mode for development
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    app.run(debug=True, host="0.0.0.0", port=5001)
