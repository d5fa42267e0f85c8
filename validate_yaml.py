#!/usr/bin/env python3
"""Validate fleet vehicle YAML files against the schema."""
import sys
from datetime import date, datetime
from pathlib import Path

import yaml
from jsonschema import validate, ValidationError

# Keys that hold a maintenance date (may be YAML dates, ISO strings or timestamps)
DATE_KEYS = ("inspectionExpiry", "tiresNextChangeDate", "insuranceExpiry")


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def normalize_dates(data):
    """
    Convert unquoted YAML dates/timestamps to ISO strings.

    safe_load turns `2026-11-02` into a date object, which the vehicle
    loader accepts but JSON schema can only describe as a string.
    """
    if not isinstance(data, dict):
        return data
    normalized = dict(data)
    for key in DATE_KEYS:
        value = normalized.get(key)
        if isinstance(value, (date, datetime)):
            normalized[key] = value.isoformat()
    return normalized


def validate_vehicle_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single vehicle YAML file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
        validate(instance=normalize_dates(data), schema=schema)
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except OSError as e:
        errors.append(f"Error: {e}")
    return errors


def main(argv=None):
    """Validate all vehicle YAML files in a fleet directory (default: vehicles/)."""
    argv = sys.argv[1:] if argv is None else argv
    schema = load_schema()
    vehicles_dir = Path(argv[0]) if argv else Path(__file__).parent / "vehicles"

    if not vehicles_dir.is_dir():
        print(f"Error: fleet directory not found: {vehicles_dir}")
        return 1

    yaml_files = sorted(vehicles_dir.glob("*.yaml")) + sorted(vehicles_dir.glob("*.yml"))
    if not yaml_files:
        print(f"Warning: No vehicle files found in {vehicles_dir}")
        return 0

    failed = 0
    for filepath in yaml_files:
        errors = validate_vehicle_file(filepath, schema)
        if errors:
            failed += 1
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
        else:
            print(f"OK: {filepath.name}")

    print()
    print(f"{len(yaml_files) - failed}/{len(yaml_files)} vehicle files valid")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
