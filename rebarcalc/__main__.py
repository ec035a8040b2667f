"""
RebarCalc - CLI Entry Point

Commands:
    profiles   - List code profiles and their validation status
    calculate  - Compute a bar bending schedule from a YAML/JSON request
    breakdown  - Show the step breakdown of one canonical-shape bar
    validate   - Validate a request without computing it
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .errors import RebarCalcError
from .models.schedule_schema import ScheduleRequest
from .profiles.registry import ProfileRegistry
from .profiles.validator import validate_profile
from .loader import load_request_data, resolve_config, compute_schedule
from .schedule.engine import shape_bar_breakdown
from .schedule.verification import summarize_issues
from .validation import validate_schedule_request

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )


def _registry(args) -> ProfileRegistry:
    return ProfileRegistry(Path(args.profiles) if args.profiles else None)


def _load_request(path: str):
    """Load and validate a request file. Returns (request, errors)."""
    data = load_request_data(Path(path))
    errors = validate_schedule_request(data)
    if errors:
        return None, errors
    return ScheduleRequest.model_validate(data), []


def _print_errors(errors):
    print(f"{len(errors)} validation error(s):")
    for error in errors:
        print(f"  - {error}")


def cmd_profiles(args):
    """List code profiles."""
    registry = _registry(args)
    for profile in registry.all():
        result = validate_profile(profile)
        status = "OK" if result.is_valid else f"{len(result.errors)} errors"
        print(f"{profile.id:10s} {profile.name:20s} cover={profile.default_cover:g} "
              f"hook={profile.hook_multiplier:g}d "
              f"bends={profile.bend_deductions.deg45:g}/{profile.bend_deductions.deg90:g}/"
              f"{profile.bend_deductions.deg135:g} [{status}]")
        for warning in result.warnings:
            print(f"    warning: {warning}")
    return 0


def cmd_calculate(args):
    """Compute a schedule."""
    request, errors = _load_request(args.input)
    if errors:
        _print_errors(errors)
        return 1

    _config, schedule = compute_schedule(request, _registry(args))

    if args.format == 'json':
        output = json.dumps(schedule.to_dict(), indent=2)
        if args.output:
            Path(args.output).write_text(output)
            print(f"Schedule written to {args.output}")
        else:
            print(output)
        return 0

    print(f"{'Bar':12s} {'Type':28s} {'Dia':>4s} {'Cut (mm)':>10s} {'Nos':>6s} {'Length (m)':>11s} {'Weight (kg)':>12s}")
    for r in schedule.results:
        label = r.bar_type or r.shape_name
        print(f"{r.id:12s} {label[:28]:28s} {r.diameter:4d} {r.cut_length:10.0f} "
              f"{r.total_bars:6d} {r.total_length_m:11.2f} {r.total_weight:12.2f}")

    total = schedule.summary.grand_total
    print("\nBy diameter:")
    for dia, group in schedule.summary.by_diameter.items():
        print(f"  {dia:>3} mm: {group.total_length_m:10.2f} m {group.total_weight_kg:10.2f} kg")
    print(f"\nTotal: {total.total_bars} bars, {total.total_length_m:.2f} m, "
          f"{total.total_weight_kg:.2f} kg ({total.total_weight_mt:.3f} MT)")

    if schedule.issues:
        counts = summarize_issues(schedule.issues)
        print(f"\nQC: {counts['error']} errors, {counts['warning']} warnings")
        for issue in schedule.issues:
            print(f"  [{issue.code.value}] {issue.severity.value.upper():7s} {issue.bar_id}: {issue.message}")
    return 0


def cmd_breakdown(args):
    """Show the breakdown of one canonical-shape bar."""
    request, errors = _load_request(args.input)
    if errors:
        _print_errors(errors)
        return 1

    config = resolve_config(request, _registry(args))
    for bar_input in request.shape_bars:
        if bar_input.id == args.bar:
            breakdown = shape_bar_breakdown(bar_input.to_shape_bar(), config)
            if args.format == 'json':
                print(json.dumps(breakdown.to_dict(), indent=2))
            else:
                print(breakdown.format_text())
            return 0

    print(f"No canonical-shape bar with id {args.bar}")
    return 1


def cmd_validate(args):
    """Validate a request."""
    data = load_request_data(Path(args.input))
    errors = validate_schedule_request(data)
    if errors:
        _print_errors(errors)
        return 1
    print("Valid")
    return 0


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description='RebarCalc - Bar Bending Schedule Engine',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List code profiles
  python -m rebarcalc profiles

  # Compute a schedule
  python -m rebarcalc calculate project.yaml --format table

  # Show how a bar's cut length is built up
  python -m rebarcalc breakdown project.yaml --bar B1
        """
    )

    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose output')
    parser.add_argument('--profiles', help='Alternative code profiles YAML file')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    profiles_parser = subparsers.add_parser('profiles', help='List code profiles')
    profiles_parser.set_defaults(func=cmd_profiles)

    calc_parser = subparsers.add_parser('calculate', help='Compute a schedule')
    calc_parser.add_argument('input', help='Schedule request (.yaml or .json)')
    calc_parser.add_argument('--format', '-f', choices=['json', 'table'], default='json',
                             help='Output format')
    calc_parser.add_argument('--output', '-o', help='Write JSON output to a file')
    calc_parser.set_defaults(func=cmd_calculate)

    breakdown_parser = subparsers.add_parser('breakdown', help='Breakdown of one shape bar')
    breakdown_parser.add_argument('input', help='Schedule request (.yaml or .json)')
    breakdown_parser.add_argument('--bar', '-b', required=True, help='Bar id')
    breakdown_parser.add_argument('--format', '-f', choices=['json', 'text'], default='text',
                                  help='Output format')
    breakdown_parser.set_defaults(func=cmd_breakdown)

    validate_parser = subparsers.add_parser('validate', help='Validate a request')
    validate_parser.add_argument('input', help='Schedule request (.yaml or .json)')
    validate_parser.set_defaults(func=cmd_validate)

    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if not args.command:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except RebarCalcError as e:
        logger.error(str(e))
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
