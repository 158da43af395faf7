"""Utilities for validating schedule configuration data and surfacing issues."""

from __future__ import annotations

import argparse
from typing import Sequence

from .schedule_config import (
    CategoryConfig,
    ConfigurationError,
    ScheduleConfiguration,
    ScheduleMeta,
    available_years,
    load_schedule_configuration,
)
from .schema import ONE, ZERO

KNOWN_CURRENCY_SYMBOLS = {"NGN": "₦"}


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_individual(category: CategoryConfig) -> list[str]:
    scope = "individual"
    errors: list[str] = []

    ceiling = category.schedule.zero_rate_ceiling
    if category.exemption_threshold != ceiling:
        errors.append(
            _format_scope(
                scope,
                (
                    f"exemption threshold {category.exemption_threshold} does not match "
                    f"the zero-rated band ceiling {ceiling}"
                ),
            )
        )

    if category.levy_rate != ZERO:
        errors.append(_format_scope(scope, "individual taxpayers carry no levy"))

    if not category.labels.monthly_equivalent:
        errors.append(_format_scope(scope, "missing label for the monthly equivalent"))

    return errors


def _validate_small_business(category: CategoryConfig) -> list[str]:
    scope = "small_business"
    errors: list[str] = []

    brackets = category.schedule.brackets
    first_upper = brackets[0].upper_bound
    if first_upper is None or category.exemption_threshold != first_upper:
        errors.append(
            _format_scope(
                scope,
                (
                    f"exemption threshold {category.exemption_threshold} does not match "
                    f"the first band's upper bound {first_upper}"
                ),
            )
        )

    if len(brackets) != 2 or brackets[0].rate != ZERO:
        errors.append(
            _format_scope(
                scope,
                "schedule should hold one zero-rated band and one flat band above it",
            )
        )

    if category.levy_rate > ONE:
        errors.append(
            _format_scope(scope, f"levy rate {category.levy_rate} must be between 0 and 1")
        )

    if category.levy_rate > ZERO and not category.labels.levy:
        errors.append(_format_scope(scope, "missing label for the development levy"))

    return errors


def _validate_meta(meta: ScheduleMeta) -> list[str]:
    errors: list[str] = []

    expected = KNOWN_CURRENCY_SYMBOLS.get(meta.currency)
    if expected is None:
        errors.append(_format_scope("meta", f"unknown currency code '{meta.currency}'"))
    elif meta.currency_symbol != expected:
        errors.append(
            _format_scope(
                "meta",
                f"currency symbol '{meta.currency_symbol}' does not match {meta.currency}",
            )
        )

    if meta.notes_url and not meta.notes_url.startswith(("http://", "https://")):
        errors.append(_format_scope("meta", "notes URL must be absolute"))

    return errors


def validate_schedule_configuration(config: ScheduleConfiguration) -> list[str]:
    """Return consistency issues detected in ``config``."""

    errors: list[str] = []

    errors.extend(_validate_meta(config.meta))
    errors.extend(_validate_individual(config.individual))
    errors.extend(_validate_small_business(config.small_business))

    return errors


def validate_all_years(years: Sequence[int] | None = None) -> dict[int, list[str]]:
    """Validate all configured schedule versions and return issues keyed by year."""

    targets = years or available_years()
    results: dict[int, list[str]] = {}

    for year in targets:
        config = load_schedule_configuration(year)
        results[int(year)] = validate_schedule_configuration(config)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Validate configured bracket schedules and report issues helpful to contributors."
        )
    )
    parser.add_argument(
        "years",
        nargs="*",
        type=int,
        help="Specific schedule versions to validate (defaults to all configured years)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    years = args.years or available_years()

    if not years:
        parser.print_help()
        return 1

    exit_code = 0

    for year in years:
        try:
            config = load_schedule_configuration(year)
        except (FileNotFoundError, ConfigurationError) as error:
            print(f"[{year}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_schedule_configuration(config)
        if issues:
            exit_code = 1
            print(f"[{year}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{year}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
