"""Pydantic models describing the bracket schedule configuration schema."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, NoReturn, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)

ZERO = Decimal("0")
ONE = Decimal("1")


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class InvalidSchedule(ConfigurationError):
    """Raised when a bracket table is empty, unsorted, gapped or overlapping."""


def coerce_decimal(value: Any) -> Decimal:
    """Convert configuration numbers to :class:`~decimal.Decimal` without float drift."""

    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ConfigurationError("Boolean values are not valid amounts or rates")
    if isinstance(value, float):
        value = str(value)
    if isinstance(value, (int, str)):
        try:
            converted = Decimal(value)
        except InvalidOperation as exc:
            raise ConfigurationError(f"'{value}' is not a valid decimal number") from exc
        if not converted.is_finite():
            raise ConfigurationError("Configuration amounts must be finite numbers")
        return converted
    raise ConfigurationError(f"Unsupported numeric value: {value!r}")


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class TaxBracket(ImmutableModel):
    """Represents a single band of a progressive schedule."""

    lower_bound: Decimal | None = Field(default=None, alias="lower")
    upper_bound: Decimal | None = Field(default=None, alias="upper")
    rate: Decimal

    @field_validator("lower_bound", "upper_bound", "rate", mode="before")
    @classmethod
    def _coerce_numbers(cls, value: Any) -> Decimal | None:
        if value is None:
            return None
        return coerce_decimal(value)

    @model_validator(mode="after")
    def _validate_values(self) -> TaxBracket:
        if self.rate < ZERO or self.rate > ONE:
            raise InvalidSchedule("Tax rates must be between 0 and 1")
        if self.upper_bound is not None and self.upper_bound <= ZERO:
            raise InvalidSchedule("Upper bounds must be positive values")
        if self.lower_bound is not None and self.lower_bound < ZERO:
            raise InvalidSchedule("Lower bounds must be non-negative")
        return self


class BracketSchedule(ImmutableModel):
    """Ordered bracket table covering ``[0, +inf)`` without gaps or overlaps.

    Cumulative tax owed at each bracket's lower bound is computed once during
    validation so evaluation only needs the bracket containing the amount.
    """

    brackets: tuple[TaxBracket, ...]

    _lower_bounds: tuple[Decimal, ...] = PrivateAttr(default=())
    _cumulative: tuple[Decimal, ...] = PrivateAttr(default=())

    @model_validator(mode="before")
    @classmethod
    def _wrap_sequence(cls, data: Any) -> Any:
        if isinstance(data, Sequence) and not isinstance(data, (str, bytes)):
            return {"brackets": data}
        return data

    @model_validator(mode="after")
    def _validate_sequence(self) -> BracketSchedule:
        if not self.brackets:
            raise InvalidSchedule("At least one tax bracket must be defined")

        last_index = len(self.brackets) - 1
        lower = ZERO
        running = ZERO
        lower_bounds: list[Decimal] = []
        cumulative: list[Decimal] = []

        for index, bracket in enumerate(self.brackets):
            declared_lower = bracket.lower_bound
            if declared_lower is not None and declared_lower != lower:
                if declared_lower > lower:
                    raise InvalidSchedule(
                        f"Gap between {lower} and {declared_lower} in tax brackets"
                    )
                raise InvalidSchedule(
                    f"Tax bracket starting at {declared_lower} overlaps the previous band"
                )

            upper = bracket.upper_bound
            if upper is None and index != last_index:
                raise InvalidSchedule("Only the final tax bracket may be open-ended")
            if upper is not None and upper <= lower:
                raise InvalidSchedule("Tax brackets must be in ascending order")

            lower_bounds.append(lower)
            cumulative.append(running)

            if upper is not None:
                running += (upper - lower) * bracket.rate
                lower = upper

        if self.brackets[-1].upper_bound is not None:
            raise InvalidSchedule("Final tax bracket must have an open upper bound")

        self._lower_bounds = tuple(lower_bounds)
        self._cumulative = tuple(cumulative)
        return self

    @property
    def lower_bounds(self) -> tuple[Decimal, ...]:
        return self._lower_bounds

    @property
    def cumulative_tax(self) -> tuple[Decimal, ...]:
        """Tax owed on the whole of every band below each bracket."""

        return self._cumulative

    @property
    def top_rate(self) -> Decimal:
        return self.brackets[-1].rate

    @property
    def zero_rate_ceiling(self) -> Decimal:
        """Upper bound of the leading zero-rated bands (``0`` when none)."""

        ceiling = ZERO
        for bracket in self.brackets:
            if bracket.rate != ZERO or bracket.upper_bound is None:
                break
            ceiling = bracket.upper_bound
        return ceiling


def build_schedule(brackets: Sequence[Mapping[str, Any] | TaxBracket]) -> BracketSchedule:
    """Validate ``brackets`` into a schedule, raising :class:`InvalidSchedule`."""

    try:
        return BracketSchedule.model_validate(list(brackets))
    except ValidationError as error:
        raise_configuration_error(error, "Bracket schedule validation failed")


def raise_configuration_error(error: ValidationError, context: str) -> NoReturn:
    """Re-raise a pydantic error as the matching configuration error."""

    for issue in error.errors():
        cause = (issue.get("ctx") or {}).get("error")
        if isinstance(cause, InvalidSchedule):
            location = ".".join(str(part) for part in issue.get("loc", ()))
            message = f"{context}: {location}: {cause}" if location else f"{context}: {cause}"
            raise InvalidSchedule(message) from error
    raise ConfigurationError(f"{context}: {error}") from error


class CategoryLabels(ImmutableModel):
    """Display labels surfaced to the client for a taxpayer category."""

    title: str
    gross_amount: str
    reliefs: str
    taxable_amount: str
    base_tax: str
    levy: str | None = None
    total_tax: str
    monthly_equivalent: str | None = None
    exemption: str


class CategoryConfig(ImmutableModel):
    """Schedule and policy parameters for one taxpayer category."""

    schedule: BracketSchedule = Field(alias="brackets")
    exemption_threshold: Decimal
    levy_rate: Decimal = ZERO
    labels: CategoryLabels

    @field_validator("exemption_threshold", "levy_rate", mode="before")
    @classmethod
    def _coerce_numbers(cls, value: Any) -> Decimal:
        return coerce_decimal(value)

    @model_validator(mode="after")
    def _validate_values(self) -> CategoryConfig:
        if self.exemption_threshold < ZERO:
            raise ConfigurationError("Exemption thresholds must be non-negative")
        if self.levy_rate < ZERO:
            raise ConfigurationError("Levy rates must be non-negative")
        return self


class ScheduleMeta(ImmutableModel):
    """Descriptive metadata for a schedule version."""

    currency: str = "NGN"
    currency_symbol: str = "₦"
    legislation: str | None = None
    notes_url: str | None = None


class ScheduleConfiguration(ImmutableModel):
    """Complete configuration for a single schedule version."""

    year: int
    meta: ScheduleMeta = Field(default_factory=ScheduleMeta)
    individual: CategoryConfig
    small_business: CategoryConfig

    @model_validator(mode="before")
    @classmethod
    def _extract_categories(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            raise ConfigurationError("Schedule configuration must be a mapping")

        prepared = dict(data)
        categories = prepared.pop("categories", None)
        if categories is None:
            return prepared
        if not isinstance(categories, Mapping):
            raise ConfigurationError("'categories' must map category names to sections")

        for section in ("individual", "small_business"):
            payload = categories.get(section)
            if not isinstance(payload, Mapping):
                raise ConfigurationError(
                    f"Schedule configuration requires a '{section}' category"
                )
            prepared[section] = payload

        unknown = set(categories) - {"individual", "small_business"}
        if unknown:
            raise ConfigurationError(
                f"Unknown taxpayer categories in configuration: {sorted(unknown)}"
            )

        if prepared.get("meta") is None:
            prepared.pop("meta", None)

        return prepared

    def for_category(self, category: str) -> CategoryConfig:
        if category == "individual":
            return self.individual
        if category == "small_business":
            return self.small_business
        raise KeyError(category)


class ScheduleManifestEntry(ImmutableModel):
    """Entry describing a supported schedule version in the manifest."""

    year: int
    filename: str | None = None
    status: str = "active"
    notes_url: str | None = None

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.year}.yaml"


class ScheduleManifest(ImmutableModel):
    """Manifest describing the available schedule configuration files."""

    years: Sequence[ScheduleManifestEntry]

    @model_validator(mode="after")
    def _validate_years(self) -> ScheduleManifest:
        seen: set[int] = set()
        for entry in self.years:
            if entry.year in seen:
                raise ConfigurationError(
                    f"Duplicate year {entry.year} declared in the configuration manifest"
                )
            seen.add(entry.year)
        return self

    def get_entry(self, year: int) -> ScheduleManifestEntry:
        for entry in self.years:
            if entry.year == year:
                return entry
        raise KeyError(year)

    @computed_field
    @property
    def supported_years(self) -> tuple[int, ...]:
        return tuple(sorted(entry.year for entry in self.years))


__all__ = [
    "BracketSchedule",
    "CategoryConfig",
    "CategoryLabels",
    "ConfigurationError",
    "ImmutableModel",
    "InvalidSchedule",
    "ScheduleConfiguration",
    "ScheduleManifest",
    "ScheduleManifestEntry",
    "ScheduleMeta",
    "TaxBracket",
    "ValidationError",
    "build_schedule",
    "coerce_decimal",
    "raise_configuration_error",
]
