"""
contracts/cloudwatch.py

CloudWatch metric model: statistics, the optional-override change-set and
the immutable metric descriptor.

Validation happens at construction time so an invalid statistic, period or
unit never reaches a descriptor:
- statistics form a closed set (``Statistic`` plus percentile expressions)
- periods are whole seconds accepted by CloudWatch (1, 5, 10, 30 or a
  multiple of 60)
- units are CloudWatch standard units
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import timedelta
from enum import Enum
from types import MappingProxyType
from typing import Any

from contracts.resources import LoadBalancerRef, TargetGroupRef

# -----------------------------
# Exceptions
# -----------------------------


class MetricContractError(ValueError):
    """Base metric contract error."""


class InvalidMetricChangeError(MetricContractError):
    """Raised when a change-set field or handle does not satisfy its contract."""


class MissingLoadBalancerError(MetricContractError):
    """Raised when a raw target group is supplied without a load balancer."""


# -----------------------------
# Statistics
# -----------------------------


class Statistic(str, Enum):
    """CloudWatch simple statistics."""

    SAMPLE_COUNT = "SampleCount"
    AVERAGE = "Average"
    SUM = "Sum"
    MINIMUM = "Minimum"
    MAXIMUM = "Maximum"


_PERCENTILE_RE = re.compile(r"^p(\d{1,3}(?:\.\d{1,2})?)$")


@dataclass(frozen=True)
class ExtendedStatistic:
    """Percentile statistic such as ``p99`` or ``p99.9``."""

    percentile: float

    def __post_init__(self) -> None:
        try:
            value = float(self.percentile)
        except (TypeError, ValueError) as exc:
            raise InvalidMetricChangeError(f"percentile must be a number, got {self.percentile!r}") from exc
        if not 0.0 <= value <= 100.0:
            raise InvalidMetricChangeError(f"percentile must be within [0, 100], got {self.percentile!r}")
        object.__setattr__(self, "percentile", value)

    @property
    def value(self) -> str:
        return f"p{self.percentile:g}"


StatisticLike = Statistic | ExtendedStatistic

_STATISTICS_BY_NAME = {s.value.lower(): s for s in Statistic}


def parse_statistic(value: Any) -> StatisticLike:
    """Parse ``value`` into a member of the closed statistic set.

    Accepts ``Statistic``/``ExtendedStatistic`` instances, statistic names
    (case-insensitive) and percentile expressions (``p50``, ``p99.9``).
    """
    if isinstance(value, (Statistic, ExtendedStatistic)):
        return value
    if not isinstance(value, str):
        raise InvalidMetricChangeError(f"statistic must be a string, got {type(value).__name__}")

    text = value.strip()
    stat = _STATISTICS_BY_NAME.get(text.lower())
    if stat is not None:
        return stat

    match = _PERCENTILE_RE.match(text)
    if match is None:
        raise InvalidMetricChangeError(f"unsupported statistic: {value!r}")
    return ExtendedStatistic(percentile=float(match.group(1)))


# -----------------------------
# Periods and units
# -----------------------------

_HIGH_RESOLUTION_PERIODS = frozenset({1, 5, 10, 30})

# CloudWatch StandardUnit values.
STANDARD_UNITS: frozenset[str] = frozenset(
    {
        "Seconds",
        "Microseconds",
        "Milliseconds",
        "Bytes",
        "Kilobytes",
        "Megabytes",
        "Gigabytes",
        "Terabytes",
        "Bits",
        "Kilobits",
        "Megabits",
        "Gigabits",
        "Terabits",
        "Percent",
        "Count",
        "Bytes/Second",
        "Kilobytes/Second",
        "Megabytes/Second",
        "Gigabytes/Second",
        "Terabytes/Second",
        "Bits/Second",
        "Kilobits/Second",
        "Megabits/Second",
        "Gigabits/Second",
        "Terabits/Second",
        "Count/Second",
        "None",
    }
)


def normalize_period(value: Any) -> int:
    """Return ``value`` as whole seconds accepted by CloudWatch."""
    if isinstance(value, bool):
        raise InvalidMetricChangeError("period must be seconds or a timedelta, got bool")
    if isinstance(value, timedelta):
        seconds_f = value.total_seconds()
        if seconds_f != int(seconds_f):
            raise InvalidMetricChangeError(f"period must be whole seconds, got {value!r}")
        seconds = int(seconds_f)
    elif isinstance(value, int):
        seconds = value
    else:
        raise InvalidMetricChangeError(f"period must be seconds or a timedelta, got {type(value).__name__}")

    if seconds <= 0:
        raise InvalidMetricChangeError(f"period must be positive, got {seconds}")
    if seconds not in _HIGH_RESOLUTION_PERIODS and seconds % 60 != 0:
        raise InvalidMetricChangeError(f"period must be 1, 5, 10, 30 or a multiple of 60, got {seconds}")
    return seconds


def normalize_unit(value: Any) -> str:
    text = str(value or "").strip()
    if text not in STANDARD_UNITS:
        raise InvalidMetricChangeError(f"unsupported unit: {value!r}")
    return text


# -----------------------------
# Change-set
# -----------------------------


@dataclass(frozen=True)
class MetricChange:
    """Optional overrides and dimension filters for one metric.

    Every field is optional; ``None`` means "no filter / no override".
    """

    statistic: StatisticLike | None = None
    period: int | None = None
    unit: str | None = None
    load_balancer: LoadBalancerRef | None = None
    target_group: TargetGroupRef | None = None
    availability_zone: str | None = None

    def __post_init__(self) -> None:
        if self.statistic is not None:
            object.__setattr__(self, "statistic", parse_statistic(self.statistic))
        if self.period is not None:
            object.__setattr__(self, "period", normalize_period(self.period))
        if self.unit is not None:
            object.__setattr__(self, "unit", normalize_unit(self.unit))
        if self.availability_zone is not None:
            zone = str(self.availability_zone).strip()
            if not zone:
                raise InvalidMetricChangeError("availability_zone must be a non-empty string")
            object.__setattr__(self, "availability_zone", zone)

    def with_defaults(
        self,
        *,
        statistic: StatisticLike | str | None = None,
        period: int | timedelta | None = None,
        unit: str | None = None,
    ) -> MetricChange:
        """Return a copy where unset fields take the given defaults."""
        return replace(
            self,
            statistic=self.statistic if self.statistic is not None else statistic,
            period=self.period if self.period is not None else period,
            unit=self.unit if self.unit is not None else unit,
        )


# -----------------------------
# Descriptor
# -----------------------------

# CloudWatch query defaults applied by to_metric_stat() when unset.
DEFAULT_QUERY_PERIOD_SECONDS = 300
DEFAULT_QUERY_STATISTIC = Statistic.AVERAGE


def _frozen_dimensions(dimensions: Mapping[str, str] | None) -> Mapping[str, str]:
    return MappingProxyType({str(k): str(v) for k, v in (dimensions or {}).items()})


@dataclass(frozen=True)
class Metric:
    """Immutable, fully-qualified CloudWatch metric descriptor."""

    namespace: str
    name: str
    statistic: StatisticLike | None = None
    period: int | None = None
    unit: str | None = None
    dimensions: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if not str(self.namespace or "").strip():
            raise InvalidMetricChangeError("metric namespace must be a non-empty string")
        if not str(self.name or "").strip():
            raise InvalidMetricChangeError("metric name must be a non-empty string")
        if self.statistic is not None:
            object.__setattr__(self, "statistic", parse_statistic(self.statistic))
        if self.period is not None:
            object.__setattr__(self, "period", normalize_period(self.period))
        if self.unit is not None:
            object.__setattr__(self, "unit", normalize_unit(self.unit))
        object.__setattr__(self, "dimensions", _frozen_dimensions(self.dimensions))

    def with_dimensions(self, dimensions: Mapping[str, str]) -> Metric:
        """Return a copy with ``dimensions`` merged over the current ones."""
        merged = dict(self.dimensions)
        merged.update(dimensions)
        return replace(self, dimensions=merged)

    def with_statistic(self, statistic: StatisticLike | str) -> Metric:
        return replace(self, statistic=parse_statistic(statistic))

    def with_period(self, period: int | timedelta) -> Metric:
        return replace(self, period=normalize_period(period))

    def with_unit(self, unit: str) -> Metric:
        return replace(self, unit=normalize_unit(unit))

    def dimension_list(self) -> list[dict[str, str]]:
        """Dimensions in the CloudWatch API shape, sorted by name."""
        return [{"Name": k, "Value": v} for k, v in sorted(self.dimensions.items())]

    def to_metric_stat(self) -> dict[str, Any]:
        """Build a ``GetMetricData`` ``MetricStat`` payload."""
        stat = self.statistic if self.statistic is not None else DEFAULT_QUERY_STATISTIC
        out: dict[str, Any] = {
            "Metric": {
                "Namespace": self.namespace,
                "MetricName": self.name,
                "Dimensions": self.dimension_list(),
            },
            "Period": self.period if self.period is not None else DEFAULT_QUERY_PERIOD_SECONDS,
            "Stat": stat.value,
        }
        if self.unit is not None:
            out["Unit"] = self.unit
        return out

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible representation."""
        return {
            "namespace": self.namespace,
            "name": self.name,
            "statistic": self.statistic.value if self.statistic is not None else None,
            "period": self.period,
            "unit": self.unit,
            "dimensions": dict(sorted(self.dimensions.items())),
        }


__all__ = [
    "DEFAULT_QUERY_PERIOD_SECONDS",
    "DEFAULT_QUERY_STATISTIC",
    "ExtendedStatistic",
    "InvalidMetricChangeError",
    "Metric",
    "MetricChange",
    "MetricContractError",
    "MissingLoadBalancerError",
    "STANDARD_UNITS",
    "Statistic",
    "StatisticLike",
    "normalize_period",
    "normalize_unit",
    "parse_statistic",
]
