"""Unit tests for ELBv2 dimension resolution and the generic metric builder."""

from __future__ import annotations

import pytest

from contracts.cloudwatch import (
    InvalidMetricChangeError,
    MetricChange,
    MetricContractError,
    MissingLoadBalancerError,
    Statistic,
)
from contracts.resources import LoadBalancer, LoadBalancerKind, RawHandle, TargetGroup
from metrics.aws.elbv2_dimensions import resolve_dimensions
from metrics.aws.elbv2_metrics import create_metric

LB1 = RawHandle(arn_suffix="app/web/1111")
LB2 = RawHandle(arn_suffix="app/api/2222")
TG = RawHandle(arn_suffix="targetgroup/web-tg/3333")


def test_empty_change_resolves_to_no_dimensions() -> None:
    assert resolve_dimensions(MetricChange()) == {}
    assert resolve_dimensions(None) == {}
    assert resolve_dimensions() == {}


def test_raw_load_balancer_sets_load_balancer_dimension() -> None:
    assert resolve_dimensions(MetricChange(load_balancer=LB1)) == {"LoadBalancer": "app/web/1111"}


def test_wrapper_load_balancer_uses_owned_raw_handle() -> None:
    lb = LoadBalancer(load_balancer=LB1, name="web")
    assert resolve_dimensions(MetricChange(load_balancer=lb)) == {"LoadBalancer": "app/web/1111"}


def test_target_group_wrapper_alone_derives_load_balancer() -> None:
    tg = TargetGroup(target_group=TG, load_balancer=LoadBalancer(load_balancer=LB1))

    dims = resolve_dimensions(MetricChange(target_group=tg))

    assert dims == {"LoadBalancer": "app/web/1111", "TargetGroup": "targetgroup/web-tg/3333"}


def test_target_group_owner_wins_over_explicit_load_balancer() -> None:
    """The wrapper's own load balancer overrides an explicit, different one."""
    tg = TargetGroup(target_group=TG, load_balancer=LoadBalancer(load_balancer=LB1))

    dims = resolve_dimensions(MetricChange(load_balancer=LB2, target_group=tg))

    assert dims["LoadBalancer"] == "app/web/1111"
    assert dims["TargetGroup"] == "targetgroup/web-tg/3333"


def test_raw_target_group_with_load_balancer() -> None:
    dims = resolve_dimensions(MetricChange(load_balancer=LB2, target_group=TG))
    assert dims == {"LoadBalancer": "app/api/2222", "TargetGroup": "targetgroup/web-tg/3333"}


def test_raw_target_group_without_load_balancer_raises() -> None:
    with pytest.raises(MissingLoadBalancerError):
        resolve_dimensions(MetricChange(target_group=TG))


def test_missing_load_balancer_is_a_contract_error() -> None:
    with pytest.raises(MetricContractError):
        resolve_dimensions(MetricChange(target_group=TG))


def test_availability_zone_is_copied_verbatim() -> None:
    dims = resolve_dimensions(MetricChange(load_balancer=LB1, availability_zone="us-west-2a"))
    assert dims == {"LoadBalancer": "app/web/1111", "AvailabilityZone": "us-west-2a"}


def test_availability_zone_alone() -> None:
    assert resolve_dimensions(MetricChange(availability_zone="eu-west-3c")) == {"AvailabilityZone": "eu-west-3c"}


def test_unsupported_handle_type_raises() -> None:
    with pytest.raises(InvalidMetricChangeError):
        resolve_dimensions(MetricChange(load_balancer="app/web/1111"))  # type: ignore[arg-type]
    with pytest.raises(InvalidMetricChangeError):
        resolve_dimensions(MetricChange(load_balancer=LB1, target_group=object()))  # type: ignore[arg-type]


def test_resolution_is_deterministic() -> None:
    change = MetricChange(load_balancer=LB1, target_group=TG, availability_zone="eu-west-3a")
    assert resolve_dimensions(change) == resolve_dimensions(change)


def test_create_metric_copies_change_fields() -> None:
    change = MetricChange(load_balancer=LB1, statistic="Maximum", period=60, unit="Count")

    metric = create_metric("AWS/ApplicationELB", "RequestCount", change)

    assert metric.namespace == "AWS/ApplicationELB"
    assert metric.name == "RequestCount"
    assert metric.statistic is Statistic.MAXIMUM
    assert metric.period == 60
    assert metric.unit == "Count"
    assert dict(metric.dimensions) == {"LoadBalancer": "app/web/1111"}


def test_create_metric_without_change_is_unfiltered() -> None:
    metric = create_metric("AWS/NetworkELB", "ConsumedLCUs")

    assert metric.statistic is None
    assert metric.period is None
    assert metric.unit is None
    assert dict(metric.dimensions) == {}


def test_create_metric_propagates_missing_load_balancer() -> None:
    with pytest.raises(MissingLoadBalancerError):
        create_metric("AWS/ApplicationELB", "RequestCount", MetricChange(target_group=TG))


def test_create_metric_rejects_empty_name() -> None:
    with pytest.raises(InvalidMetricChangeError):
        create_metric("AWS/ApplicationELB", "  ")


def test_create_metric_does_not_inspect_wrapper_kind() -> None:
    """The generic builder accepts any wrapper; only catalogs check the kind."""
    nlb = LoadBalancer(load_balancer=LB1, kind=LoadBalancerKind.NETWORK)
    metric = create_metric("AWS/ApplicationELB", "RequestCount", MetricChange(load_balancer=nlb))
    assert metric.dimensions["LoadBalancer"] == "app/web/1111"
