"""metrics/aws/elbv2_metrics.py

Build ELBv2 CloudWatch metric descriptors.

``create_metric`` is the generic builder: dimensions come from
:func:`metrics.aws.elbv2_dimensions.resolve_dimensions` and the statistic,
period and unit are copied from the change-set as-is.

``catalog_metric`` is what the per-kind catalogs
(:mod:`metrics.aws.elbv2_application`, :mod:`metrics.aws.elbv2_network`)
call: it restricts names to the catalog, pre-fills the catalog's default
statistic and checks that wrapper handles belong to the right kind of load
balancer.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from contracts.cloudwatch import InvalidMetricChangeError, Metric, MetricChange, StatisticLike
from contracts.resources import LoadBalancer, LoadBalancerKind, TargetGroup
from metrics.aws.elbv2_dimensions import resolve_dimensions

_LOGGER = logging.getLogger(__name__)


def create_metric(namespace: str, name: str, change: MetricChange | None = None) -> Metric:
    """Return a new descriptor for ``namespace``/``name`` filtered by ``change``.

    Raises:
        MissingLoadBalancerError: propagated unchanged from dimension resolution.
        InvalidMetricChangeError: empty namespace/name or unsupported handle.
    """
    change = change or MetricChange()
    dimensions = resolve_dimensions(change)
    metric = Metric(
        namespace=namespace,
        name=name,
        statistic=change.statistic,
        period=change.period,
        unit=change.unit,
        dimensions=dimensions,
    )
    _LOGGER.debug(
        "Created metric descriptor",
        extra={"namespace": metric.namespace, "metric_name": metric.name, "dimensions": dict(dimensions)},
    )
    return metric


def _wrapper_kind(handle: object) -> LoadBalancerKind | None:
    match handle:
        case LoadBalancer(kind=kind):
            return kind
        case TargetGroup(load_balancer=LoadBalancer(kind=kind)):
            return kind
        case _:
            return None


def _check_kind(change: MetricChange, expected: LoadBalancerKind) -> None:
    for field_name, handle in (("load_balancer", change.load_balancer), ("target_group", change.target_group)):
        kind = _wrapper_kind(handle)
        if kind is not None and kind is not expected:
            raise InvalidMetricChangeError(
                f"{field_name} belongs to a {kind.value} load balancer; expected {expected.value}"
            )


def catalog_metric(
    *,
    namespace: str,
    defaults: Mapping[str, StatisticLike | None],
    kind: LoadBalancerKind,
    name: str,
    change: MetricChange | None = None,
) -> Metric:
    """Build a catalog metric, applying the catalog's default statistic."""
    if name not in defaults:
        raise InvalidMetricChangeError(f"unknown {namespace} metric: {name!r}")
    change = change or MetricChange()
    _check_kind(change, kind)
    return create_metric(namespace, name, change.with_defaults(statistic=defaults[name]))
