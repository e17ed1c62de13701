"""metrics/aws/elbv2_network.py

``AWS/NetworkELB`` metric catalog.

Same contract as :mod:`metrics.aws.elbv2_application`; wrapper handles must
belong to a network load balancer.

See https://docs.aws.amazon.com/elasticloadbalancing/latest/network/load-balancer-cloudwatch-metrics.html
"""

from __future__ import annotations

from contracts.cloudwatch import Metric, MetricChange
from contracts.resources import LoadBalancerKind
from metrics.aws.defaults import ELBV2_NETWORK_DEFAULT_STATISTICS, ELBV2_NETWORK_NAMESPACE
from metrics.aws.elbv2_metrics import catalog_metric

NAMESPACE = ELBV2_NETWORK_NAMESPACE
METRIC_NAMES: tuple[str, ...] = tuple(ELBV2_NETWORK_DEFAULT_STATISTICS)


def metric(name: str, change: MetricChange | None = None) -> Metric:
    """Build any network load balancer metric by CloudWatch name."""
    return catalog_metric(
        namespace=NAMESPACE,
        defaults=ELBV2_NETWORK_DEFAULT_STATISTICS,
        kind=LoadBalancerKind.NETWORK,
        name=name,
        change=change,
    )


def active_flow_count(change: MetricChange | None = None) -> Metric:
    """Concurrent flows (or connections) from clients to targets."""
    return metric("ActiveFlowCount", change)


def active_flow_count_tls(change: MetricChange | None = None) -> Metric:
    return metric("ActiveFlowCount_TLS", change)


def client_tls_negotiation_error_count(change: MetricChange | None = None) -> Metric:
    return metric("ClientTLSNegotiationErrorCount", change)


def consumed_lcus(change: MetricChange | None = None) -> Metric:
    return metric("ConsumedLCUs", change)


def healthy_host_count(change: MetricChange | None = None) -> Metric:
    """Targets considered healthy."""
    return metric("HealthyHostCount", change)


def new_flow_count(change: MetricChange | None = None) -> Metric:
    """New flows (or connections) established from clients to targets."""
    return metric("NewFlowCount", change)


def new_flow_count_tls(change: MetricChange | None = None) -> Metric:
    return metric("NewFlowCount_TLS", change)


def processed_bytes(change: MetricChange | None = None) -> Metric:
    return metric("ProcessedBytes", change)


def processed_bytes_tls(change: MetricChange | None = None) -> Metric:
    return metric("ProcessedBytes_TLS", change)


def target_tls_negotiation_error_count(change: MetricChange | None = None) -> Metric:
    return metric("TargetTLSNegotiationErrorCount", change)


def tcp_client_reset_count(change: MetricChange | None = None) -> Metric:
    """Reset (RST) packets sent from a client to a target."""
    return metric("TCP_Client_Reset_Count", change)


def tcp_elb_reset_count(change: MetricChange | None = None) -> Metric:
    """Reset (RST) packets generated by the load balancer."""
    return metric("TCP_ELB_Reset_Count", change)


def tcp_target_reset_count(change: MetricChange | None = None) -> Metric:
    """Reset (RST) packets sent from a target to a client."""
    return metric("TCP_Target_Reset_Count", change)


def unhealthy_host_count(change: MetricChange | None = None) -> Metric:
    """Targets considered unhealthy."""
    return metric("UnHealthyHostCount", change)
