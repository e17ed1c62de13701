"""metrics/aws/elbv2_application.py

``AWS/ApplicationELB`` metric catalog.

Every constructor accepts an optional :class:`~contracts.cloudwatch.MetricChange`
whose fields override the catalog default statistic. Wrapper handles must
belong to an application load balancer.

See https://docs.aws.amazon.com/elasticloadbalancing/latest/application/load-balancer-cloudwatch-metrics.html
"""

from __future__ import annotations

from contracts.cloudwatch import Metric, MetricChange
from contracts.resources import LoadBalancerKind
from metrics.aws.defaults import ELBV2_APPLICATION_DEFAULT_STATISTICS, ELBV2_APPLICATION_NAMESPACE
from metrics.aws.elbv2_metrics import catalog_metric

NAMESPACE = ELBV2_APPLICATION_NAMESPACE
METRIC_NAMES: tuple[str, ...] = tuple(ELBV2_APPLICATION_DEFAULT_STATISTICS)


def metric(name: str, change: MetricChange | None = None) -> Metric:
    """Build any application load balancer metric by CloudWatch name."""
    return catalog_metric(
        namespace=NAMESPACE,
        defaults=ELBV2_APPLICATION_DEFAULT_STATISTICS,
        kind=LoadBalancerKind.APPLICATION,
        name=name,
        change=change,
    )


# -----------------------------
# Load balancer metrics
# -----------------------------


def active_connection_count(change: MetricChange | None = None) -> Metric:
    """Concurrent TCP connections active from clients to the load balancer and to targets."""
    return metric("ActiveConnectionCount", change)


def client_tls_negotiation_error_count(change: MetricChange | None = None) -> Metric:
    """TLS connections initiated by clients that failed to establish a session."""
    return metric("ClientTLSNegotiationErrorCount", change)


def consumed_lcus(change: MetricChange | None = None) -> Metric:
    """Load balancer capacity units (LCU) used by the load balancer."""
    return metric("ConsumedLCUs", change)


def http_fixed_response_count(change: MetricChange | None = None) -> Metric:
    return metric("HTTP_Fixed_Response_Count", change)


def http_redirect_count(change: MetricChange | None = None) -> Metric:
    return metric("HTTP_Redirect_Count", change)


def http_redirect_url_limit_exceeded_count(change: MetricChange | None = None) -> Metric:
    """Redirect actions that failed because the URL exceeded 8K."""
    return metric("HTTP_Redirect_Url_Limit_Exceeded_Count", change)


def http_code_elb_3xx_count(change: MetricChange | None = None) -> Metric:
    return metric("HTTPCode_ELB_3XX_Count", change)


def http_code_elb_4xx_count(change: MetricChange | None = None) -> Metric:
    return metric("HTTPCode_ELB_4XX_Count", change)


def http_code_elb_5xx_count(change: MetricChange | None = None) -> Metric:
    return metric("HTTPCode_ELB_5XX_Count", change)


def http_code_elb_500_count(change: MetricChange | None = None) -> Metric:
    return metric("HTTPCode_ELB_500_Count", change)


def http_code_elb_502_count(change: MetricChange | None = None) -> Metric:
    return metric("HTTPCode_ELB_502_Count", change)


def http_code_elb_503_count(change: MetricChange | None = None) -> Metric:
    return metric("HTTPCode_ELB_503_Count", change)


def http_code_elb_504_count(change: MetricChange | None = None) -> Metric:
    return metric("HTTPCode_ELB_504_Count", change)


def ipv6_processed_bytes(change: MetricChange | None = None) -> Metric:
    return metric("IPv6ProcessedBytes", change)


def ipv6_request_count(change: MetricChange | None = None) -> Metric:
    return metric("IPv6RequestCount", change)


def new_connection_count(change: MetricChange | None = None) -> Metric:
    """New TCP connections established from clients to the load balancer and to targets."""
    return metric("NewConnectionCount", change)


def processed_bytes(change: MetricChange | None = None) -> Metric:
    """Bytes processed over IPv4 and IPv6, headers included."""
    return metric("ProcessedBytes", change)


def rejected_connection_count(change: MetricChange | None = None) -> Metric:
    """Connections rejected because the load balancer reached its connection maximum."""
    return metric("RejectedConnectionCount", change)


def request_count(change: MetricChange | None = None) -> Metric:
    """Requests processed over IPv4 and IPv6."""
    return metric("RequestCount", change)


def rule_evaluations(change: MetricChange | None = None) -> Metric:
    return metric("RuleEvaluations", change)


# -----------------------------
# Target group metrics
# -----------------------------


def healthy_host_count(change: MetricChange | None = None) -> Metric:
    """Targets considered healthy."""
    return metric("HealthyHostCount", change)


def http_code_target_2xx_count(change: MetricChange | None = None) -> Metric:
    return metric("HTTPCode_Target_2XX_Count", change)


def http_code_target_3xx_count(change: MetricChange | None = None) -> Metric:
    return metric("HTTPCode_Target_3XX_Count", change)


def http_code_target_4xx_count(change: MetricChange | None = None) -> Metric:
    return metric("HTTPCode_Target_4XX_Count", change)


def http_code_target_5xx_count(change: MetricChange | None = None) -> Metric:
    return metric("HTTPCode_Target_5XX_Count", change)


def non_sticky_request_count(change: MetricChange | None = None) -> Metric:
    """Requests routed to a new target because the existing sticky session could not be used."""
    return metric("NonStickyRequestCount", change)


def request_count_per_target(change: MetricChange | None = None) -> Metric:
    """Average requests received by each target in a target group."""
    return metric("RequestCountPerTarget", change)


def target_connection_error_count(change: MetricChange | None = None) -> Metric:
    return metric("TargetConnectionErrorCount", change)


def target_response_time(change: MetricChange | None = None) -> Metric:
    """Seconds elapsed between a request leaving the load balancer and the target's response headers."""
    return metric("TargetResponseTime", change)


def target_tls_negotiation_error_count(change: MetricChange | None = None) -> Metric:
    return metric("TargetTLSNegotiationErrorCount", change)


def unhealthy_host_count(change: MetricChange | None = None) -> Metric:
    """Targets considered unhealthy."""
    return metric("UnHealthyHostCount", change)
