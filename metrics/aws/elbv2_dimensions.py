"""metrics/aws/elbv2_dimensions.py

Resolve the CloudWatch dimensions of an ELBv2 metric from a change-set.

Rules
-----
1) ``load_balancer`` (raw or wrapper) sets ``LoadBalancer``.
2) ``target_group``:
   - wrapper: sets ``TargetGroup`` and overwrites ``LoadBalancer`` with the
     target group's own load balancer (the owner is authoritative).
   - raw: sets ``TargetGroup``; an explicit ``load_balancer`` is required
     because a raw handle cannot name its load balancer.
3) ``availability_zone`` sets ``AvailabilityZone`` verbatim.

Fields that are not supplied contribute no key, so an empty change-set
resolves to ``{}`` (account/region-scoped metrics).
"""

from __future__ import annotations

from contracts.cloudwatch import InvalidMetricChangeError, MetricChange, MissingLoadBalancerError
from contracts.resources import LoadBalancer, RawHandle, TargetGroup

LOAD_BALANCER_DIMENSION = "LoadBalancer"
TARGET_GROUP_DIMENSION = "TargetGroup"
AVAILABILITY_ZONE_DIMENSION = "AvailabilityZone"


def _load_balancer_value(handle: object) -> str:
    match handle:
        case LoadBalancer(load_balancer=raw):
            return raw.identifying_string()
        case RawHandle():
            return handle.identifying_string()
        case _:
            raise InvalidMetricChangeError(
                f"load_balancer must be a RawHandle or LoadBalancer, got {type(handle).__name__}"
            )


def resolve_dimensions(change: MetricChange | None = None) -> dict[str, str]:
    """Return the dimension mapping for ``change``.

    Raises:
        MissingLoadBalancerError: a raw target group was supplied without
            ``load_balancer``.
        InvalidMetricChangeError: a handle field holds an unsupported type.
    """
    change = change or MetricChange()
    dimensions: dict[str, str] = {}

    if change.load_balancer is not None:
        dimensions[LOAD_BALANCER_DIMENSION] = _load_balancer_value(change.load_balancer)

    if change.target_group is not None:
        match change.target_group:
            case TargetGroup(target_group=raw, load_balancer=owner):
                dimensions[TARGET_GROUP_DIMENSION] = raw.identifying_string()
                dimensions[LOAD_BALANCER_DIMENSION] = owner.owned_raw().identifying_string()
            case RawHandle() as raw:
                if change.load_balancer is None:
                    raise MissingLoadBalancerError("load_balancer must accompany a raw target_group")
                dimensions[TARGET_GROUP_DIMENSION] = raw.identifying_string()
            case other:
                raise InvalidMetricChangeError(
                    f"target_group must be a RawHandle or TargetGroup, got {type(other).__name__}"
                )

    if change.availability_zone is not None:
        dimensions[AVAILABILITY_ZONE_DIMENSION] = change.availability_zone

    return dimensions
