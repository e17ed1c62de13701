"""
services/elbv2_inventory.py

Turn ELBv2 ARNs into wrapper handles by asking the ELBv2 API.

Wrapper handles carry their parent load balancer, so metrics built from them
never need an explicit ``load_balancer`` filter.

Minimal IAM permissions:
- elasticloadbalancing:DescribeLoadBalancers
- elasticloadbalancing:DescribeTargetGroups
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from botocore.exceptions import ClientError

from contracts.cloudwatch import MissingLoadBalancerError
from contracts.resources import LoadBalancer, LoadBalancerKind, RawHandle, ResourceNotFoundError, TargetGroup
from services.aws_common import client_error_code, paginate_items

_LOGGER = logging.getLogger(__name__)


def _load_balancer_from_item(item: Mapping[str, Any]) -> LoadBalancer:
    arn = str(item.get("LoadBalancerArn") or "")
    try:
        kind = LoadBalancerKind(str(item.get("Type") or "application").lower())
    except ValueError as exc:
        raise ValueError(f"unsupported load balancer type {item.get('Type')!r} for {arn}") from exc
    return LoadBalancer(
        load_balancer=RawHandle.from_arn(arn),
        kind=kind,
        name=str(item.get("LoadBalancerName") or ""),
    )


def _target_group_from_item(item: Mapping[str, Any], load_balancer: LoadBalancer) -> TargetGroup:
    return TargetGroup(
        target_group=RawHandle.from_arn(str(item.get("TargetGroupArn") or "")),
        load_balancer=load_balancer,
        name=str(item.get("TargetGroupName") or ""),
    )


def describe_load_balancer(elbv2: Any, arn: str) -> LoadBalancer:
    """Return the wrapper for the load balancer ``arn``.

    Raises:
        ResourceNotFoundError: the load balancer does not exist.
        ClientError: any other ELBv2 error.
    """
    try:
        resp = elbv2.describe_load_balancers(LoadBalancerArns=[arn])
    except ClientError as exc:
        if client_error_code(exc) == "LoadBalancerNotFound":
            raise ResourceNotFoundError(f"load balancer not found: {arn}") from exc
        raise

    items = resp.get("LoadBalancers", []) or []
    if not items:
        raise ResourceNotFoundError(f"load balancer not found: {arn}")
    return _load_balancer_from_item(items[0])


def describe_target_group(elbv2: Any, arn: str, *, load_balancer: LoadBalancer | None = None) -> TargetGroup:
    """Return the wrapper for the target group ``arn``.

    The parent is ``load_balancer`` when given, otherwise the first load
    balancer the target group is attached to.

    Raises:
        ResourceNotFoundError: the target group does not exist.
        MissingLoadBalancerError: the target group is not attached to any
            load balancer and none was given.
        ClientError: any other ELBv2 error.
    """
    try:
        resp = elbv2.describe_target_groups(TargetGroupArns=[arn])
    except ClientError as exc:
        if client_error_code(exc) == "TargetGroupNotFound":
            raise ResourceNotFoundError(f"target group not found: {arn}") from exc
        raise

    items = resp.get("TargetGroups", []) or []
    if not items:
        raise ResourceNotFoundError(f"target group not found: {arn}")
    item = items[0]

    if load_balancer is None:
        lb_arns = [str(a) for a in item.get("LoadBalancerArns", []) or [] if a]
        if not lb_arns:
            raise MissingLoadBalancerError(f"target group {arn} is not attached to a load balancer")
        if len(lb_arns) > 1:
            _LOGGER.debug(
                "Target group attached to several load balancers; using the first",
                extra={"target_group_arn": arn, "load_balancer_arns": lb_arns},
            )
        load_balancer = describe_load_balancer(elbv2, lb_arns[0])

    return _target_group_from_item(item, load_balancer)


def list_target_groups(elbv2: Any, load_balancer: LoadBalancer) -> list[TargetGroup]:
    """Return wrappers for every target group attached to ``load_balancer``."""
    lb_arn = load_balancer.owned_raw().arn
    if not lb_arn:
        raise ValueError("load_balancer must carry its ARN to list target groups")

    items = paginate_items(
        elbv2,
        "describe_target_groups",
        "TargetGroups",
        params={"LoadBalancerArn": lb_arn},
        request_token_key="Marker",
        response_token_keys=("NextMarker",),
    )
    groups = [_target_group_from_item(item, load_balancer) for item in items]
    _LOGGER.info("Listed ELBv2 target groups", extra={"count": len(groups), "load_balancer": lb_arn})
    return groups
