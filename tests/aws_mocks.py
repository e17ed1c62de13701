"""Shared AWS test doubles.

These mocks intentionally avoid boto3 client construction and focus on:
- availability-zone lookups (with call counting and blocking)
- ELBv2 describe calls, including paginated target group listings
- compact Services/ServicesFactory stand-ins
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Mapping, Sequence
from types import SimpleNamespace
from typing import Any

from botocore.exceptions import ClientError

from contracts.services import Services

PageProvider = list[Mapping[str, Any]] | Callable[[dict[str, Any]], Iterable[Mapping[str, Any]]]

ALB_ARN = "arn:aws:elasticloadbalancing:eu-west-3:123456789012:loadbalancer/app/web/50dc6c495c0c9188"
NLB_ARN = "arn:aws:elasticloadbalancing:eu-west-3:123456789012:loadbalancer/net/edge/a1b2c3d4e5f60718"
TG_ARN = "arn:aws:elasticloadbalancing:eu-west-3:123456789012:targetgroup/web-tg/73e2d6bc24d8a067"
TG2_ARN = "arn:aws:elasticloadbalancing:eu-west-3:123456789012:targetgroup/api-tg/9f8e7d6c5b4a3210"
ORPHAN_TG_ARN = "arn:aws:elasticloadbalancing:eu-west-3:123456789012:targetgroup/orphan/0011223344556677"


def make_client_error(
    operation_name: str,
    *,
    code: str = "AccessDeniedException",
    message: str = "Denied",
) -> ClientError:
    """Build a deterministic botocore ClientError payload for tests."""
    return ClientError({"Error": {"Code": code, "Message": message}}, operation_name)


class FakePaginator:
    """Simple paginator that supports static pages or kwargs-aware providers."""

    def __init__(self, pages: PageProvider) -> None:
        self._pages = pages

    def paginate(self, **kwargs: Any) -> Iterable[Mapping[str, Any]]:
        provider = self._pages
        if callable(provider):
            yield from provider(dict(kwargs))
            return
        yield from provider


class CountingZoneLister:
    """Zone lister callable that counts calls and can block until released."""

    def __init__(
        self,
        zones: Sequence[str] = ("eu-west-3a", "eu-west-3b", "eu-west-3c"),
        *,
        fail_times: int = 0,
        block: bool = False,
    ) -> None:
        self.zones = list(zones)
        self.calls = 0
        self._fail_times = fail_times
        self._lock = threading.Lock()
        self.release = threading.Event()
        self.entered = threading.Event()
        if not block:
            self.release.set()

    def __call__(self) -> list[str]:
        with self._lock:
            self.calls += 1
            fail = self.calls <= self._fail_times
        self.entered.set()
        self.release.wait(timeout=10)
        if fail:
            raise make_client_error("DescribeAvailabilityZones", code="UnauthorizedOperation")
        return list(self.zones)


class FakeEC2Client:
    """EC2 client fake covering DescribeAvailabilityZones."""

    def __init__(
        self,
        *,
        region: str = "eu-west-3",
        zones: Sequence[str] = ("eu-west-3a", "eu-west-3b", "eu-west-3c"),
        raise_code: str | None = None,
    ) -> None:
        self.meta = SimpleNamespace(region_name=region)
        self._zones = list(zones)
        self._raise_code = raise_code
        self.calls: list[dict[str, Any]] = []

    def describe_availability_zones(self, **kwargs: Any) -> dict[str, Any]:
        self.calls.append(dict(kwargs))
        if self._raise_code:
            raise make_client_error("DescribeAvailabilityZones", code=self._raise_code)
        return {
            "AvailabilityZones": [
                {"ZoneName": name, "State": "available", "RegionName": self.meta.region_name}
                for name in self._zones
            ]
        }


def _lb_item(arn: str, lb_type: str, name: str) -> dict[str, Any]:
    return {"LoadBalancerArn": arn, "LoadBalancerName": name, "Type": lb_type, "Scheme": "internet-facing"}


def _tg_item(arn: str, name: str, lb_arns: Sequence[str]) -> dict[str, Any]:
    return {"TargetGroupArn": arn, "TargetGroupName": name, "LoadBalancerArns": list(lb_arns)}


class FakeELBv2Client:
    """ELBv2 client fake with two load balancers and three target groups."""

    def __init__(self, *, region: str = "eu-west-3", raise_code: str | None = None) -> None:
        self.meta = SimpleNamespace(region_name=region)
        self._raise_code = raise_code
        self.load_balancers = {
            ALB_ARN: _lb_item(ALB_ARN, "application", "web"),
            NLB_ARN: _lb_item(NLB_ARN, "network", "edge"),
        }
        self.target_groups = {
            TG_ARN: _tg_item(TG_ARN, "web-tg", [ALB_ARN]),
            TG2_ARN: _tg_item(TG2_ARN, "api-tg", [ALB_ARN]),
            ORPHAN_TG_ARN: _tg_item(ORPHAN_TG_ARN, "orphan", []),
        }
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def describe_load_balancers(self, **kwargs: Any) -> dict[str, Any]:
        self.calls.append(("describe_load_balancers", dict(kwargs)))
        if self._raise_code:
            raise make_client_error("DescribeLoadBalancers", code=self._raise_code)
        arns = kwargs.get("LoadBalancerArns") or []
        missing = [a for a in arns if a not in self.load_balancers]
        if missing:
            raise make_client_error("DescribeLoadBalancers", code="LoadBalancerNotFound")
        return {"LoadBalancers": [self.load_balancers[a] for a in arns]}

    def describe_target_groups(self, **kwargs: Any) -> dict[str, Any]:
        self.calls.append(("describe_target_groups", dict(kwargs)))
        if self._raise_code:
            raise make_client_error("DescribeTargetGroups", code=self._raise_code)
        arns = kwargs.get("TargetGroupArns") or []
        missing = [a for a in arns if a not in self.target_groups]
        if missing:
            raise make_client_error("DescribeTargetGroups", code="TargetGroupNotFound")
        return {"TargetGroups": [self.target_groups[a] for a in arns]}

    def get_paginator(self, op_name: str) -> FakePaginator:
        if op_name != "describe_target_groups":
            raise KeyError(f"FakeELBv2Client has no paginator for {op_name}")

        def _pages(kwargs: dict[str, Any]) -> Iterable[dict[str, Any]]:
            self.calls.append(("paginate:describe_target_groups", dict(kwargs)))
            lb_arn = kwargs.get("LoadBalancerArn")
            items = [tg for tg in self.target_groups.values() if lb_arn in tg["LoadBalancerArns"]]
            # One item per page to exercise page iteration.
            for item in items:
                yield {"TargetGroups": [item]}

        return FakePaginator(_pages)


class FakeServicesFactory:
    """Stand-in for ServicesFactory that hands out fake clients per region."""

    def __init__(
        self,
        *,
        ec2: FakeEC2Client | None = None,
        elbv2: FakeELBv2Client | None = None,
    ) -> None:
        self._ec2 = ec2
        self._elbv2 = elbv2
        self.regions: list[str] = []

    def for_region(self, region: str) -> Services:
        self.regions.append(region)
        return Services(
            ec2=self._ec2 or FakeEC2Client(region=region),
            elbv2=self._elbv2 or FakeELBv2Client(region=region),
            region=region,
        )
