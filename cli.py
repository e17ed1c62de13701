"""
ELBv2 metrics CLI.

Usage
-----
elbm zones
elbm zones --region eu-west-3 --index 1
elbm metric --kind application --name RequestCount \
    --load-balancer-arn arn:aws:elasticloadbalancing:...:loadbalancer/app/web/50dc6c495c0c9188
elbm metric --kind network --name HealthyHostCount --describe \
    --target-group-arn arn:aws:elasticloadbalancing:...:targetgroup/tcp/73e2d6bc24d8a067
"""

from __future__ import annotations

import argparse
import asyncio
import json
from types import ModuleType
from typing import List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from contracts.cloudwatch import MetricChange, MetricContractError
from contracts.resources import LoadBalancer, RawHandle, ResourceNotFoundError, TargetGroup
from contracts.services import ServicesFactory
from infra.aws_config import SDK_CONFIG
from infra.config import get_settings
from infra.logging_config import setup_logging
from metrics.aws import elbv2_application, elbv2_network
from services.aws_common import arn_region
from services.elbv2_inventory import describe_load_balancer, describe_target_group
from services.zone_cache import ZoneIndexError, ZoneLookupError, build_zone_cache, get_zone_cache
from version import ENGINE_NAME, ENGINE_VERSION

_CATALOGS: dict[str, ModuleType] = {
    "application": elbv2_application,
    "network": elbv2_network,
}


def _services_factory() -> ServicesFactory:
    return ServicesFactory(sdk_config=SDK_CONFIG)


def _describe_region(args: argparse.Namespace) -> str:
    """--region, else the region of the first ARN given, else the configured default."""
    from_arns = (arn_region(arn) for arn in (args.load_balancer_arn, args.target_group_arn) if arn)
    return args.region or next((r for r in from_arns if r), "") or get_settings().aws.default_region


def cmd_zones(args: argparse.Namespace) -> None:
    factory = _services_factory()
    if args.region:
        cache = build_zone_cache(factory.for_region(args.region).ec2)
    else:
        cache = get_zone_cache(factory=factory)

    try:
        if args.index is not None:
            print(asyncio.run(cache.get_zone(args.index)))
        else:
            print(json.dumps(asyncio.run(cache.get_zones())))
    except (ZoneLookupError, ZoneIndexError) as exc:
        raise SystemExit(f"error: {exc}") from exc


def _handles(args: argparse.Namespace) -> tuple[RawHandle | LoadBalancer | None, RawHandle | TargetGroup | None]:
    if not args.describe:
        lb = RawHandle.from_arn(args.load_balancer_arn) if args.load_balancer_arn else None
        tg = RawHandle.from_arn(args.target_group_arn) if args.target_group_arn else None
        return lb, tg

    elbv2 = _services_factory().for_region(_describe_region(args)).elbv2
    described_lb = describe_load_balancer(elbv2, args.load_balancer_arn) if args.load_balancer_arn else None
    described_tg = (
        describe_target_group(elbv2, args.target_group_arn, load_balancer=described_lb)
        if args.target_group_arn
        else None
    )
    return described_lb, described_tg


def cmd_metric(args: argparse.Namespace) -> None:
    catalog = _CATALOGS[args.kind]
    if args.name not in catalog.METRIC_NAMES:
        raise SystemExit(f"error: unknown {catalog.NAMESPACE} metric {args.name!r}")

    try:
        load_balancer, target_group = _handles(args)
        change = MetricChange(
            statistic=args.statistic,
            period=args.period,
            unit=args.unit,
            load_balancer=load_balancer,
            target_group=target_group,
            availability_zone=args.availability_zone,
        )
        metric = catalog.metric(args.name, change)
    except (MetricContractError, ResourceNotFoundError) as exc:
        raise SystemExit(f"error: {exc}") from exc
    except (ClientError, BotoCoreError) as exc:
        raise SystemExit(f"error: ELBv2 lookup failed ({type(exc).__name__}: {exc})") from exc

    payload = metric.to_dict()
    payload["metric_stat"] = metric.to_metric_stat()
    print(json.dumps(payload, indent=2))


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="elbm", description="ELBv2 CloudWatch metric definitions")
    p.add_argument("--version", action="version", version=f"{ENGINE_NAME} {ENGINE_VERSION}")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("zones", help="Print the availability zones of a region.")
    sp.add_argument("--region", default=None, help="Region (default: AWS_DEFAULT_REGION or us-east-1).")
    sp.add_argument("--index", type=int, default=None, help="Print only the zone at this index.")
    sp.set_defaults(func=cmd_zones)

    sp = sub.add_parser("metric", help="Print an ELBv2 metric descriptor as JSON.")
    sp.add_argument("--kind", choices=sorted(_CATALOGS), required=True, help="Load balancer kind.")
    sp.add_argument("--name", required=True, help="CloudWatch metric name, e.g. RequestCount.")
    sp.add_argument("--load-balancer-arn", default=None, help="Filter by load balancer.")
    sp.add_argument("--target-group-arn", default=None, help="Filter by target group.")
    sp.add_argument("--availability-zone", default=None, help="Filter by availability zone.")
    sp.add_argument("--statistic", default=None, help="Sum, Average, Minimum, Maximum, SampleCount or pNN.")
    sp.add_argument("--period", type=int, default=None, help="Period in seconds.")
    sp.add_argument("--unit", default=None, help="CloudWatch unit, e.g. Count.")
    sp.add_argument(
        "--describe",
        action="store_true",
        help="Resolve ARNs through ELBv2 so a target group brings its own load balancer.",
    )
    sp.add_argument("--region", default=None, help="Region used with --describe (default: the ARN region).")
    sp.set_defaults(func=cmd_metric)

    return p


def main(argv: Optional[List[str]] = None) -> None:
    setup_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
