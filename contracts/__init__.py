"""Contracts shared by the metric builders, services and the CLI.

The contracts package defines:
- ELBv2 resource handles (raw handles and load balancer / target group wrappers)
- the CloudWatch metric model (statistics, change-sets, descriptors)
- the AWS services container and its region-aware factory

Main exports:
- RawHandle, LoadBalancer, TargetGroup, LoadBalancerKind
- Metric, MetricChange, Statistic, ExtendedStatistic
- MetricContractError, InvalidMetricChangeError, MissingLoadBalancerError
- Services, ServicesFactory
"""

from contracts import cloudwatch
from contracts import resources
from contracts import services as services_module

__all__ = [
    "ExtendedStatistic",
    "InvalidMetricChangeError",
    "LoadBalancer",
    "LoadBalancerKind",
    "Metric",
    "MetricChange",
    "MetricContractError",
    "MissingLoadBalancerError",
    "RawHandle",
    "ResourceNotFoundError",
    "Services",
    "ServicesFactory",
    "Statistic",
    "TargetGroup",
]

ExtendedStatistic = cloudwatch.ExtendedStatistic
InvalidMetricChangeError = cloudwatch.InvalidMetricChangeError
Metric = cloudwatch.Metric
MetricChange = cloudwatch.MetricChange
MetricContractError = cloudwatch.MetricContractError
MissingLoadBalancerError = cloudwatch.MissingLoadBalancerError
Statistic = cloudwatch.Statistic

LoadBalancer = resources.LoadBalancer
LoadBalancerKind = resources.LoadBalancerKind
RawHandle = resources.RawHandle
ResourceNotFoundError = resources.ResourceNotFoundError
TargetGroup = resources.TargetGroup

Services = services_module.Services
ServicesFactory = services_module.ServicesFactory
