"""
contracts/resources.py

ELBv2 resource handles accepted wherever a metric filter expects a load
balancer or a target group.

Two shapes exist:
- ``RawHandle``: the provider-side object, identified by its ARN suffix
  (the value CloudWatch uses for the ``LoadBalancer``/``TargetGroup``
  dimensions).
- Wrappers (``LoadBalancer``, ``TargetGroup``): composed resources that own a
  ``RawHandle``. A ``TargetGroup`` wrapper also owns its parent
  ``LoadBalancer`` wrapper, so metrics filtered by it can derive the load
  balancer dimension without the caller passing it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ResourceNotFoundError(LookupError):
    """Raised when an ELBv2 resource cannot be found by ARN."""


class LoadBalancerKind(str, Enum):
    """ELBv2 load balancer ``Type`` values."""

    APPLICATION = "application"
    NETWORK = "network"
    GATEWAY = "gateway"


_LB_MARKER = "loadbalancer/"


def arn_suffix(arn: str) -> str:
    """Return the CloudWatch dimension value for an ELBv2 ARN.

    - ``arn:aws:elasticloadbalancing:...:loadbalancer/app/web/50dc6c495c0c9188``
      -> ``app/web/50dc6c495c0c9188``
    - ``arn:aws:elasticloadbalancing:...:targetgroup/web-tg/73e2d6bc24d8a067``
      -> ``targetgroup/web-tg/73e2d6bc24d8a067``

    Values that are not ARNs are returned stripped, unchanged.
    """
    text = str(arn or "").strip()
    if not text.startswith("arn:"):
        return text

    # arn:partition:service:region:account:resource
    parts = text.split(":", 5)
    resource = parts[5] if len(parts) == 6 else ""
    if resource.startswith(_LB_MARKER):
        return resource[len(_LB_MARKER):]
    # Target group suffixes keep their "targetgroup/" prefix.
    return resource


@dataclass(frozen=True)
class RawHandle:
    """Provider-side ELBv2 object identified by its ARN suffix."""

    arn_suffix: str
    arn: str = ""

    def __post_init__(self) -> None:
        if not str(self.arn_suffix or "").strip():
            raise ValueError("RawHandle.arn_suffix must be a non-empty string")

    @classmethod
    def from_arn(cls, arn: str) -> RawHandle:
        return cls(arn_suffix=arn_suffix(arn), arn=str(arn or "").strip())

    def identifying_string(self) -> str:
        return self.arn_suffix


@dataclass(frozen=True)
class LoadBalancer:
    """Load balancer wrapper owning its raw handle."""

    load_balancer: RawHandle
    kind: LoadBalancerKind = LoadBalancerKind.APPLICATION
    name: str = ""

    def owned_raw(self) -> RawHandle:
        return self.load_balancer

    def identifying_string(self) -> str:
        return self.load_balancer.identifying_string()


@dataclass(frozen=True)
class TargetGroup:
    """Target group wrapper owning its raw handle and its parent load balancer."""

    target_group: RawHandle
    load_balancer: LoadBalancer
    name: str = ""

    def owned_raw(self) -> RawHandle:
        return self.target_group

    def owned_load_balancer(self) -> LoadBalancer:
        return self.load_balancer

    def identifying_string(self) -> str:
        return self.target_group.identifying_string()


LoadBalancerRef = RawHandle | LoadBalancer
TargetGroupRef = RawHandle | TargetGroup


__all__ = [
    "LoadBalancer",
    "LoadBalancerKind",
    "LoadBalancerRef",
    "RawHandle",
    "ResourceNotFoundError",
    "TargetGroup",
    "TargetGroupRef",
    "arn_suffix",
]
