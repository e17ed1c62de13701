"""
contracts/services.py

AWS client bag + region-aware factory.

- ``factory.for_region("eu-west-3")`` returns the same ``Services`` on every
  call for that region; clients are built once.
- The zone cache, the ELBv2 inventory and the CLI receive clients through
  ``Services`` and never call ``boto3`` directly, so tests hand them fakes.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any

import boto3
from botocore.config import Config

# Clients built for every region.
_REGIONAL_SERVICES = ("ec2", "elbv2", "cloudwatch")


@dataclass(frozen=True)
class Services:
    """
    SDK clients for one region.

    `region` is informational and is used in logs.
    """
    ec2: Any
    elbv2: Any = None
    cloudwatch: Any = None
    region: str = ""


class ServicesFactory:
    """
    Builds and caches per-region ``Services``.

    Usage:
      factory = ServicesFactory(sdk_config=SDK_CONFIG)
      ec2 = factory.for_region("eu-west-3").ec2

    ``for_region`` may be called from several threads (the zone cache runs its
    lookup in an executor); the per-region cache is lock-guarded.
    """

    def __init__(self, *, session: boto3.Session | None = None, sdk_config: Config | None = None) -> None:
        self._session = session or boto3.Session()
        self._sdk_config = sdk_config
        self._lock = threading.Lock()
        self._by_region: dict[str, Services] = {}

    def _client(self, service: str, region: str) -> Any:
        if self._sdk_config is None:
            return self._session.client(service, region_name=region)
        return self._session.client(service, region_name=region, config=self._sdk_config)

    def for_region(self, region: str) -> Services:
        reg = str(region or "").strip()
        if not reg:
            raise ValueError("region must be a non-empty string")

        with self._lock:
            svcs = self._by_region.get(reg)
            if svcs is None:
                clients = {name: self._client(name, reg) for name in _REGIONAL_SERVICES}
                svcs = Services(region=reg, **clients)
                self._by_region[reg] = svcs
            return svcs

    def regions(self) -> list[str]:
        """Regions with cached clients, sorted."""
        with self._lock:
            return sorted(self._by_region)

    def clear_cache(self) -> None:
        """Drop cached clients. (Mostly useful for tests.)"""
        with self._lock:
            self._by_region.clear()
