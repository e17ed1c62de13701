"""AWS SDK configuration.

The zone cache and the CLI build their clients with this config to keep client
tuning (retries, timeouts, user agent) in one place.
"""

from botocore.config import Config

from infra.config import get_settings
from version import ENGINE_NAME, ENGINE_VERSION

_AWS_CFG = get_settings().aws

SDK_CONFIG = Config(
    retries={"max_attempts": int(_AWS_CFG.max_retries), "mode": "adaptive"},
    user_agent_extra=f"{ENGINE_NAME}/{ENGINE_VERSION}",
    connect_timeout=int(_AWS_CFG.connect_timeout),
    read_timeout=int(_AWS_CFG.timeout),
)
