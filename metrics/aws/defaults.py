"""Centralized default values for the ELBv2 metric catalogs.

Each table maps a CloudWatch metric name to the statistic its named
constructor pre-fills (``None`` leaves the statistic unset). Caller-supplied
change fields always win over these defaults.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Final, Mapping

from contracts.cloudwatch import Statistic

ELBV2_APPLICATION_NAMESPACE: Final[str] = "AWS/ApplicationELB"
ELBV2_NETWORK_NAMESPACE: Final[str] = "AWS/NetworkELB"

ELBV2_APPLICATION_DEFAULT_STATISTICS: Final[Mapping[str, Statistic | None]] = MappingProxyType(
    {
        # Load balancer metrics
        "ActiveConnectionCount": Statistic.SUM,
        "ClientTLSNegotiationErrorCount": Statistic.SUM,
        "ConsumedLCUs": None,
        "HTTP_Fixed_Response_Count": Statistic.SUM,
        "HTTP_Redirect_Count": Statistic.SUM,
        "HTTP_Redirect_Url_Limit_Exceeded_Count": Statistic.SUM,
        "HTTPCode_ELB_3XX_Count": Statistic.SUM,
        "HTTPCode_ELB_4XX_Count": Statistic.SUM,
        "HTTPCode_ELB_5XX_Count": Statistic.SUM,
        "HTTPCode_ELB_500_Count": Statistic.SUM,
        "HTTPCode_ELB_502_Count": Statistic.SUM,
        "HTTPCode_ELB_503_Count": Statistic.SUM,
        "HTTPCode_ELB_504_Count": Statistic.SUM,
        "IPv6ProcessedBytes": Statistic.SUM,
        "IPv6RequestCount": Statistic.SUM,
        "NewConnectionCount": Statistic.SUM,
        "ProcessedBytes": Statistic.SUM,
        "RejectedConnectionCount": Statistic.SUM,
        "RequestCount": Statistic.SUM,
        "RuleEvaluations": Statistic.SUM,
        # Target group metrics
        "HealthyHostCount": None,
        "HTTPCode_Target_2XX_Count": Statistic.SUM,
        "HTTPCode_Target_3XX_Count": Statistic.SUM,
        "HTTPCode_Target_4XX_Count": Statistic.SUM,
        "HTTPCode_Target_5XX_Count": Statistic.SUM,
        "NonStickyRequestCount": Statistic.SUM,
        "RequestCountPerTarget": Statistic.SUM,
        "TargetConnectionErrorCount": Statistic.SUM,
        "TargetResponseTime": None,
        "TargetTLSNegotiationErrorCount": Statistic.SUM,
        "UnHealthyHostCount": None,
    }
)

ELBV2_NETWORK_DEFAULT_STATISTICS: Final[Mapping[str, Statistic | None]] = MappingProxyType(
    {
        "ActiveFlowCount": None,
        "ActiveFlowCount_TLS": None,
        "ClientTLSNegotiationErrorCount": Statistic.SUM,
        "ConsumedLCUs": None,
        "HealthyHostCount": Statistic.MAXIMUM,
        "NewFlowCount": Statistic.SUM,
        "NewFlowCount_TLS": Statistic.SUM,
        "ProcessedBytes": Statistic.SUM,
        "ProcessedBytes_TLS": Statistic.SUM,
        "TargetTLSNegotiationErrorCount": Statistic.SUM,
        "TCP_Client_Reset_Count": Statistic.SUM,
        "TCP_ELB_Reset_Count": Statistic.SUM,
        "TCP_Target_Reset_Count": Statistic.SUM,
        "UnHealthyHostCount": Statistic.MAXIMUM,
    }
)
