"""Shared ingress/cluster and the per-service resources behind them."""

from .intents import AutoScalingConfig, ServiceHandle, ServiceIntent, routing_conditions_from_config
from .builder import ServiceTopologyBuilder

__all__ = [
    "AutoScalingConfig",
    "ServiceHandle",
    "ServiceIntent",
    "ServiceTopologyBuilder",
    "routing_conditions_from_config",
]
