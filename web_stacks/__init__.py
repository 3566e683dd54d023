"""
CDK constructs for a multi-tier web environment.

A WebEnvironmentStack owns one IdentityBuilder and hands it to the network,
storage, database, secret store, service topology and CDN components it
composes. The ServiceTopologyBuilder derives every per-service resource
from a ServiceIntent.
"""

from .common import (
    IdentityBuilder,
    BaseEnvironment,
    BaseComponent,
    StackConfigurationError,
    ResourceCreationError,
    ValidationError,
    ServiceConflictError,
    ConfigValidator,
    AWSResourceValidator
)
from .topology import (
    AutoScalingConfig,
    ServiceHandle,
    ServiceIntent,
    ServiceTopologyBuilder
)
from .network import NetworkComponent
from .storage import MediaStorage
from .database import ServerlessDatabase
from .secrets import SecretStore
from .cdn import ContentDelivery
from .web_environment import WebEnvironmentStack

__all__ = [
    # Stack classes
    "WebEnvironmentStack",

    # Naming and base classes
    "IdentityBuilder",
    "BaseEnvironment",
    "BaseComponent",

    # Service topology
    "AutoScalingConfig",
    "ServiceHandle",
    "ServiceIntent",
    "ServiceTopologyBuilder",

    # Collaborators
    "NetworkComponent",
    "MediaStorage",
    "ServerlessDatabase",
    "SecretStore",
    "ContentDelivery",

    # Exceptions
    "StackConfigurationError",
    "ResourceCreationError",
    "ValidationError",
    "ServiceConflictError",

    # Validators
    "ConfigValidator",
    "AWSResourceValidator"
]
