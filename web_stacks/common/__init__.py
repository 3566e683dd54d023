"""
Common CDK stack components and utilities.

Shared by every stack and construct of an environment: the naming
authority, base classes, exceptions, validators and constants.
"""

from .naming import IdentityBuilder
from .base import BaseEnvironment, BaseComponent

from .exceptions import (
    StackConfigurationError,
    ResourceCreationError,
    ValidationError,
    ServiceConflictError
)

from .validators import (
    ConfigValidator,
    AWSResourceValidator
)

__all__ = [
    "IdentityBuilder",

    # Base classes
    "BaseEnvironment",
    "BaseComponent",

    # Exceptions
    "StackConfigurationError",
    "ResourceCreationError",
    "ValidationError",
    "ServiceConflictError",

    # Validators
    "ConfigValidator",
    "AWSResourceValidator",
]
