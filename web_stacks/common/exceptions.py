"""Custom exceptions for CDK stacks."""

from typing import Optional


class StackConfigurationError(Exception):
    """
    Exception raised when stack configuration is invalid.

    This is fatal: the composition root halts the environment build
    and exits non-zero.

    Attributes:
        message: Human-readable error description
        config_key: The configuration key that caused the error
    """

    def __init__(self, message: str, config_key: Optional[str] = None) -> None:
        self.message = message
        self.config_key = config_key
        super().__init__(self.message)


class ResourceCreationError(Exception):
    """
    Exception raised when AWS resource creation fails.

    Attributes:
        message: Human-readable error description
        resource_type: The AWS resource type that failed to create
    """

    def __init__(self, message: str, resource_type: Optional[str] = None) -> None:
        self.message = message
        self.resource_type = resource_type
        super().__init__(self.message)


class ValidationError(Exception):
    """
    Exception raised when parameter validation fails.

    Attributes:
        message: Human-readable error description
        parameter_name: The parameter that failed validation
        provided_value: The value that was provided
    """

    def __init__(
        self,
        message: str,
        parameter_name: Optional[str] = None,
        provided_value: Optional[str] = None
    ) -> None:
        self.message = message
        self.parameter_name = parameter_name
        self.provided_value = provided_value
        super().__init__(self.message)


class ServiceConflictError(ValidationError):
    """
    Raised when a service reuses a name or listener priority already
    taken by another service in the same topology.

    Attributes:
        service_name: The service being created
        existing_service: The service that already holds the name or priority
    """

    def __init__(
        self,
        message: str,
        parameter_name: str,
        provided_value: str,
        service_name: str,
        existing_service: str
    ) -> None:
        super().__init__(message, parameter_name, provided_value)
        self.service_name = service_name
        self.existing_service = existing_service
