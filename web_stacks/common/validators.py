"""Validation utilities for CDK stacks."""

import re
from typing import Any, Dict, List, Optional

from aws_cdk import aws_ec2 as ec2

from .exceptions import ValidationError


class ConfigValidator:
    """Utility class for validating configuration parameters."""

    @staticmethod
    def validate_required_config(config: Dict[str, Any],
                                 required_keys: List[str]) -> None:
        """
        Validate that all required configuration keys are present.

        Args:
            config: Configuration dictionary to validate
            required_keys: List of required configuration keys

        Raises:
            ValidationError: If any required key is missing
        """
        missing_keys = [key for key in required_keys if key not in config]
        if missing_keys:
            raise ValidationError(
                f"Missing required configuration keys: {', '.join(missing_keys)}",
                parameter_name="config",
                provided_value=str(list(config.keys()))
            )

    @staticmethod
    def validate_port_range(port: int) -> None:
        """
        Validate that port number is within valid range.

        Raises:
            ValidationError: If port is outside valid range
        """
        if isinstance(port, bool) or not isinstance(port, int) or not 1 <= port <= 65535:
            raise ValidationError(
                f"Port must be between 1 and 65535, got {port}",
                parameter_name="port",
                provided_value=str(port)
            )

    @staticmethod
    def validate_cidr_block(cidr: str) -> None:
        """
        Validate CIDR block format.

        Raises:
            ValidationError: If CIDR format is invalid
        """
        cidr_pattern = re.compile(
            r'^([0-9]{1,3}\.){3}[0-9]{1,3}/([0-9]|[1-2][0-9]|3[0-2])$'
        )
        if not isinstance(cidr, str) or not cidr_pattern.match(cidr):
            raise ValidationError(
                f"Invalid CIDR block format: {cidr}",
                parameter_name="cidr",
                provided_value=str(cidr)
            )

    @staticmethod
    def validate_resource_name(name: str, max_length: int = 63) -> None:
        """
        Validate AWS resource name format.

        Args:
            name: Resource name to validate
            max_length: Maximum allowed length

        Raises:
            ValidationError: If name format is invalid
        """
        # CDK tokens resolve at deploy time
        if isinstance(name, str) and '${Token[' in name:
            return

        if not name or not isinstance(name, str):
            raise ValidationError(
                "Resource name cannot be empty",
                parameter_name="name",
                provided_value=str(name)
            )

        if len(name) > max_length:
            raise ValidationError(
                f"Resource name too long (max {max_length}): {name}",
                parameter_name="name",
                provided_value=name
            )

        if not re.match(r'^[a-zA-Z0-9-_]+$', name):
            raise ValidationError(
                f"Invalid resource name format: {name}. "
                f"Only alphanumeric characters, hyphens, and underscores allowed",
                parameter_name="name",
                provided_value=name
            )

    @staticmethod
    def validate_environment_vars(env_vars: Optional[Dict[str, str]]) -> None:
        """
        Validate environment variables dictionary.

        Raises:
            ValidationError: If environment variables are invalid
        """
        if env_vars is None:
            return

        if not isinstance(env_vars, dict):
            raise ValidationError(
                "Environment variables must be a dictionary",
                parameter_name="environment_vars",
                provided_value=str(type(env_vars))
            )

        for key, value in env_vars.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise ValidationError(
                    f"Environment variable key and value must be strings: {key}={value}",
                    parameter_name="environment_vars",
                    provided_value=f"{key}={value}"
                )

    @staticmethod
    def validate_health_check_path(path: str) -> None:
        """Health checks must target an absolute path."""
        if not isinstance(path, str) or not path.startswith('/'):
            raise ValidationError(
                f"Health check path must start with '/', got {path}",
                parameter_name="health_check_path",
                provided_value=str(path)
            )


class AWSResourceValidator:
    """Utility class for validating AWS resource parameters."""

    @staticmethod
    def validate_vpc(vpc: Any) -> None:
        """
        Validate that the network handle is a VPC construct.

        Args:
            vpc: Network handle handed to the topology

        Raises:
            ValidationError: If the handle is not an ec2.Vpc
        """
        if not isinstance(vpc, ec2.Vpc):
            raise ValidationError(
                f"Expected an ec2.Vpc network handle, got {type(vpc).__name__}",
                parameter_name="vpc",
                provided_value=str(type(vpc))
            )

    @staticmethod
    def validate_certificate_arns(certificate_arns: Optional[List[str]]) -> None:
        """
        Validate the certificates for an HTTPS listener.

        Raises:
            ValidationError: If no certificate is given or an ARN is malformed
        """
        if not certificate_arns:
            raise ValidationError(
                "At least one certificate ARN is required for the HTTPS listener",
                parameter_name="certificate_arns",
                provided_value="[]"
            )

        for arn in certificate_arns:
            AWSResourceValidator.validate_arn(arn, "acm")

    @staticmethod
    def validate_arn(arn: str, service: Optional[str] = None) -> None:
        """
        Validate AWS ARN format.

        Args:
            arn: ARN to validate
            service: Expected AWS service (optional)

        Raises:
            ValidationError: If ARN format is invalid
        """
        if not isinstance(arn, str):
            raise ValidationError(
                f"ARN must be a string, got {type(arn).__name__}",
                parameter_name="arn",
                provided_value=str(arn)
            )

        # CDK tokens resolve at deploy time
        if arn.startswith('${Token[') or '${' in arn:
            return

        arn_pattern = re.compile(
            r'^arn:aws[a-zA-Z0-9-]*:[a-zA-Z0-9-]+:'
            r'[a-zA-Z0-9-]*:[0-9]*:[a-zA-Z0-9-/._]+$'
        )

        if not arn_pattern.match(arn):
            raise ValidationError(
                f"Invalid ARN format: {arn}",
                parameter_name="arn",
                provided_value=arn
            )

        actual_service = arn.split(':')[2]
        if service and actual_service != service:
            raise ValidationError(
                f"Expected {service} service ARN, got {actual_service}",
                parameter_name="arn",
                provided_value=arn
            )
