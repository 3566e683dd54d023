"""
Base classes shared by every stack and construct of an environment.

BaseEnvironment is the root of the ownership tree: it creates the one
IdentityBuilder of the environment. BaseComponent is any nested construct;
it receives that IdentityBuilder from its parent instead of creating one.
"""

from typing import Dict, Any, Optional

import aws_cdk as cdk
from aws_cdk import (
    aws_logs as logs,
    Stack
)
from constructs import Construct

from helper.config import Config
from .constants import DEFAULT_LOG_RETENTION_DAYS
from .exceptions import StackConfigurationError, ResourceCreationError
from .naming import IdentityBuilder
from .validators import ConfigValidator


RETENTION_MAPPING = {
    1: logs.RetentionDays.ONE_DAY,
    3: logs.RetentionDays.THREE_DAYS,
    5: logs.RetentionDays.FIVE_DAYS,
    7: logs.RetentionDays.ONE_WEEK,
    14: logs.RetentionDays.TWO_WEEKS,
    30: logs.RetentionDays.ONE_MONTH,
    60: logs.RetentionDays.TWO_MONTHS,
    90: logs.RetentionDays.THREE_MONTHS,
    120: logs.RetentionDays.FOUR_MONTHS,
    150: logs.RetentionDays.FIVE_MONTHS,
    180: logs.RetentionDays.SIX_MONTHS,
    365: logs.RetentionDays.ONE_YEAR,
    400: logs.RetentionDays.THIRTEEN_MONTHS,
    545: logs.RetentionDays.EIGHTEEN_MONTHS,
    731: logs.RetentionDays.TWO_YEARS,
    1827: logs.RetentionDays.FIVE_YEARS,
    3653: logs.RetentionDays.TEN_YEARS
}


class BaseEnvironment(Stack):
    """
    Base stack owning the naming authority of one environment.

    This class provides:
    - A fresh IdentityBuilder exposed as ``identity``
    - Configuration lookups with validation
    - Common tagging
    """

    def __init__(self,
                 scope: Construct,
                 construct_id: str,
                 app_name: str,
                 environment: str,
                 unique_identifier: Optional[str] = None,
                 config: Optional[Config] = None,
                 **kwargs) -> None:
        """
        Initialize the environment stack.

        Args:
            scope: CDK scope
            construct_id: Unique identifier for this construct
            app_name: Application name
            environment: Environment name (e.g. nprd)
            unique_identifier: Optional disambiguator appended to every id
            config: Configuration object, when the stack is config driven
            **kwargs: Additional keyword arguments for Stack

        Raises:
            StackConfigurationError: If the configuration object is invalid
        """
        super().__init__(scope, construct_id, **kwargs)
        self.config = config
        self._validate_config()
        self.identity = IdentityBuilder(app_name, environment, unique_identifier)

    def _validate_config(self) -> None:
        if self.config is not None and not isinstance(self.config, Config):
            raise StackConfigurationError(
                "Configuration must be a Config instance",
                config_key="config"
            )

    def get_required_config(self, key: str) -> Any:
        """
        Get a required configuration value with validation.

        Raises:
            StackConfigurationError: If key is missing
        """
        if self.config is None:
            raise StackConfigurationError(
                f"Required configuration key '{key}' requested but no configuration was given",
                config_key=key
            )
        try:
            value = self.config.get(key)
        except KeyError:
            value = None
        if value is None:
            raise StackConfigurationError(
                f"Required configuration key '{key}' is missing",
                config_key=key
            )
        return value

    def get_optional_config(self, key: str, default_value: Any = None) -> Any:
        """
        Get an optional configuration value.

        Args:
            key: Configuration key to retrieve
            default_value: Default value if key is not found

        Returns:
            The configuration value or default
        """
        if self.config is None:
            return default_value
        return self.config.get_optional(key, default_value)

    def add_common_tags(self, resource: Any, additional_tags: Dict[str, str] = None) -> None:
        """
        Add common tags to a resource.

        Args:
            resource: The resource to tag
            additional_tags: Additional tags to add
        """
        common_tags = {
            "Environment": self.identity.environment,
            "Project": self.identity.app_name,
            "ManagedBy": "CDK"
        }

        if additional_tags:
            common_tags.update(additional_tags)

        for key, value in common_tags.items():
            cdk.Tags.of(resource).add(key, value)


class BaseComponent(Construct):
    """
    Base construct for every nested unit of an environment.

    The IdentityBuilder is handed down from the parent, never instantiated
    here, so that nested components need no app/environment of their own.
    """

    def __init__(self,
                 scope: Construct,
                 construct_id: str,
                 identity: IdentityBuilder) -> None:
        if not isinstance(identity, IdentityBuilder):
            raise StackConfigurationError(
                f"Components require the parent's IdentityBuilder, got {type(identity).__name__}",
                config_key="identity"
            )
        super().__init__(scope, construct_id)
        self.identity = identity

    def create_log_group(self,
                         name: str,
                         log_group_name: Optional[str] = None,
                         retention_days: int = DEFAULT_LOG_RETENTION_DAYS,
                         removal_policy: cdk.RemovalPolicy = cdk.RemovalPolicy.DESTROY) -> logs.LogGroup:
        """
        Create a standardized log group with validation.

        Args:
            name: Construct-level name, passed through the IdentityBuilder
            log_group_name: Physical log group name (CloudFormation generated if omitted)
            retention_days: Log retention period in days
            removal_policy: Removal policy for the log group

        Returns:
            The created log group

        Raises:
            ResourceCreationError: If log group creation fails
        """
        try:
            ConfigValidator.validate_resource_name(name)
            retention = RETENTION_MAPPING.get(retention_days, logs.RetentionDays.ONE_MONTH)

            return logs.LogGroup(
                self,
                self.identity.build(f"{name}-logGroup"),
                log_group_name=log_group_name,
                retention=retention,
                removal_policy=removal_policy
            )
        except Exception as e:
            raise ResourceCreationError(
                f"Failed to create log group '{name}': {str(e)}",
                resource_type="LogGroup"
            ) from e
