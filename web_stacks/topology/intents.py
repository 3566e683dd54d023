"""
Per-service intents consumed by the ServiceTopologyBuilder and the handle
it returns.

Every recognized option is enumerated with its default; there is no
free-form configuration bag.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from aws_cdk import (
    aws_ecr as ecr,
    aws_ecs as ecs,
    aws_elasticloadbalancingv2 as elbv2,
    aws_logs as logs,
    aws_secretsmanager as secretsmanager,
)

from ..common.constants import (
    DEFAULT_CPU,
    DEFAULT_MEMORY,
    DEFAULT_CPU_TARGET_PERCENT,
    DEFAULT_SCALING_COOLDOWN_SECONDS,
    MAX_LISTENER_RULE_PRIORITY,
)
from ..common.exceptions import ValidationError
from ..common.validators import ConfigValidator


SecretReference = Union[secretsmanager.ISecret, str]


def _require_int(value: Any, parameter_name: str, minimum: int, maximum: Optional[int] = None) -> None:
    if (isinstance(value, bool) or not isinstance(value, int) or value < minimum
            or (maximum is not None and value > maximum)):
        bounds = f">= {minimum}" if maximum is None else f"between {minimum} and {maximum}"
        raise ValidationError(
            f"{parameter_name} must be an integer {bounds}, got {value}",
            parameter_name=parameter_name,
            provided_value=str(value)
        )



def _optional_mapping(entry: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = entry.get(key) or {}
    if not isinstance(value, Mapping):
        raise ValidationError(
            f"{key} must be a mapping, got {type(value).__name__}",
            parameter_name=key,
            provided_value=str(value)
        )
    return value


@dataclass(frozen=True)
class AutoScalingConfig:
    """
    CPU based autoscaling bounds for a service.

    The cooldown applies to both scale-in and scale-out.
    """
    minimum_tasks: int
    maximum_tasks: int
    cpu_target_percent: int = DEFAULT_CPU_TARGET_PERCENT
    cooldown_seconds: int = DEFAULT_SCALING_COOLDOWN_SECONDS

    def __post_init__(self) -> None:
        _require_int(self.minimum_tasks, "minimum_tasks", 0)
        _require_int(self.maximum_tasks, "maximum_tasks", 1)
        _require_int(self.cooldown_seconds, "cooldown_seconds", 0)
        _require_int(self.cpu_target_percent, "cpu_target_percent", 1, 100)
        if self.minimum_tasks > self.maximum_tasks:
            raise ValidationError(
                f"minimum_tasks ({self.minimum_tasks}) cannot exceed "
                f"maximum_tasks ({self.maximum_tasks})",
                parameter_name="minimum_tasks",
                provided_value=str(self.minimum_tasks)
            )

    @classmethod
    def from_config(cls, entry: Mapping[str, Any]) -> "AutoScalingConfig":
        return cls(
            minimum_tasks=entry.get("MinimumTasks"),
            maximum_tasks=entry.get("MaximumTasks"),
            cpu_target_percent=entry.get("CpuTargetPercent", DEFAULT_CPU_TARGET_PERCENT),
            cooldown_seconds=entry.get("CooldownSeconds", DEFAULT_SCALING_COOLDOWN_SECONDS),
        )


@dataclass(frozen=True)
class ServiceIntent:
    """
    Everything the topology needs to know about one service.

    ``name`` and ``priority`` must be unique within one topology; the
    builder rejects a second service reusing either.
    """
    name: str
    priority: int
    port: int
    desired_count: int
    health_check_path: str
    routing_conditions: List[elbv2.ListenerCondition]
    cpu: int = DEFAULT_CPU
    memory: int = DEFAULT_MEMORY
    environment_variables: Dict[str, str] = field(default_factory=dict)
    # Values are secrets, or secret names looked up in the topology's secret store
    environment_secrets: Dict[str, SecretReference] = field(default_factory=dict)
    auto_scaling: Optional[AutoScalingConfig] = None

    def __post_init__(self) -> None:
        ConfigValidator.validate_resource_name(self.name)
        _require_int(self.priority, "priority", 1, MAX_LISTENER_RULE_PRIORITY)
        ConfigValidator.validate_port_range(self.port)
        _require_int(self.desired_count, "desired_count", 0)
        ConfigValidator.validate_health_check_path(self.health_check_path)
        _require_int(self.cpu, "cpu", 1)
        _require_int(self.memory, "memory", 1)
        ConfigValidator.validate_environment_vars(self.environment_variables)

        for key, secret in self.environment_secrets.items():
            # ISecret is a jsii protocol, so check for the attribute instead of isinstance
            if not isinstance(key, str) or not (isinstance(secret, str) or hasattr(secret, "secret_arn")):
                raise ValidationError(
                    f"Environment secret '{key}' must reference a secret or a secret name",
                    parameter_name="environment_secrets",
                    provided_value=str(key)
                )

        if not isinstance(self.routing_conditions, (list, tuple)) or not self.routing_conditions:
            raise ValidationError(
                f"Service '{self.name}' needs at least one routing condition",
                parameter_name="routing_conditions",
                provided_value="[]"
            )
        for condition in self.routing_conditions:
            if not isinstance(condition, elbv2.ListenerCondition):
                raise ValidationError(
                    f"Routing conditions of service '{self.name}' must be ListenerConditions, "
                    f"got {type(condition).__name__}",
                    parameter_name="routing_conditions",
                    provided_value=str(condition)
                )

        if self.auto_scaling is not None and not isinstance(self.auto_scaling, AutoScalingConfig):
            raise ValidationError(
                "auto_scaling must be an AutoScalingConfig",
                parameter_name="auto_scaling",
                provided_value=str(type(self.auto_scaling))
            )

    @property
    def secret_names(self) -> List[str]:
        """Secrets referenced by name, resolved when the container is built."""
        return [value for value in self.environment_secrets.values() if isinstance(value, str)]

    @classmethod
    def from_config(cls, entry: Mapping[str, Any]) -> "ServiceIntent":
        """
        Build an intent from a configuration entry.

        EnvironmentSecrets values stay secret names; the topology resolves
        them through its secret store when it builds the container.

        Raises:
            ValidationError: If the entry is incomplete or invalid
        """
        ConfigValidator.validate_required_config(
            dict(entry),
            ["Name", "Priority", "Port", "DesiredCount", "HealthCheckPath"]
        )

        auto_scaling = _optional_mapping(entry, "AutoScaling")

        return cls(
            name=entry["Name"],
            priority=entry["Priority"],
            port=entry["Port"],
            desired_count=entry["DesiredCount"],
            health_check_path=entry["HealthCheckPath"],
            routing_conditions=routing_conditions_from_config(entry),
            cpu=entry.get("Cpu", DEFAULT_CPU),
            memory=entry.get("Memory", DEFAULT_MEMORY),
            environment_variables={
                key: str(value) for key, value in _optional_mapping(entry, "EnvironmentVariables").items()
            },
            environment_secrets={
                key: str(secret_name)
                for key, secret_name in _optional_mapping(entry, "EnvironmentSecrets").items()
            },
            auto_scaling=AutoScalingConfig.from_config(auto_scaling) if auto_scaling else None,
        )


def routing_conditions_from_config(entry: Mapping[str, Any]) -> List[elbv2.ListenerCondition]:
    """Turn the Hosts and Paths of a service entry into listener conditions."""
    conditions = []
    hosts = entry.get("Hosts") or []
    paths = entry.get("Paths") or []
    if hosts:
        conditions.append(elbv2.ListenerCondition.host_headers(list(hosts)))
    if paths:
        conditions.append(elbv2.ListenerCondition.path_patterns(list(paths)))
    return conditions


@dataclass(frozen=True)
class ServiceHandle:
    """
    Immutable result of ServiceTopologyBuilder.create_service().

    Collaborator grants (database ingress and the like) take a handle, so
    they can only be issued for a service that was fully provisioned.
    """
    name: str
    service: ecs.FargateService
    target_group: elbv2.ApplicationTargetGroup
    listener_rule: elbv2.ApplicationListenerRule
    repository: ecr.Repository
    task_definition: ecs.FargateTaskDefinition
    container: ecs.ContainerDefinition
    log_group: logs.LogGroup
    scalable_target: Optional[ecs.ScalableTaskCount] = None
