"""
Service topology builder.

One shared internet-facing load balancer and one shared ECS cluster; each
call to create_service() adds the per-service resources behind them.
"""

import logging
from typing import Dict, List, Optional, Tuple

import aws_cdk as cdk
from aws_cdk import (
    aws_ec2 as ec2,
    aws_ecr as ecr,
    aws_ecs as ecs,
    aws_elasticloadbalancingv2 as elbv2,
    aws_logs as logs,
    aws_secretsmanager as secretsmanager,
    Duration,
    RemovalPolicy,
)
from constructs import Construct

from ..common.base import BaseComponent
from ..common.constants import (
    HTTP_PORT,
    HTTPS_PORT,
    TARGET_GROUP_PORT,
    NOT_IMPLEMENTED_STATUS_CODE,
    DEFAULT_DEREGISTRATION_DELAY,
    MAX_IMAGE_COUNT,
)
from ..common.exceptions import (
    ResourceCreationError,
    ServiceConflictError,
    StackConfigurationError,
    ValidationError,
)
from ..common.naming import IdentityBuilder
from ..common.validators import AWSResourceValidator
from ..secrets.store import SecretStore
from .intents import SecretReference, ServiceHandle, ServiceIntent

logger = logging.getLogger(__name__)


class ServiceTopologyBuilder(BaseComponent):
    """
    Shared ingress and cluster for every service of an environment.

    Construction creates the load balancer with its two listeners
    (HTTP:80 redirecting to HTTPS, HTTPS:443 answering 501 until rules are
    added) and the cluster. Use create_service() once per service.

    Example:
        topology = ServiceTopologyBuilder(self, self.identity.build("ecsBuilder"),
                                          identity=self.identity, vpc=vpc,
                                          certificate_arns=[certificate_arn])
        api = topology.create_service(ServiceIntent(name="api", priority=1, ...))
        database.allow_inbound_from(api)
    """

    def __init__(self,
                 scope: Construct,
                 construct_id: str,
                 identity: IdentityBuilder,
                 vpc: ec2.Vpc,
                 certificate_arns: List[str],
                 secret_store: Optional[SecretStore] = None) -> None:
        """
        Initialize the shared ingress and cluster.

        Args:
            scope: CDK scope
            construct_id: Unique identifier for this construct
            identity: The environment's IdentityBuilder
            vpc: Network the load balancer, cluster and target groups live in
            certificate_arns: ACM certificates for the HTTPS listener
            secret_store: Resolves secrets that intents reference by name

        Raises:
            StackConfigurationError: If the network handle is not a VPC or no
                certificate is given. Nothing is created in that case.
        """
        try:
            AWSResourceValidator.validate_vpc(vpc)
            AWSResourceValidator.validate_certificate_arns(certificate_arns)
        except ValidationError as e:
            logger.error(f"Cannot build service topology: {e.message}")
            raise StackConfigurationError(
                f"Invalid service topology configuration: {e.message}",
                config_key=e.parameter_name
            ) from e

        super().__init__(scope, construct_id, identity)

        self._vpc = vpc
        self._secret_store = secret_store
        self._services: List[ServiceHandle] = []
        self._services_by_name: Dict[str, ServiceHandle] = {}
        self._services_by_priority: Dict[int, ServiceHandle] = {}

        # Internet facing Application Load Balancer
        self._load_balancer = elbv2.ApplicationLoadBalancer(
            self,
            self.identity.build("loadBalancer"),
            load_balancer_name=self.identity.name(),
            vpc=vpc,
            internet_facing=True
        )

        # HTTP Listener (Port 80)
        self._http_listener = self._load_balancer.add_listener(
            self.identity.build("httpListener"),
            port=HTTP_PORT,
            default_action=elbv2.ListenerAction.redirect(
                protocol="HTTPS",
                port=str(HTTPS_PORT),
                permanent=True
            )
        )

        # HTTPS Listener (Port 443), rules are added per service
        self._https_listener = self._load_balancer.add_listener(
            self.identity.build("httpsListener"),
            port=HTTPS_PORT,
            certificates=[elbv2.ListenerCertificate.from_arn(arn) for arn in certificate_arns],
            default_action=elbv2.ListenerAction.fixed_response(NOT_IMPLEMENTED_STATUS_CODE)
        )

        self._cluster = ecs.Cluster(
            self,
            self.identity.build("cluster"),
            vpc=vpc,
            cluster_name=self.identity.name(),
            container_insights=True
        )

        logger.info(f"Service topology {self.identity.name()} ready")

    @property
    def shared_ingress(self) -> elbv2.ApplicationLoadBalancer:
        """Load balancer in front of every service, e.g. for a CDN origin."""
        return self._load_balancer

    @property
    def secure_listener(self) -> elbv2.ApplicationListener:
        return self._https_listener

    @property
    def shared_cluster(self) -> ecs.Cluster:
        return self._cluster

    @property
    def services(self) -> Tuple[ServiceHandle, ...]:
        """Handles of the services created so far, in creation order."""
        return tuple(self._services)

    def create_service(self, intent: ServiceIntent) -> ServiceHandle:
        """
        Generate target group, listener rule, repository, task definition,
        container, log group, service and permissions for one service.

        Args:
            intent: What to run and how to route to it

        Returns:
            Handle of the provisioned service, used for collaborator grants

        Raises:
            ServiceConflictError: If the name or priority is already taken.
                Nothing is created in that case.
            ValidationError: If the intent references secrets by name and
                the topology has no secret store
            ResourceCreationError: If any resource fails to be created
        """
        self._validate_intent(intent)
        name = intent.name
        logger.info(f"Creating service {self.identity.build(name)} with priority {intent.priority}")

        try:
            target_group = self._create_target_group(intent)
            listener_rule = self._create_listener_rule(intent, target_group)
            repository = self._create_repository(intent)
            task_definition = self._create_task_definition(intent)
            log_group = self.create_log_group(name, log_group_name=self.identity.build(name))
            container = self._add_container(intent, task_definition, repository, log_group)

            service = ecs.FargateService(
                self,
                self.identity.build(f"{name}-service"),
                cluster=self._cluster,
                service_name=self.identity.build(name),
                desired_count=intent.desired_count,
                task_definition=task_definition
            )
            service.attach_to_application_target_group(target_group)
            cdk.Tags.of(service).add("ServiceName", name)

            scalable_target = self._configure_auto_scaling(intent, service)

            # Each service can only pull its own image
            repository.grant_pull(task_definition.obtain_execution_role())
            # Internal requests back through the load balancer
            service.connections.allow_to(
                self._load_balancer,
                ec2.Port.tcp(HTTP_PORT),
                f"{self.identity.build(name)} to shared load balancer"
            )
        except ResourceCreationError:
            raise
        except Exception as e:
            raise ResourceCreationError(
                f"Failed to create service '{name}': {str(e)}",
                resource_type="FargateService"
            ) from e

        handle = ServiceHandle(
            name=name,
            service=service,
            target_group=target_group,
            listener_rule=listener_rule,
            repository=repository,
            task_definition=task_definition,
            container=container,
            log_group=log_group,
            scalable_target=scalable_target
        )
        self._services.append(handle)
        self._services_by_name[name] = handle
        self._services_by_priority[intent.priority] = handle
        return handle

    def _validate_intent(self, intent: ServiceIntent) -> None:
        if not isinstance(intent, ServiceIntent):
            raise ValidationError(
                f"Expected a ServiceIntent, got {type(intent).__name__}",
                parameter_name="intent",
                provided_value=str(type(intent))
            )

        existing = self._services_by_name.get(intent.name)
        if existing is not None:
            logger.error(f"Service name '{intent.name}' is already used in {self.identity.name()}")
            raise ServiceConflictError(
                f"Service '{intent.name}' already exists in this topology",
                parameter_name="name",
                provided_value=intent.name,
                service_name=intent.name,
                existing_service=existing.name
            )

        existing = self._services_by_priority.get(intent.priority)
        if existing is not None:
            logger.error(
                f"Listener priority {intent.priority} of '{intent.name}' is already used by '{existing.name}'"
            )
            raise ServiceConflictError(
                f"Service '{intent.name}' cannot use listener priority {intent.priority}: "
                f"already used by service '{existing.name}'",
                parameter_name="priority",
                provided_value=str(intent.priority),
                service_name=intent.name,
                existing_service=existing.name
            )

        if intent.secret_names and self._secret_store is None:
            raise ValidationError(
                f"Service '{intent.name}' references secrets by name but the topology has no secret store",
                parameter_name="environment_secrets",
                provided_value=str(intent.secret_names)
            )

    def _create_target_group(self, intent: ServiceIntent) -> elbv2.ApplicationTargetGroup:
        """Create the IP target group, health checked on the container port."""
        return elbv2.ApplicationTargetGroup(
            self,
            self.identity.build(f"{intent.name}-targetGroup"),
            port=TARGET_GROUP_PORT,
            target_type=elbv2.TargetType.IP,
            vpc=self._vpc,
            health_check=elbv2.HealthCheck(
                port=str(intent.port),
                path=intent.health_check_path
            ),
            deregistration_delay=Duration.seconds(DEFAULT_DEREGISTRATION_DELAY)
        )

    def _create_listener_rule(self,
                              intent: ServiceIntent,
                              target_group: elbv2.ApplicationTargetGroup) -> elbv2.ApplicationListenerRule:
        return elbv2.ApplicationListenerRule(
            self,
            self.identity.build(f"{intent.name}-listenerRule"),
            listener=self._https_listener,
            priority=intent.priority,
            conditions=list(intent.routing_conditions),
            target_groups=[target_group]
        )

    def _create_repository(self, intent: ServiceIntent) -> ecr.Repository:
        return ecr.Repository(
            self,
            self.identity.build(f"{intent.name}-repository"),
            lifecycle_rules=[ecr.LifecycleRule(max_image_count=MAX_IMAGE_COUNT)],
            image_scan_on_push=True,
            removal_policy=RemovalPolicy.DESTROY,
            empty_on_delete=True
        )

    def _create_task_definition(self, intent: ServiceIntent) -> ecs.FargateTaskDefinition:
        return ecs.FargateTaskDefinition(
            self,
            self.identity.build(f"{intent.name}-taskDefinition"),
            family=self.identity.build(intent.name),
            cpu=intent.cpu,
            memory_limit_mib=intent.memory
        )

    def _add_container(self,
                       intent: ServiceIntent,
                       task_definition: ecs.FargateTaskDefinition,
                       repository: ecr.Repository,
                       log_group: logs.LogGroup) -> ecs.ContainerDefinition:
        """Add the single essential container, resolving secrets now."""
        container_secrets = {
            key: ecs.Secret.from_secrets_manager(self._resolve_secret(reference))
            for key, reference in intent.environment_secrets.items()
        }

        return task_definition.add_container(
            self.identity.build(f"{intent.name}-container"),
            essential=True,
            image=ecs.ContainerImage.from_ecr_repository(repository),
            logging=ecs.LogDrivers.aws_logs(
                stream_prefix=self.identity.build(intent.name),
                log_group=log_group
            ),
            environment=dict(intent.environment_variables),
            secrets=container_secrets or None,
            port_mappings=[ecs.PortMapping(container_port=intent.port)]
        )

    def _resolve_secret(self, reference: SecretReference) -> secretsmanager.ISecret:
        if isinstance(reference, str):
            return self._secret_store.resolve(reference)
        return reference

    def _configure_auto_scaling(self,
                                intent: ServiceIntent,
                                service: ecs.FargateService) -> Optional[ecs.ScalableTaskCount]:
        config = intent.auto_scaling
        if config is None:
            return None

        scalable_target = service.auto_scale_task_count(
            min_capacity=config.minimum_tasks,
            max_capacity=config.maximum_tasks
        )
        cooldown = Duration.seconds(config.cooldown_seconds)
        scalable_target.scale_on_cpu_utilization(
            self.identity.build(f"{intent.name}-scaling"),
            target_utilization_percent=config.cpu_target_percent,
            scale_in_cooldown=cooldown,
            scale_out_cooldown=cooldown
        )
        return scalable_target
