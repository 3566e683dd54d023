"""Aurora MySQL database collaborator."""

import logging

from constructs import Construct
from aws_cdk import (
    aws_ec2 as ec2,
    aws_rds as rds,
    aws_secretsmanager as secretsmanager,
)

from ..common.base import BaseComponent
from ..common.constants import (
    DEFAULT_DB_MIN_CAPACITY,
    DEFAULT_DB_MAX_CAPACITY,
    DATABASE_SUFFIX,
)
from ..common.exceptions import ValidationError
from ..common.naming import IdentityBuilder
from ..topology.intents import ServiceHandle

logger = logging.getLogger(__name__)


class ServerlessDatabase(BaseComponent):
    """
    Aurora MySQL cluster with a Serverless v2 writer in the private subnets.

    Services get network access through allow_inbound_from(), which only
    accepts the handle returned by ServiceTopologyBuilder.create_service().
    """

    def __init__(self,
                 scope: Construct,
                 construct_id: str,
                 identity: IdentityBuilder,
                 vpc: ec2.IVpc,
                 min_capacity: float = DEFAULT_DB_MIN_CAPACITY,
                 max_capacity: float = DEFAULT_DB_MAX_CAPACITY) -> None:
        if min_capacity > max_capacity:
            raise ValidationError(
                f"Database min capacity ({min_capacity}) cannot exceed max capacity ({max_capacity})",
                parameter_name="min_capacity",
                provided_value=str(min_capacity)
            )
        super().__init__(scope, construct_id, identity)

        self.cluster = rds.DatabaseCluster(
            self,
            self.identity.build(DATABASE_SUFFIX),
            engine=rds.DatabaseClusterEngine.aurora_mysql(
                version=rds.AuroraMysqlEngineVersion.VER_3_04_0
            ),
            writer=rds.ClusterInstance.serverless_v2("writer"),
            serverless_v2_min_capacity=min_capacity,
            serverless_v2_max_capacity=max_capacity,
            vpc=vpc,
            vpc_subnets=ec2.SubnetSelection(subnet_type=ec2.SubnetType.PRIVATE_WITH_EGRESS),
            storage_encrypted=True
        )

    @property
    def secret(self) -> secretsmanager.ISecret:
        """Generated credentials of the cluster."""
        return self.cluster.secret

    def allow_inbound_from(self, handle: ServiceHandle) -> None:
        """
        Allow a provisioned service to reach the database on its default port.

        Raises:
            ValidationError: If ``handle`` is not a ServiceHandle
        """
        if not isinstance(handle, ServiceHandle):
            raise ValidationError(
                f"Database access can only be granted to a ServiceHandle, got {type(handle).__name__}",
                parameter_name="handle",
                provided_value=str(type(handle))
            )

        logger.info(f"Granting {handle.name} access to {self.identity.build(DATABASE_SUFFIX)}")
        self.cluster.connections.allow_default_port_from(
            handle.service,
            f"{self.identity.build(handle.name)} to database"
        )
