from constructs import Construct
from aws_cdk import aws_ec2 as ec2

from ..common.base import BaseComponent
from ..common.constants import (
    DEFAULT_VPC_CIDR,
    DEFAULT_MAX_AZS,
    DEFAULT_NAT_GATEWAYS,
    VPC_SUFFIX,
)
from ..common.naming import IdentityBuilder
from ..common.validators import ConfigValidator


class NetworkComponent(BaseComponent):
    """
    VPC for all workloads of an environment.

    The CIDR should differ between production and non-production.
    """

    def __init__(self,
                 scope: Construct,
                 construct_id: str,
                 identity: IdentityBuilder,
                 cidr: str = DEFAULT_VPC_CIDR,
                 max_azs: int = DEFAULT_MAX_AZS,
                 nat_gateways: int = DEFAULT_NAT_GATEWAYS) -> None:
        ConfigValidator.validate_cidr_block(cidr)
        super().__init__(scope, construct_id, identity)

        self.vpc = ec2.Vpc(
            self,
            self.identity.build(VPC_SUFFIX),
            vpc_name=self.identity.name(),
            max_azs=max_azs,
            nat_gateways=nat_gateways,
            ip_addresses=ec2.IpAddresses.cidr(cidr)
        )

        self.vpc.add_flow_log("FlowLog")
