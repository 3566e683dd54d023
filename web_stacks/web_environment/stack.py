from constructs import Construct
from aws_cdk import CfnOutput

from helper.config import Config
from web_stacks.common.base import BaseEnvironment
from web_stacks.common.constants import (
    DEFAULT_VPC_CIDR,
    DEFAULT_MAX_AZS,
    DEFAULT_NAT_GATEWAYS,
    DEFAULT_DB_MIN_CAPACITY,
    DEFAULT_DB_MAX_CAPACITY,
    DEFAULT_CLOUDFRONT_PRICE_CLASS,
    DEFAULT_MEDIA_PATH_PATTERN,
    SECRETS_SUFFIX,
    TOPOLOGY_SUFFIX,
    CDN_SUFFIX,
)
from web_stacks.common.exceptions import StackConfigurationError
from web_stacks.cdn import ContentDelivery
from web_stacks.database import ServerlessDatabase
from web_stacks.network import NetworkComponent
from web_stacks.secrets import SecretStore
from web_stacks.storage import MediaStorage
from web_stacks.topology import ServiceIntent, ServiceTopologyBuilder


DEFAULT_DATABASE_SECRET_NAME = "database"


class WebEnvironmentStack(BaseEnvironment):
    """
    Composition root of one web environment.

    Network, media bucket, database and the service topology, one service
    per configuration entry, and a CDN in front of the load balancer and
    the bucket.
    """

    def __init__(self,
                 scope: Construct,
                 construct_id: str,
                 config: Config,
                 **kwargs) -> None:
        if not isinstance(config, Config):
            raise StackConfigurationError(
                "Configuration must be a Config instance",
                config_key="config"
            )

        super().__init__(
            scope,
            construct_id,
            app_name=config.get('AppName'),
            environment=config.get('Environment'),
            unique_identifier=config.get_optional('UniqueIdentifier'),
            config=config,
            **kwargs
        )

        network_config = self.config.get_network_config()
        network = NetworkComponent(
            self,
            self.identity.build("network"),
            identity=self.identity,
            cidr=network_config.get('Cidr', DEFAULT_VPC_CIDR),
            max_azs=network_config.get('MaxAZs', DEFAULT_MAX_AZS),
            nat_gateways=network_config.get('NatGateways', DEFAULT_NAT_GATEWAYS)
        )
        self.vpc = network.vpc

        self.media_storage = MediaStorage(self, self.identity.build("storage"), identity=self.identity)

        database_config = self.config.get_database_config()
        self.database = ServerlessDatabase(
            self,
            self.identity.build("database"),
            identity=self.identity,
            vpc=self.vpc,
            min_capacity=database_config.get('MinCapacity', DEFAULT_DB_MIN_CAPACITY),
            max_capacity=database_config.get('MaxCapacity', DEFAULT_DB_MAX_CAPACITY)
        )

        # Services reference secrets by name; the database credentials are one of them
        self.secret_store = SecretStore(self, self.identity.build(SECRETS_SUFFIX), identity=self.identity)
        self.secret_store.register(
            database_config.get('SecretName', DEFAULT_DATABASE_SECRET_NAME),
            self.database.secret
        )

        # Load balancer with listeners (80 -> 443, 443) and the ECS cluster
        self.topology = ServiceTopologyBuilder(
            self,
            self.identity.build(TOPOLOGY_SUFFIX),
            identity=self.identity,
            vpc=self.vpc,
            certificate_arns=self.config.get_load_balancer_certificate_arns(),
            secret_store=self.secret_store
        )

        self.services = {}
        for entry in self.config.get_services():
            handle = self.topology.create_service(ServiceIntent.from_config(entry))
            if entry.get('DatabaseAccess', False):
                self.database.allow_inbound_from(handle)
            self.services[handle.name] = handle

        cdn_config = self.config.get_cdn_config()
        self.content_delivery = ContentDelivery(
            self,
            self.identity.build(f"{CDN_SUFFIX}-origins"),
            identity=self.identity,
            load_balancer=self.topology.shared_ingress,
            media_bucket=self.media_storage.bucket,
            media_path_pattern=cdn_config.get('MediaPathPattern', DEFAULT_MEDIA_PATH_PATTERN),
            price_class=cdn_config.get('PriceClass', DEFAULT_CLOUDFRONT_PRICE_CLASS),
            certificate_arn=cdn_config.get('CertificateArn'),
            domain_names=cdn_config.get('DomainNames')
        )

        self.add_common_tags(self)

        CfnOutput(
            self, "LoadBalancerDnsName",
            value=self.topology.shared_ingress.load_balancer_dns_name,
            description="DNS name of the shared load balancer"
        )

        CfnOutput(
            self, "DistributionDomainName",
            value=self.content_delivery.distribution.distribution_domain_name,
            description="CloudFront domain serving the services and media"
        )

        CfnOutput(
            self, "MediaBucketName",
            value=self.media_storage.bucket.bucket_name,
            description="Bucket holding media and static files"
        )
