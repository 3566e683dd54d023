"""
Unit tests for the network, storage, database, secret store and CDN
components composed by the web environment.
"""

import pytest
from aws_cdk import (
    aws_ec2 as ec2,
    aws_secretsmanager as secretsmanager,
)
from aws_cdk.assertions import Match, Template

from web_stacks.common.exceptions import ValidationError
from web_stacks.cdn import ContentDelivery
from web_stacks.database import ServerlessDatabase
from web_stacks.network import NetworkComponent
from web_stacks.secrets import SecretStore
from web_stacks.storage import MediaStorage

from conftest import make_intent


class TestNetworkComponent:
    """Test the environment VPC."""

    def test_vpc(self, stack):
        network = NetworkComponent(stack, "Network", identity=stack.identity,
                                   cidr="10.20.0.0/16", max_azs=2, nat_gateways=1)
        assert isinstance(network.vpc, ec2.Vpc)

        template = Template.from_stack(stack)
        template.has_resource_properties("AWS::EC2::VPC", {
            "CidrBlock": "10.20.0.0/16",
            "Tags": Match.array_with([{"Key": "Name", "Value": "modus-nprd"}])
        })
        template.resource_count_is("AWS::EC2::NatGateway", 1)
        template.resource_count_is("AWS::EC2::FlowLog", 1)

    @pytest.mark.parametrize("cidr", ["10.20.0.0", "10.20.0.0/33", "not-a-cidr"])
    def test_invalid_cidr(self, stack, cidr):
        with pytest.raises(ValidationError):
            NetworkComponent(stack, "Network", identity=stack.identity, cidr=cidr)


class TestMediaStorage:
    """Test the media bucket."""

    def test_bucket_is_private_and_encrypted(self, stack):
        MediaStorage(stack, "Storage", identity=stack.identity)

        template = Template.from_stack(stack)
        template.has_resource_properties("AWS::S3::Bucket", {
            "BucketEncryption": {
                "ServerSideEncryptionConfiguration": [{
                    "ServerSideEncryptionByDefault": {"SSEAlgorithm": "AES256"}
                }]
            },
            "PublicAccessBlockConfiguration": {
                "BlockPublicAcls": True,
                "BlockPublicPolicy": True,
                "IgnorePublicAcls": True,
                "RestrictPublicBuckets": True
            }
        })


class TestSecretStore:
    """Test resolving secrets by name."""

    def test_resolve_creates_secret_once(self, stack):
        store = SecretStore(stack, "Secrets", identity=stack.identity)

        first = store.resolve("api-token")
        second = store.resolve("api-token")

        assert first is second
        template = Template.from_stack(stack)
        template.resource_count_is("AWS::SecretsManager::Secret", 1)
        template.has_resource_properties("AWS::SecretsManager::Secret", {
            "Name": "modus-nprd-api-token"
        })

    def test_registered_secret_is_returned(self, stack):
        store = SecretStore(stack, "Secrets", identity=stack.identity)
        secret = secretsmanager.Secret(stack, "DatabaseSecret")

        store.register("database", secret)

        assert "database" in store
        assert store.resolve("database") is secret
        Template.from_stack(stack).resource_count_is("AWS::SecretsManager::Secret", 1)

    def test_duplicate_registration(self, stack):
        store = SecretStore(stack, "Secrets", identity=stack.identity)
        store.register("database", secretsmanager.Secret(stack, "First"))

        with pytest.raises(ValidationError) as exc_info:
            store.register("database", secretsmanager.Secret(stack, "Second"))
        assert exc_info.value.provided_value == "database"

    def test_invalid_secret_name(self, stack):
        store = SecretStore(stack, "Secrets", identity=stack.identity)
        with pytest.raises(ValidationError):
            store.resolve("api token")


class TestServerlessDatabase:
    """Test the Aurora cluster and service access grants."""

    def test_cluster(self, stack, vpc):
        database = ServerlessDatabase(stack, "Database", identity=stack.identity, vpc=vpc)
        assert database.secret is not None

        template = Template.from_stack(stack)
        template.has_resource_properties("AWS::RDS::DBCluster", {
            "Engine": "aurora-mysql",
            "StorageEncrypted": True,
            "ServerlessV2ScalingConfiguration": {
                "MinCapacity": 0.5,
                "MaxCapacity": 2
            }
        })
        template.resource_count_is("AWS::SecretsManager::Secret", 1)

    def test_capacity_bounds(self, stack, vpc):
        with pytest.raises(ValidationError) as exc_info:
            ServerlessDatabase(stack, "Database", identity=stack.identity, vpc=vpc,
                               min_capacity=4, max_capacity=2)
        assert exc_info.value.parameter_name == "min_capacity"

    def test_allow_inbound_from_service(self, stack, vpc, topology):
        database = ServerlessDatabase(stack, "Database", identity=stack.identity, vpc=vpc)
        handle = topology.create_service(make_intent())

        database.allow_inbound_from(handle)

        template = Template.from_stack(stack)
        template.has_resource_properties("AWS::EC2::SecurityGroupIngress", {
            "IpProtocol": "tcp",
            "Description": "modus-nprd-api to database",
            "FromPort": {"Fn::GetAtt": Match.array_with(["Endpoint.Port"])}
        })

    def test_allow_inbound_requires_handle(self, stack, vpc, topology):
        """Test that raw constructs cannot be granted database access."""
        database = ServerlessDatabase(stack, "Database", identity=stack.identity, vpc=vpc)
        handle = topology.create_service(make_intent())

        with pytest.raises(ValidationError) as exc_info:
            database.allow_inbound_from(handle.service)
        assert exc_info.value.parameter_name == "handle"


class TestContentDelivery:
    """Test the CloudFront distribution."""

    def test_distribution_origins(self, stack, topology):
        media = MediaStorage(stack, "Storage", identity=stack.identity)
        ContentDelivery(stack, "Cdn", identity=stack.identity,
                        load_balancer=topology.shared_ingress, media_bucket=media.bucket)

        template = Template.from_stack(stack)
        distribution = list(template.find_resources("AWS::CloudFront::Distribution").values())[0]
        config = distribution["Properties"]["DistributionConfig"]

        assert len(config["Origins"]) == 2
        assert config["PriceClass"] == "PriceClass_100"
        assert config["DefaultCacheBehavior"]["ViewerProtocolPolicy"] == "redirect-to-https"
        assert [behavior["PathPattern"] for behavior in config["CacheBehaviors"]] == ["/media/*"]
        template.resource_count_is("AWS::CloudFront::OriginAccessControl", 1)

    def test_price_class(self, stack, topology):
        media = MediaStorage(stack, "Storage", identity=stack.identity)
        ContentDelivery(stack, "Cdn", identity=stack.identity,
                        load_balancer=topology.shared_ingress, media_bucket=media.bucket,
                        price_class="PriceClass_All")

        template = Template.from_stack(stack)
        template.has_resource_properties("AWS::CloudFront::Distribution", {
            "DistributionConfig": Match.object_like({"PriceClass": "PriceClass_All"})
        })

    def test_unknown_price_class(self, stack, topology):
        media = MediaStorage(stack, "Storage", identity=stack.identity)
        with pytest.raises(ValidationError) as exc_info:
            ContentDelivery(stack, "Cdn", identity=stack.identity,
                            load_balancer=topology.shared_ingress, media_bucket=media.bucket,
                            price_class="PriceClass_50")
        assert exc_info.value.parameter_name == "price_class"

    def test_certificate_requires_domain_names(self, stack, topology):
        media = MediaStorage(stack, "Storage", identity=stack.identity)
        with pytest.raises(ValidationError) as exc_info:
            ContentDelivery(stack, "Cdn", identity=stack.identity,
                            load_balancer=topology.shared_ingress, media_bucket=media.bucket,
                            certificate_arn="arn:aws:acm:us-east-1:123456789012:certificate/cdn")
        assert exc_info.value.parameter_name == "domain_names"

    def test_custom_domain(self, stack, topology):
        media = MediaStorage(stack, "Storage", identity=stack.identity)
        ContentDelivery(stack, "Cdn", identity=stack.identity,
                        load_balancer=topology.shared_ingress, media_bucket=media.bucket,
                        certificate_arn="arn:aws:acm:us-east-1:123456789012:certificate/cdn",
                        domain_names=["modus-sandbox.com"])

        template = Template.from_stack(stack)
        template.has_resource_properties("AWS::CloudFront::Distribution", {
            "DistributionConfig": Match.object_like({"Aliases": ["modus-sandbox.com"]})
        })
