"""Shared fixtures for the CDK construct tests."""

import pytest
import aws_cdk as cdk
from aws_cdk import (
    aws_ec2 as ec2,
    aws_elasticloadbalancingv2 as elbv2,
)

from web_stacks.common.base import BaseEnvironment
from web_stacks.topology import ServiceIntent, ServiceTopologyBuilder


CERTIFICATE_ARN = "arn:aws:acm:us-east-1:123456789012:certificate/11111111-2222-3333-4444-555555555555"


def make_intent(**overrides) -> ServiceIntent:
    """Return the "api" intent with the given fields replaced."""
    values = dict(
        name="api",
        priority=1,
        port=8000,
        desired_count=1,
        health_check_path="/health",
        routing_conditions=[elbv2.ListenerCondition.host_headers(["api.example.com"])]
    )
    values.update(overrides)
    return ServiceIntent(**values)


def config_data(**overrides) -> dict:
    """Minimal valid environment configuration."""
    data = {
        "AppName": "modus",
        "Environment": "nprd",
        "LoadBalancer": {"CertificateArns": [CERTIFICATE_ARN]},
        "Services": [
            {
                "Name": "api",
                "Priority": 1,
                "Port": 8000,
                "DesiredCount": 1,
                "HealthCheckPath": "/health",
                "Hosts": ["api.modus-sandbox.com"],
                "EnvironmentVariables": {"PORT": "8000"},
                "EnvironmentSecrets": {"TOKEN": "api-token", "DB": "database"},
                "DatabaseAccess": True,
                "AutoScaling": {"MinimumTasks": 1, "MaximumTasks": 3},
            },
            {
                "Name": "nginx",
                "Priority": 2,
                "Port": 80,
                "DesiredCount": 1,
                "HealthCheckPath": "/",
                "Hosts": ["modus-sandbox.com"],
                "EnvironmentVariables": {"PORT": "80"},
            },
        ],
    }
    data.update(overrides)
    return data


@pytest.fixture
def stack() -> BaseEnvironment:
    app = cdk.App()
    return BaseEnvironment(app, "TestStack", app_name="modus", environment="nprd")


@pytest.fixture
def vpc(stack) -> ec2.Vpc:
    return ec2.Vpc(stack, "Vpc", max_azs=2)


@pytest.fixture
def topology(stack, vpc) -> ServiceTopologyBuilder:
    return ServiceTopologyBuilder(
        stack,
        stack.identity.build("ecsBuilder"),
        identity=stack.identity,
        vpc=vpc,
        certificate_arns=[CERTIFICATE_ARN]
    )
