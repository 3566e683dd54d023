#!/usr/bin/env python3

import logging
import os
import sys
from typing import Optional

import aws_cdk as cdk
from cdk_nag import ( AwsSolutionsChecks, NagSuppressions )

from helper.config import Config, ConfigurationFileError
from web_stacks import (
    WebEnvironmentStack,
    StackConfigurationError,
    ResourceCreationError,
    ValidationError
)

logger = logging.getLogger(__name__)

DEFAULT_ENVIRONMENT = 'nonprod'


def build_app(app: cdk.App, config_dir: str = 'config') -> WebEnvironmentStack:
    """Create the environment stack selected by the ``environment`` context value."""
    conf = Config(app.node.try_get_context('environment') or DEFAULT_ENVIRONMENT, config_dir=config_dir)

    app_name = conf.get('AppName')
    environment = conf.get('Environment')

    stack = WebEnvironmentStack(app, f"{app_name}-web-{environment}",
                                config=conf,
                                env={
                                    "region": conf.get_optional('RegionName', os.environ.get('CDK_DEFAULT_REGION')),
                                    "account": os.environ.get('CDK_DEFAULT_ACCOUNT')
                                })

    cdk.Tags.of(app).add("Client", app_name)
    cdk.Tags.of(stack).add("Environment", environment)

    if str(app.node.try_get_context('nag')).lower() == 'true':
        cdk.Aspects.of(app).add(AwsSolutionsChecks())

    # Suppressions for patterns the environment relies on
    NagSuppressions.add_stack_suppressions(stack, [
        {"id": "AwsSolutions-S1", "reason": "Media bucket is served through CloudFront; access is logged at the distribution"},
        {"id": "AwsSolutions-ELB2", "reason": "Load balancer access logs are not enabled for non-production environments"},
        {"id": "AwsSolutions-EC23", "reason": "Load balancer is internet facing by design; traffic arrives through CloudFront"},
        {"id": "AwsSolutions-ECS2", "reason": "Environment variables contain non-sensitive configuration values only; secrets use Secrets Manager"},
        {"id": "AwsSolutions-SMG4", "reason": "Secret rotation disabled for non-production environments"},
        {"id": "AwsSolutions-RDS10", "reason": "Deletion protection disabled for non-production environments"},
        {"id": "AwsSolutions-CFR1", "reason": "No geo restriction required"},
        {"id": "AwsSolutions-CFR2", "reason": "WAF is not attached in non-production environments"},
        {"id": "AwsSolutions-CFR3", "reason": "Distribution access logging not enabled for non-production environments"},
        {"id": "AwsSolutions-IAM4", "reason": "Custom resource Lambda functions use the AWS managed Lambda execution role"},
        {"id": "AwsSolutions-IAM5", "reason": "ECR authorization token and log stream actions require wildcard resources"},
        {"id": "CdkNagValidationFailure", "reason": "Security group rules use intrinsic functions which cannot be validated at synth time"}
    ])

    return stack


def main(app: Optional[cdk.App] = None) -> int:
    """
    Build and synthesize the environment.

    Returns:
        0 on success, 1 when the environment cannot be constructed
    """
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    app = app or cdk.App()

    try:
        build_app(app)
    except (ConfigurationFileError, StackConfigurationError, ValidationError, ResourceCreationError) as e:
        logger.error(f"Environment construction failed: {e}")
        return 1

    app.synth()
    return 0


if __name__ == '__main__':
    sys.exit(main())
