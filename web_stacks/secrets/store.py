"""Secrets Manager collaborator resolving secrets by name."""

import logging
from typing import Dict

from aws_cdk import aws_secretsmanager as secretsmanager
from constructs import Construct

from ..common.base import BaseComponent
from ..common.exceptions import ValidationError
from ..common.naming import IdentityBuilder
from ..common.validators import ConfigValidator

logger = logging.getLogger(__name__)


class SecretStore(BaseComponent):
    """
    Hands out secrets by name.

    Secrets owned by other constructs (database credentials, for instance)
    are registered under a name. Any other name gets a generated Secrets
    Manager secret on first lookup, reused for later lookups.
    """

    def __init__(self,
                 scope: Construct,
                 construct_id: str,
                 identity: IdentityBuilder) -> None:
        super().__init__(scope, construct_id, identity)
        self._secrets: Dict[str, secretsmanager.ISecret] = {}

    def register(self, name: str, secret: secretsmanager.ISecret) -> None:
        """
        Make an existing secret resolvable under ``name``.

        Raises:
            ValidationError: If the name is already taken
        """
        ConfigValidator.validate_resource_name(name)
        if name in self._secrets:
            raise ValidationError(
                f"Secret '{name}' is already registered",
                parameter_name="name",
                provided_value=name
            )
        self._secrets[name] = secret

    def resolve(self, name: str) -> secretsmanager.ISecret:
        """Return the secret registered as ``name``, creating it if unknown."""
        if name not in self._secrets:
            ConfigValidator.validate_resource_name(name)
            logger.info(f"Creating secret {self.identity.build(name)}")
            self._secrets[name] = secretsmanager.Secret(
                self,
                self.identity.build(name),
                secret_name=self.identity.build(name)
            )
        return self._secrets[name]

    def __contains__(self, name: str) -> bool:
        return name in self._secrets
