import yaml
import re
from pathlib import Path
from yaml.loader import SafeLoader
from typing import Dict, List, Optional, Any


class ConfigurationFileError(Exception):
    """Raised when the configuration file is missing or fails validation."""
    pass


class Config:

    _environment = 'nonprod'
    data = {}

    # ALB and target group names are capped at 32 characters
    MAX_BASE_ID_LENGTH = 32

    def __init__(self, environment, config_dir: str = 'config', data: Optional[Dict[str, Any]] = None) -> None:
        self._environment = environment
        self._config_dir = Path(config_dir)
        if data is None:
            self.load()
        else:
            self.data = dict(data)
        self._validate_identity()

    @classmethod
    def from_dict(cls, environment: str, data: Dict[str, Any]) -> "Config":
        """Build a configuration from an in-memory mapping instead of a file."""
        return cls(environment, data=data)

    @property
    def environment(self) -> str:
        return self._environment

    def load(self) -> dict:
        path = self._config_dir / f'{self._environment}.yaml'
        try:
            with open(path, encoding='utf-8') as f:
                self.data = yaml.load(f, Loader=SafeLoader) or {}
        except FileNotFoundError:
            raise ConfigurationFileError(f"Configuration file not found: {path}")
        except yaml.YAMLError as e:
            raise ConfigurationFileError(f"Configuration file {path} is not valid YAML: {e}")
        if not isinstance(self.data, dict):
            raise ConfigurationFileError(f"Configuration file {path} must contain a mapping")
        return self.data

    def get(self, key):
        return self.data[key]

    def get_optional(self, key, default=None):
        value = self.data.get(key)
        return default if value is None else value

    def _validate_identity(self) -> None:
        """
        Validate AppName, Environment and UniqueIdentifier.

        Every resource name is derived from these three values, so they must
        satisfy the most restrictive naming rule among the services used
        (ALB / target group names: 32 chars, letters, digits and hyphens).

        Raises:
            ConfigurationFileError: If validation fails
        """
        app_name = self.data.get('AppName')
        environment = self.data.get('Environment')
        unique_identifier = self.data.get('UniqueIdentifier')

        if not app_name:
            raise ConfigurationFileError("AppName is required in configuration")
        if not environment:
            raise ConfigurationFileError("Environment is required in configuration")

        for key, value in (('AppName', app_name), ('Environment', environment)):
            self._validate_name_part(key, value)
        if unique_identifier:
            self._validate_name_part('UniqueIdentifier', unique_identifier)

        if not 2 <= len(app_name) <= 20:
            raise ConfigurationFileError(
                f"AppName must be between 2 and 20 characters. Current length: {len(app_name)}"
            )

        base_id = "-".join(part for part in (app_name, environment, unique_identifier) if part)
        if len(base_id) > self.MAX_BASE_ID_LENGTH:
            raise ConfigurationFileError(
                f"'{base_id}' is too long. AppName, Environment and UniqueIdentifier together "
                f"must fit the {self.MAX_BASE_ID_LENGTH} character load balancer name limit"
            )

    @staticmethod
    def _validate_name_part(key: str, value: Any) -> None:
        if not isinstance(value, str):
            raise ConfigurationFileError(f"{key} must be a string")

        # Lowercase letters, numbers and single hyphens; must start with a letter
        if not re.match(r'^[a-z]([a-z0-9-]*[a-z0-9])?$', value):
            raise ConfigurationFileError(
                f"{key} '{value}' contains invalid characters. "
                f"Must use only lowercase letters (a-z), numbers (0-9), and hyphens (-). "
                f"Must start with a letter and end with a letter or number"
            )

        if '--' in value:
            raise ConfigurationFileError(f"{key} '{value}' contains consecutive hyphens")

    def get_network_config(self) -> Dict[str, Any]:
        """Get the network section."""
        return self.get_optional('Network', {})

    def get_load_balancer_certificate_arns(self) -> List[str]:
        """Get the certificates attached to the HTTPS listener."""
        load_balancer = self.get_optional('LoadBalancer', {})
        return list(load_balancer.get('CertificateArns') or [])

    def get_database_config(self) -> Dict[str, Any]:
        """Get the database section."""
        return self.get_optional('Database', {})

    def get_cdn_config(self) -> Dict[str, Any]:
        """Get the CDN section."""
        return self.get_optional('Cdn', {})

    def get_services(self) -> List[Dict[str, Any]]:
        """Get the list of service entries, in declaration order."""
        services = self.get_optional('Services', [])
        if not isinstance(services, list):
            raise ConfigurationFileError("Services must be a list")
        return services
