"""
Naming convention for every construct id and physical name in an environment.

Convention: {app_name}-{environment}[-{unique_identifier}]-{suffix}
Examples:
  - modus-nprd-vpc
  - modus-nprd-api-targetGroup
  - modus-nprd-blue-cluster
"""

from dataclasses import dataclass
from typing import Optional

from .constants import ID_SEPARATOR


@dataclass(frozen=True)
class IdentityBuilder:
    """
    Derives stable ids and names from the application identity.

    One instance is created per environment and handed down by reference to
    every nested component, so the whole construction tree shares a single
    naming scheme.
    """
    app_name: str
    environment: str
    unique_identifier: Optional[str] = None

    @property
    def base_id(self) -> str:
        # Empty components are skipped, not joined as empty tokens
        return ID_SEPARATOR.join(
            part for part in (self.app_name, self.environment, self.unique_identifier) if part
        )

    def build(self, suffix: str) -> str:
        """
        Build an id for a resource.

        Args:
            suffix: Resource name, unique within the caller's scope

        Returns:
            The base id followed by the suffix
        """
        return ID_SEPARATOR.join([self.base_id, suffix])

    def name(self) -> str:
        """Return the base id without any suffix."""
        return self.base_id
