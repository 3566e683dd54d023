from .store import SecretStore

__all__ = ["SecretStore"]
