from .construct import NetworkComponent

__all__ = ["NetworkComponent"]
