from .stack import WebEnvironmentStack

__all__ = ["WebEnvironmentStack"]
