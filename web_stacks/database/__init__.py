from .construct import ServerlessDatabase

__all__ = ["ServerlessDatabase"]
