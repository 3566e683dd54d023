from .construct import ContentDelivery

__all__ = ["ContentDelivery"]
