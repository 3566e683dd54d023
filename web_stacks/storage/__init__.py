from .construct import MediaStorage

__all__ = ["MediaStorage"]
