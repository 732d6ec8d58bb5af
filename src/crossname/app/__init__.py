from .core import CrossnameApp

__all__ = ["CrossnameApp"]
