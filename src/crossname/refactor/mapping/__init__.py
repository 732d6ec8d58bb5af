from .loader import MappingLoader

__all__ = ["MappingLoader"]
