from .bus import bus, crossname_operator

__all__ = ["bus", "crossname_operator"]
