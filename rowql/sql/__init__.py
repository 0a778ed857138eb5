from .builder import SQLBuilder

__all__ = ['SQLBuilder']
