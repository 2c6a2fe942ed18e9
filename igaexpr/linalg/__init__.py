__all__ = ['sparse']

from igaexpr.linalg import sparse
