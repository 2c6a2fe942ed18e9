from igaexpr.core import bsplines

__all__ = ['bsplines']
