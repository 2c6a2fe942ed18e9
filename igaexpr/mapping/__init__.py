__all__ = ['basic', 'analytical', 'analytical_gallery']

from igaexpr.mapping import basic
from igaexpr.mapping import analytical
from igaexpr.mapping import analytical_gallery
