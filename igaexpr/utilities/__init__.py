__all__ = ['quadratures', 'utils']

from igaexpr.utilities import quadratures
from igaexpr.utilities import utils
