# -*- coding: UTF-8 -*-
__all__     = ['__version__', 'api', 'core', 'fem', 'linalg', 'mapping', 'utilities']

from igaexpr.version import __version__

from igaexpr import api
from igaexpr import core
from igaexpr import fem
from igaexpr import linalg
from igaexpr import mapping
from igaexpr import utilities
