#---------------------------------------------------------------------------#
# This file is part of IGAEXPR which is released under MIT License. See the #
# LICENSE file for full license details.                                    #
#---------------------------------------------------------------------------#
from igaexpr.api import settings
from igaexpr.api import space
from igaexpr.api import expr
from igaexpr.api import assembler

from igaexpr.api.assembler import ExprAssembler
from igaexpr.api.expr      import (mass, stiffness, load, boundary_load,
                                   interface_penalty, MatrixValuedTerm,
                                   VectorValuedTerm)
