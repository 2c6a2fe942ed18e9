#---------------------------------------------------------------------------#
# This file is part of IGAEXPR which is released under MIT License. See the #
# LICENSE file for full license details.                                    #
#---------------------------------------------------------------------------#
# -*- coding: UTF-8 -*-

from igaexpr.fem import basic
from igaexpr.fem import splines
from igaexpr.fem import tensor
from igaexpr.fem import topology
from igaexpr.fem import multipatch
from igaexpr.fem import dof_mapper
