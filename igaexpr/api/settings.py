#---------------------------------------------------------------------------#
# This file is part of IGAEXPR which is released under MIT License. See the #
# LICENSE file for full license details.                                    #
#---------------------------------------------------------------------------#

__all__ = ('IGAEXPR_DIRICHLET_STRATEGIES', 'IGAEXPR_INTERFACE_STRATEGIES',
           'IGAEXPR_DEFAULT_OPTIONS', 'IGAEXPR_OPTION_TYPES')

#==============================================================================

# ... strategies for the values of the eliminated (Dirichlet) DOFs
DIRICHLET_L2PROJECTION = 100
DIRICHLET_INTERPOLATION = 101
DIRICHLET_USER = 102
DIRICHLET_HOMOGENEOUS = 103

IGAEXPR_DIRICHLET_STRATEGIES = {
    'l2Projection' : DIRICHLET_L2PROJECTION,
    'interpolation': DIRICHLET_INTERPOLATION,
    'user'         : DIRICHLET_USER,
    'homogeneous'  : DIRICHLET_HOMOGENEOUS,
}
# ...

# ... treatment of patch interfaces
INTERFACE_CONFORMING = 1
INTERFACE_DG = 2

IGAEXPR_INTERFACE_STRATEGIES = {
    'conforming': INTERFACE_CONFORMING,
    'dg'        : INTERFACE_DG,
}
# ...

#==============================================================================

# Options recognized by the expression assembler
#   quA, quB      : Gauss nodes per direction = quA*degree + quB
#   bdA, bdB, bdO : non-zeros reserved per column
#                   = nblocks * prod_d(bdA*degree_d + bdB) * (1 + bdO)
#   nthreads      : workers sharing the elements of one patch
IGAEXPR_DEFAULT_OPTIONS = {
    'quA'              : 1.0,
    'quB'              : 1,
    'bdA'              : 2,
    'bdB'              : 1,
    'bdO'              : 0.333,
    'DirichletValues'  : DIRICHLET_INTERPOLATION,
    'InterfaceStrategy': INTERFACE_CONFORMING,
    'nthreads'         : 1,
}

IGAEXPR_OPTION_TYPES = {
    'quA'              : (int, float),
    'quB'              : (int, float),
    'bdA'              : (int, float),
    'bdB'              : (int, float),
    'bdO'              : (int, float),
    'DirichletValues'  : (int,),
    'InterfaceStrategy': (int,),
    'nthreads'         : (int,),
}
