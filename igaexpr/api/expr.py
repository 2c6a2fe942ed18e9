#---------------------------------------------------------------------------#
# This file is part of IGAEXPR which is released under MIT License. See the #
# LICENSE file for full license details.                                    #
#---------------------------------------------------------------------------#
"""
Integrands of the expression assembler.

A term is either matrix valued (bilinear in a test space `row` and a trial
space `col`) or vector valued (linear in `row`). Its kernel returns, at one
quadrature point, the dense local block of shape (nrow*dim_row, ncol*dim_col)
or (nrow*dim_row,), with component-major ordering. The traversal multiplies
each point value by the quadrature weight and sums over the points, so
kernels must include the measure, e.g. `ctx.measure[k]`.

Row and column spaces are `FeSpace` objects, evaluated on the current
element, or `space.plus()`, evaluated on the paired side of an interface.

"""
import copy

import numpy as np

from igaexpr.api.space       import FeSpace, SideRef
from igaexpr.utilities.utils import vectorize_function

__all__ = ('Coefficient', 'MutableCoefficient', 'Solution',
           'MatrixValuedTerm', 'VectorValuedTerm',
           'mass', 'stiffness', 'load', 'boundary_load', 'interface_penalty')

#==============================================================================
# COEFFICIENTS
#==============================================================================
class Coefficient:
    """
    Function of the physical coordinates (or of the parametric coordinates if
    `parametric` is True).

    Parameters
    ----------
    f : callable, sympy expression, str, float or sequence of those

    ncomp : int
        Number of components.

    """
    def __init__(self, f, ncomp=1, parametric=False):
        self._f          = f
        self._func       = vectorize_function(f, ncomp)
        self._ncomp      = ncomp
        self._parametric = parametric

    @property
    def ncomp(self):
        return self._ncomp

    @property
    def function(self):
        return self._f

    def evaluate(self, ctx):
        return self._func(ctx.points if self._parametric else ctx.x)

#==============================================================================
class MutableCoefficient:
    """
    Source function of boundary passes. The assembler sets it to the function
    of each boundary condition before the elements of its side are visited.

    """
    def __init__(self, ncomp=1):
        self._ncomp = ncomp
        self._func  = None
        self._param = False
        self._coef  = None

    @property
    def ncomp(self):
        return self._ncomp

    @ncomp.setter
    def ncomp(self, ncomp):
        if ncomp != self._ncomp:
            self._ncomp = ncomp
            self.set(self._func, self._param)

    def set(self, f, parametric=False):
        self._func  = f
        self._param = parametric
        self._coef  = None if f is None else Coefficient(f, self._ncomp, parametric)

    def is_set(self):
        return self._coef is not None

    def evaluate(self, ctx):
        if self._coef is None:
            return np.zeros((self._ncomp, ctx.npts))
        return self._coef.evaluate(ctx)

#==============================================================================
class Solution:
    """
    Discrete field given by the coefficients of a space.

    Parameters
    ----------
    space : FeSpace

    vector : numpy.ndarray
        Values of the free DOFs, indexed by global index; the eliminated DOFs
        are taken from the fixed-DOF vector of the space.

    """
    def __init__(self, space, vector):
        self._space  = space
        self._vector = vector
        self._coefs  = {}

    @property
    def space(self):
        return self._space

    @property
    def vector(self):
        return self._vector

    @vector.setter
    def vector(self, value):
        self._vector = value
        self._coefs  = {}

    @property
    def ncomp(self):
        return self._space.dim

    def extract(self, patch=0):
        """ Coefficients of the basis functions of a patch, shape (size, dim). """
        space  = self._space
        mapper = space.mapper
        vector = np.asarray(self._vector).ravel()
        fixed  = space.fixed_dofs

        local = np.arange(space.basis.basis(patch).size)
        coefs = np.empty((local.size, space.dim))
        for c in range(space.dim):
            gl   = mapper.local_to_global(local, patch, c)
            free = mapper.is_free_index(gl)
            coefs[free , c] = vector[gl[free]]
            coefs[~free, c] = fixed[mapper.global_to_bindex(gl[~free])]
        return coefs

    def evaluate(self, ctx):
        data = ctx.basis_data(self._space)
        if ctx.patch not in self._coefs:
            self._coefs[ctx.patch] = self.extract(ctx.patch)
        coefs = self._coefs[ctx.patch][data.actives]
        return coefs.T @ data.values

#==============================================================================
# TERMS
#==============================================================================
def _resolve(ref, ctx):
    """ Space and evaluation context of a row or column reference. """
    if isinstance(ref, SideRef):
        if ctx.iface is None:
            raise RuntimeError('{} used outside of an interface pass'.format(ref))
        return ref.space, ctx.iface
    return ref, ctx

class ExprTerm:
    """ Base class of the integrands. """

    def __init__(self, row, kernel):
        assert isinstance(row, (FeSpace, SideRef))
        self._row    = row
        self._kernel = kernel
        self._ctx    = None

    @property
    def row(self):
        return self._row

    @property
    def col(self):
        return None

    @property
    def kernel(self):
        return self._kernel

    def is_matrix(self):
        return False

    def is_vector(self):
        return False

    def bind(self, ctx):
        """ Copy of the term evaluated in the context `ctx`. """
        term = copy.copy(self)
        term._ctx = ctx
        return term

    def row_data(self):
        """ (space, patch, function data) of the row on the current element. """
        space, ctx = _resolve(self._row, self._ctx)
        return space, ctx.patch, ctx.basis_data(space)

    def col_data(self):
        return None

#------------------------------------------------------------------------------
class MatrixValuedTerm(ExprTerm):

    def __init__(self, row, col, kernel):
        assert isinstance(col, (FeSpace, SideRef))
        super().__init__(row, kernel)
        self._col = col

    @property
    def col(self):
        return self._col

    def is_matrix(self):
        return True

    def col_data(self):
        space, ctx = _resolve(self._col, self._ctx)
        return space, ctx.patch, ctx.basis_data(space)

    def evaluate(self, k):
        v = self.row_data()[2]
        u = self.col_data()[2]
        return self._kernel(self._ctx, k, v, u)

#------------------------------------------------------------------------------
class VectorValuedTerm(ExprTerm):

    def is_vector(self):
        return True

    def evaluate(self, k):
        v = self.row_data()[2]
        return self._kernel(self._ctx, k, v)

#==============================================================================
# BUILDERS
#==============================================================================
def _space_of(ref):
    return ref.space if isinstance(ref, SideRef) else ref

def _as_coef(f):
    if f is None or hasattr(f, 'evaluate'):
        return f
    return Coefficient(f)

def _expand(block, dim):
    """ Scalar block repeated on the diagonal of a dim x dim block structure. """
    return block if dim == 1 else np.kron(np.eye(dim), block)

def mass(u, v=None, coef=None):
    """ Mass matrix: coef * u * v. """
    v = u if v is None else v
    coef = _as_coef(coef)

    def kernel(ctx, k, vd, ud):
        c = 1.0 if coef is None else ctx.eval(coef)[0, k]
        return _expand(c * ctx.measure[k] * np.outer(vd.val(k), ud.val(k)), ud.dim)

    return MatrixValuedTerm(v, u, kernel)

def stiffness(u, v=None, coef=None):
    """ Stiffness matrix: coef * grad(u) . grad(v). """
    v = u if v is None else v
    coef = _as_coef(coef)

    def kernel(ctx, k, vd, ud):
        c = 1.0 if coef is None else ctx.eval(coef)[0, k]
        return _expand(c * ctx.measure[k] * (vd.grad(k).T @ ud.grad(k)), ud.dim)

    return MatrixValuedTerm(v, u, kernel)

def load(v, f):
    """ Load vector: f . v, with one entry of f per component of v. """
    f = f if hasattr(f, 'evaluate') else Coefficient(f, _space_of(v).dim)

    def kernel(ctx, k, vd):
        fk = ctx.eval(f)[:, k]
        return ctx.measure[k] * np.concatenate([fc * vd.val(k) for fc in fk])

    return VectorValuedTerm(v, kernel)

def boundary_load(v, g):
    """
    Boundary load vector: g . v on the sides of a boundary pass, `g` being
    the assembler's boundary function (see ExprAssembler.get_bdr_function).

    """
    return load(v, g)

def interface_penalty(u, v=None, kappa=1.0):
    """
    Penalty of the jump of u across an interface: kappa * [u] . [v], with
    [u] = u_minus - u_plus.

    Returns the four terms coupling the minus and plus sides.

    """
    v = u if v is None else v

    def make(sign):
        def kernel(ctx, k, vd, ud):
            return _expand(sign * kappa * ctx.measure[k] * np.outer(vd.val(k), ud.val(k)), ud.dim)
        return kernel

    return [MatrixValuedTerm(v       , u       , make( 1.0)),
            MatrixValuedTerm(v       , u.plus(), make(-1.0)),
            MatrixValuedTerm(v.plus(), u       , make(-1.0)),
            MatrixValuedTerm(v.plus(), u.plus(), make( 1.0))]
