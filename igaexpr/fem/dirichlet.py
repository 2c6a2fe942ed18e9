#---------------------------------------------------------------------------#
# This file is part of IGAEXPR which is released under MIT License. See the #
# LICENSE file for full license details.                                    #
#---------------------------------------------------------------------------#
"""
Values of the eliminated (Dirichlet) DOFs of a space.

The coefficients of the basis functions on a Dirichlet side are obtained
either by collocation at the Greville points of the side, or by an L2
projection onto the restriction of the basis to the side. Both are computed
side by side; a DOF shared by two sides takes the value of the last one.

"""
import logging

import numpy as np

from igaexpr.api.settings            import (DIRICHLET_L2PROJECTION, DIRICHLET_INTERPOLATION,
                                             DIRICHLET_USER, DIRICHLET_HOMOGENEOUS)
from igaexpr.fem.tensor              import TensorSplineBasis
from igaexpr.mapping.analytical      import IdentityMapping
from igaexpr.utilities.quadratures   import QuadRule
from igaexpr.utilities.utils         import vectorize_function

__all__ = ('compute_dirichlet_values', 'interpolate_side', 'project_side')

logger = logging.getLogger(__name__)

#==============================================================================
def _side_coordinate(basis, axis, ext):
    return basis.min_coords[axis] if ext == -1 else basis.max_coords[axis]

def _insert_normal(points, axis, value):
    """ Parametric points of the patch from points of the side. """
    return np.insert(np.atleast_2d(points), axis, value, axis=0)

def _eval_on_side(f, points, mapping, parametric):
    x = points if parametric else mapping(points)
    return f(x)

#==============================================================================
def interpolate_side(basis, axis, ext, f, mapping, ncomp=1, parametric=False):
    """
    Coefficients of the basis functions on a side, interpolating f at the
    Greville points of the side.

    Returns
    -------
    coefs : numpy.ndarray (nside, ncomp)
        Ordered as basis.boundary(axis, ext).

    """
    spaces = basis.side_spaces(axis)
    c      = _side_coordinate(basis, axis, ext)

    if not spaces:
        pts = _insert_normal(np.zeros((0, 1)), axis, c)
        return _eval_on_side(f, pts, mapping, parametric).T

    grids  = np.meshgrid(*[s.greville for s in spaces], indexing='ij')
    pts    = _insert_normal(np.array([g.ravel() for g in grids]), axis, c)
    values = _eval_on_side(f, pts, mapping, parametric)

    colloc = spaces[0].collocation_matrix(spaces[0].greville)
    for s in spaces[1:]:
        colloc = np.kron(colloc, s.collocation_matrix(s.greville))

    return np.linalg.solve(colloc, values.T)

#==============================================================================
def project_side(basis, axis, ext, f, mapping, ncomp=1, parametric=False):
    """
    Coefficients of the basis functions on a side given by the L2 projection
    of f onto the side basis, in the parametric measure of the side.

    """
    spaces = basis.side_spaces(axis)
    if not spaces:
        return interpolate_side(basis, axis, ext, f, mapping, ncomp, parametric)

    c    = _side_coordinate(basis, axis, ext)
    side = TensorSplineBasis(*spaces)
    rule = QuadRule([s.degree + 1 for s in spaces])

    n   = side.size
    mat = np.zeros((n, n))
    rhs = np.zeros((n, ncomp))

    for lower, upper in side.element_boxes():
        pts, wts = rule.map_to(lower, upper)
        if wts.size == 0:
            continue
        actives, values, _ = side.element_data(lower, upper, pts, nderiv=0)
        fvals = _eval_on_side(f, _insert_normal(pts, axis, c), mapping, parametric)

        mat[np.ix_(actives, actives)] += (values * wts) @ values.T
        rhs[actives] += (values * wts) @ fvals.T

    return np.linalg.solve(mat, rhs)

#==============================================================================
def compute_dirichlet_values(mbasis, mapper, bcs, strategy, ncomp=1, mappings=None):
    """
    Fixed-DOF vector of a space, of size ncomp*mapper.boundary_size().

    Parameters
    ----------
    mbasis : igaexpr.fem.multipatch.MultiPatchBasis

    mapper : igaexpr.fem.dof_mapper.DofMapper
        Finalized mapper in which the Dirichlet sides are eliminated.

    bcs : iterable of BoundaryCondition
        Dirichlet conditions; conditions without a function are homogeneous.

    strategy : int
        One of the Dirichlet strategy codes of igaexpr.api.settings.

    ncomp : int
        Number of components of the space.

    mappings : list of Mapping, optional
        Geometry of each patch (identity by default).

    """
    nb    = mapper.boundary_size()
    fixed = np.zeros(ncomp * nb)

    if strategy in (DIRICHLET_HOMOGENEOUS, DIRICHLET_USER):
        return fixed

    if strategy == DIRICHLET_INTERPOLATION:
        compute = interpolate_side
    elif strategy == DIRICHLET_L2PROJECTION:
        compute = project_side
    else:
        raise ValueError('Unknown Dirichlet strategy {}'.format(strategy))

    for bc in bcs:
        if bc.function is None:
            continue

        basis     = mbasis.basis(bc.patch)
        axis, ext = bc.side.side
        mapping   = mappings[bc.patch] if mappings else IdentityMapping(basis.ldim)
        f         = vectorize_function(bc.function, ncomp)

        coefs = compute(basis, axis, ext, f, mapping, ncomp, bc.parametric)
        b     = np.array([mapper.bindex(i, bc.patch) for i in basis.boundary(axis, ext)], dtype=int)
        for comp in range(ncomp):
            fixed[comp * nb + b] = coefs[:, comp]

        logger.debug('Dirichlet values on %s: %d DOFs per component', bc.side, b.size)

    return fixed
