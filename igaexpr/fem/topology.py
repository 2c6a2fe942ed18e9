#---------------------------------------------------------------------------#
# This file is part of IGAEXPR which is released under MIT License. See the #
# LICENSE file for full license details.                                    #
#---------------------------------------------------------------------------#
"""
Descriptors of the sub-manifolds over which boundary and interface integrals
are computed: patch sides, patch interfaces and boundary conditions.

A side is identified as in sympde, by the patch index, the normal parametric
direction `axis` and the extremity `ext` (-1 for the lower end of the
parametric interval, +1 for the upper end).

"""
import itertools

import numpy as np

__all__ = ('PatchSide', 'PatchInterface', 'BoundaryCondition',
           'BoundaryConditions')

#==============================================================================
class PatchSide:

    def __init__(self, patch, axis, ext):
        assert ext in (-1, 1)
        self._patch = int(patch)
        self._axis  = int(axis)
        self._ext   = int(ext)

    @property
    def patch(self):
        return self._patch

    @property
    def axis(self):
        """ Normal parametric direction. """
        return self._axis

    @property
    def ext(self):
        return self._ext

    @property
    def side(self):
        """ Side of the patch as an (axis, ext) pair. """
        return (self._axis, self._ext)

    def __eq__(self, other):
        return isinstance(other, PatchSide) and \
            (self._patch, self._axis, self._ext) == (other.patch, other.axis, other.ext)

    def __hash__(self):
        return hash((self._patch, self._axis, self._ext))

    def __repr__(self):
        return 'PatchSide(patch={}, axis={}, ext={})'.format(self._patch, self._axis, self._ext)

#==============================================================================
class PatchInterface:
    """
    Interface shared by two patches. Integrals are computed on the elements of
    the `minus` side, the `plus` side being the paired evaluation context.

    Parameters
    ----------
    minus : PatchSide
    plus : PatchSide
    orientation : int
        +1 if the tangential parametrizations of both sides run in the same
        direction, -1 if they are reversed (two-dimensional patches only).

    """
    def __init__(self, minus, plus, orientation=1):
        assert isinstance(minus, PatchSide)
        assert isinstance(plus , PatchSide)
        assert orientation in (-1, 1)
        self._minus = minus
        self._plus  = plus
        self._orientation = orientation

    @property
    def minus(self):
        return self._minus

    @property
    def plus(self):
        return self._plus

    @property
    def orientation(self):
        return self._orientation

    def map_points(self, points, basis_minus, basis_plus):
        """
        Map parametric points of the minus side onto the plus side.

        Tangential coordinates are mapped affinely between the parametric
        bounds of both patches; the normal coordinate of the plus side is set
        to its extremity.

        """
        points = np.asarray(points, dtype=float)
        ldim   = points.shape[0]
        am, ap = self._minus.axis, self._plus.axis
        tm = [d for d in range(ldim) if d != am]
        tp = [d for d in range(ldim) if d != ap]

        lo_m, hi_m = basis_minus.min_coords, basis_minus.max_coords
        lo_p, hi_p = basis_plus .min_coords, basis_plus .max_coords

        out = np.empty_like(points)
        for dm, dp in zip(tm, tp):
            s = (points[dm] - lo_m[dm]) / (hi_m[dm] - lo_m[dm])
            if self._orientation == -1:
                s = 1.0 - s
            out[dp] = lo_p[dp] + s * (hi_p[dp] - lo_p[dp])

        out[ap] = lo_p[ap] if self._plus.ext == -1 else hi_p[ap]
        return out

    def map_box(self, lower, upper, basis_minus, basis_plus):
        """ Image of a minus-side element box on the plus side. """
        corners = self.map_points(np.array([lower, upper]).T, basis_minus, basis_plus)
        return corners.min(axis=1), corners.max(axis=1)

    def element_boxes(self, basis_minus, basis_plus):
        """
        Elements of the interface, as boxes of the minus side.

        The elements of the minus side are cut at the breakpoints of the plus
        side, so that every box lies inside a single element of each side,
        also when the two meshes do not match.

        """
        am, ap = self._minus.axis, self._plus.axis
        ldim   = basis_minus.ldim
        tm = [d for d in range(ldim) if d != am]
        tp = [d for d in range(ldim) if d != ap]

        lo_m, hi_m = basis_minus.min_coords, basis_minus.max_coords
        lo_p, hi_p = basis_plus .min_coords, basis_plus .max_coords

        # Plus-side breakpoints in the coordinates of the minus side
        cuts = {}
        for dm, dp in zip(tm, tp):
            s = (np.asarray(basis_plus.spaces[dp].breaks, dtype=float) - lo_p[dp]) / (hi_p[dp] - lo_p[dp])
            if self._orientation == -1:
                s = 1.0 - s
            cuts[dm] = lo_m[dm] + s * (hi_m[dm] - lo_m[dm])

        boxes = []
        for lower, upper in basis_minus.element_boxes(side=self._minus.side):
            edges = []
            for d in range(ldim):
                if d not in cuts:
                    edges.append(np.array([lower[d]]))
                    continue
                tol   = 1e-12 * (upper[d] - lower[d])
                inner = cuts[d][(cuts[d] > lower[d] + tol) & (cuts[d] < upper[d] - tol)]
                edges.append(np.concatenate([[lower[d]], np.sort(inner), [upper[d]]]))

            ranges = [range(max(len(e) - 1, 1)) for e in edges]
            for cell in itertools.product(*ranges):
                lo = np.array([e[i] for e, i in zip(edges, cell)])
                up = np.array([e[min(i+1, len(e)-1)] for e, i in zip(edges, cell)])
                boxes.append((lo, up))

        return boxes

    def __repr__(self):
        return 'PatchInterface({}, {}, orientation={})'.format(self._minus, self._plus, self._orientation)

#==============================================================================
class BoundaryCondition:
    """
    Condition imposed on one patch side.

    Parameters
    ----------
    side : PatchSide

    function : callable, sympy expression, float or None
        Boundary data. Callables and sympy expressions are evaluated at the
        physical coordinates, or at the parametric coordinates if `parametric`
        is True. For vector valued unknowns the data has one entry per
        component.

    kind : str
        'dirichlet' (essential, eliminated) or 'neumann' (natural).

    """
    KINDS = ('dirichlet', 'neumann')

    def __init__(self, side, function=None, kind='dirichlet', parametric=False):
        assert isinstance(side, PatchSide)
        if kind not in self.KINDS:
            raise ValueError("Unknown boundary condition kind '{}'".format(kind))

        self._side       = side
        self._function   = function
        self._kind       = kind
        self._parametric = parametric

    @property
    def side(self):
        return self._side

    @property
    def patch(self):
        return self._side.patch

    @property
    def function(self):
        return self._function

    @property
    def kind(self):
        return self._kind

    @property
    def parametric(self):
        return self._parametric

    def __repr__(self):
        return 'BoundaryCondition({}, kind={})'.format(self._side, self._kind)

#==============================================================================
class BoundaryConditions:
    """ Collection of boundary conditions, grouped by kind. """

    def __init__(self):
        self._conditions = []

    def add_condition(self, patch, side, kind, function=None, parametric=False):
        axis, ext = side
        bc = BoundaryCondition(PatchSide(patch, axis, ext), function, kind, parametric)
        self._conditions.append(bc)
        return bc

    def add_dirichlet(self, patch, side, function=None, parametric=False):
        return self.add_condition(patch, side, 'dirichlet', function, parametric)

    def add_neumann(self, patch, side, function=None, parametric=False):
        return self.add_condition(patch, side, 'neumann', function, parametric)

    def dirichlet_sides(self):
        return [bc for bc in self._conditions if bc.kind == 'dirichlet']

    def neumann_sides(self):
        return [bc for bc in self._conditions if bc.kind == 'neumann']

    def __iter__(self):
        return iter(self._conditions)

    def __len__(self):
        return len(self._conditions)
