#---------------------------------------------------------------------------#
# This file is part of IGAEXPR which is released under MIT License. See the #
# LICENSE file for full license details.                                    #
#---------------------------------------------------------------------------#
"""
This module contains the Gauss-Legendre quadrature in 1D and the
tensor-product rules which are mapped to the elements of a patch during
assembly.
"""

from math import cos, pi

import numpy as np

__all__ = ('gauss_legendre', 'QuadRule', 'num_nodes', 'get_quad_rule')


def gauss_legendre(m, tol=1e-13):
    """
    Compute Gauss-Legendre quadrature points and weights on [-1, 1].

    Returns nodal abscissas {x} and weights {A} of a Gauss-Legendre m-point
    quadrature over the canonical interval [-1, 1].

    Parameters
    ----------
    m : int
        Number of quadrature points in the quadrature rule.

    tol : float
        Tolerance for the Newton-Raphson root-searching method.

    Returns
    -------
    x : numpy.ndarray[float]
        Abscissas of the quadrature points, in ascending order.

    A : numpy.ndarray[float]
        Weights of the quadrature points corresponding to the abscissas above.

    """
    assert isinstance(m, int)
    assert isinstance(tol, float)
    assert m >= 1
    assert tol >= 0

    def legendre(t, m):
        p0 = 1.0
        p1 = t
        for k in range(1, m):
            p = ((2.0*k + 1.0)*t*p1 - k*p0)/(1.0 + k)
            p0 = p1
            p1 = p
        dp = m*(p0 - t*p1)/(1.0 - t**2)
        return p1, dp

    A = np.zeros(m)
    x = np.zeros(m)
    nRoots = (m + 1) // 2          # Number of non-neg. roots
    for i in range(nRoots):
        t = cos(pi*(i + 0.75)/(m + 0.5))  # Approx. root
        for j in range(30):
            p, dp = legendre(t, m)        # Newton-Raphson
            dt = -p/dp                    # method
            t = t + dt
            if abs(dt) < tol:
                x[i]     = -t
                x[m-i-1] =  t
                A[i]     = 2.0/(1.0 - t**2)/(dp**2)
                A[m-i-1] = A[i]
                break
    return x, A

#==============================================================================
class QuadRule:
    """
    Tensor-product Gauss-Legendre rule on the reference box [-1, 1]^d.

    Parameters
    ----------
    nodes : list of int
        Number of quadrature nodes along each parametric direction.

    fix_dir : int, optional
        Direction normal to a patch side. The rule then has a single node along
        this direction, with unit weight, so that mapping it to a side element
        (a box which is flat along `fix_dir`) yields the surface measure.

    """
    def __init__(self, nodes, fix_dir=None):

        nodes = [int(n) for n in nodes]
        assert all(n >= 1 for n in nodes)
        assert fix_dir is None or 0 <= fix_dir < len(nodes)

        if fix_dir is not None:
            nodes[fix_dir] = 1

        rules = []
        for d, n in enumerate(nodes):
            if d == fix_dir:
                rules.append((np.zeros(1), np.ones(1)))
            else:
                rules.append(gauss_legendre(n))

        # Points are ordered with the first direction running slowest
        x = np.meshgrid(*[r[0] for r in rules], indexing='ij')
        w = np.meshgrid(*[r[1] for r in rules], indexing='ij')

        self._nodes   = tuple(nodes)
        self._fix_dir = fix_dir
        self._points  = np.array([xi.ravel() for xi in x]).reshape(len(nodes), -1)
        self._weights = np.prod([wi.ravel() for wi in w], axis=0)

    @property
    def dim(self):
        return len(self._nodes)

    @property
    def nodes(self):
        """ Number of nodes along each direction. """
        return self._nodes

    @property
    def fix_dir(self):
        return self._fix_dir

    @property
    def num_points(self):
        return self._weights.size

    @property
    def reference_points(self):
        """ Nodes on [-1, 1]^d, shape (dim, num_points). """
        return self._points

    @property
    def reference_weights(self):
        return self._weights

    def map_to(self, lower, upper):
        """
        Map the rule to the box [lower, upper].

        Returns
        -------
        points : numpy.ndarray (dim, n)
            Quadrature nodes on the box, in rule order.

        weights : numpy.ndarray (n,)
            Quadrature weights, including the Jacobian of the affine map.

        Notes
        -----
        A box which is collapsed along an integration direction (zero measure)
        yields an empty rule, i.e. n == 0.

        """
        lower = np.asarray(lower, dtype=float)
        upper = np.asarray(upper, dtype=float)
        assert lower.shape == upper.shape == (self.dim,)

        h = 0.5 * (upper - lower)
        active = [d for d in range(self.dim) if d != self._fix_dir]

        if any(h[d] <= 0 for d in active):
            return np.zeros((self.dim, 0)), np.zeros(0)

        points  = lower[:, None] + h[:, None] * (self._points + 1.0)
        weights = np.prod(h[active]) * self._weights

        return points, weights

    def __repr__(self):
        return 'QuadRule(nodes={}, fix_dir={})'.format(self._nodes, self._fix_dir)

#==============================================================================
def num_nodes(degree, quA, quB):
    """
    Number of Gauss nodes for a given polynomial degree: quA*degree + quB,
    rounded to the nearest integer, and never less than one.
    """
    return max(1, int(quA * degree + quB + 0.5))

def get_quad_rule(basis, options, fix_dir=None):
    """
    Build the quadrature rule used on the elements of `basis`.

    Parameters
    ----------
    basis : igaexpr.fem.tensor.TensorSplineBasis
        Patch basis; its degree along each direction sets the number of nodes.

    options : dict
        Assembler options, providing 'quA' and 'quB'.

    fix_dir : int, optional
        Normal direction of a patch side, for boundary and interface rules.

    """
    quA = options['quA']
    quB = options['quB']
    nodes = [num_nodes(basis.degree(d), quA, quB) for d in range(basis.ldim)]
    return QuadRule(nodes, fix_dir=fix_dir)
