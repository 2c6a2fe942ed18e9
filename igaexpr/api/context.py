#---------------------------------------------------------------------------#
# This file is part of IGAEXPR which is released under MIT License. See the #
# LICENSE file for full license details.                                    #
#---------------------------------------------------------------------------#
"""
Evaluation context of the expression terms on one element.

Each worker of an assembly pass owns one `ElementData`. For every element
the traversal calls `precompute`, which evaluates the geometry at the
quadrature points; basis functions and coefficients are then evaluated on
demand and cached until the next element. On interfaces a second context,
`iface`, holds the same data on the plus side.

"""
import numpy as np

from igaexpr.mapping.analytical import IdentityMapping

__all__ = ('ElementData', 'FunctionData')

#==============================================================================
class FunctionData:
    """
    Basis functions of one space active on the current element.

    Attributes
    ----------
    actives : numpy.ndarray (nact,)
        Patch-local indices of the active basis functions.

    values : numpy.ndarray (nact, npts)

    grads : numpy.ndarray (pdim, nact, npts)
        Gradients with respect to the physical coordinates.

    dim : int
        Number of components of the space.

    """
    __slots__ = ('actives', 'values', 'grads', 'dim')

    def __init__(self, actives, values, grads, dim):
        self.actives = actives
        self.values  = values
        self.grads   = grads
        self.dim     = dim

    @property
    def nactive(self):
        return self.actives.size

    def val(self, k):
        return self.values[:, k]

    def grad(self, k):
        """ Physical gradients at point k, shape (pdim, nact). """
        return self.grads[:, :, k]

#==============================================================================
class ElementData:
    """
    Parameters
    ----------
    mappings : list of Mapping, optional
        Geometry of each patch; identity if not given.

    ldim : int
        Parametric dimension, used for the identity geometry.

    """
    def __init__(self, mappings=None, ldim=2):

        self._mappings = mappings
        self._identity = IdentityMapping(ldim)

        self.patch   = None
        self.box     = None
        self.side    = None
        self.points  = None
        self.x       = None
        self.jac     = None
        self.jac_inv = None
        self.measure = None
        self.normal  = None
        self.iface   = None

        self._spaces = {}
        self._coeffs = {}

    #--------------------------------------------------------------------------
    def mapping(self, patch):
        return self._mappings[patch] if self._mappings else self._identity

    def precompute(self, patch, lower, upper, points, side=None):
        """
        Evaluate the geometry at the parametric points of an element.

        Parameters
        ----------
        patch : int

        lower, upper : numpy.ndarray (ldim,)
            Corners of the element box.

        points : numpy.ndarray (ldim, npts)

        side : tuple (axis, ext), optional
            Side of the patch for boundary and interface elements; the measure
            is then the surface measure and the outward unit normal is
            computed.

        """
        F = self.mapping(patch)

        self.patch  = patch
        self.box    = (lower, upper)
        self.side   = side
        self.points = points
        self.x      = F(points)
        self.jac    = np.asarray(F.jac_mat(points))

        pdim, ldim = self.jac.shape[1:]
        if pdim == ldim:
            det          = np.linalg.det(self.jac)
            self.jac_inv = np.linalg.inv(self.jac)
        else:
            det          = np.sqrt(np.linalg.det(np.einsum('qia,qib->qab', self.jac, self.jac)))
            self.jac_inv = np.linalg.pinv(self.jac)

        if side is None:
            self.measure = np.abs(det)
            self.normal  = None
        else:
            axis, ext = side
            # Nanson's formula
            nvec  = self.jac_inv[:, axis, :]
            nrm   = np.linalg.norm(nvec, axis=1)
            self.measure = np.abs(det) * nrm
            self.normal  = (ext * nvec / nrm[:, None]).T

        self._spaces.clear()
        self._coeffs.clear()

    #--------------------------------------------------------------------------
    @property
    def npts(self):
        return self.points.shape[1]

    def basis_data(self, space):
        """ Active basis functions of a space on the current element. """
        key = id(space)
        if key not in self._spaces:
            basis = space.basis.basis(self.patch)
            actives, values, derivs = basis.element_data(*self.box, self.points, nderiv=1)
            grads = np.einsum('qij,iaq->jaq', self.jac_inv, derivs)
            self._spaces[key] = FunctionData(actives, values, grads, space.dim)
        return self._spaces[key]

    def eval(self, coef):
        """ Values of a coefficient at the points, shape (ncomp, npts). """
        key = id(coef)
        if key not in self._coeffs:
            self._coeffs[key] = coef.evaluate(self)
        return self._coeffs[key]
