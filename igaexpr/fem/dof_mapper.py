#---------------------------------------------------------------------------#
# This file is part of IGAEXPR which is released under MIT License. See the #
# LICENSE file for full license details.                                    #
#---------------------------------------------------------------------------#
"""
Degree-of-freedom mapper: from patch-local basis indices to the global
numbering of a linear system.

Every local index (i, patch) is classified as

* free       : solved for, numbered in [0, free_size);
* coupled    : free, but shared by several patches (glued interfaces);
               numbered after the other free DOFs, in
               [free_size - coupled_size, free_size);
* eliminated : prescribed (Dirichlet), with a boundary index in
               [0, boundary_size).

A mapper of `ncomp` components holds `ncomp` stacked copies of this scalar
numbering: component c of the free DOF f has global index
``shift + c*free_size + f``, and component c of the boundary DOF b has
global index ``shift + ncomp*free_size + c*boundary_size + b``.

"""
import logging

import numpy as np

__all__ = ('DofMapper',)

logger = logging.getLogger(__name__)

#==============================================================================
class DofMapper:
    """
    Parameters
    ----------
    sizes : list of int
        Number of basis functions on each patch.

    ncomp : int
        Number of components (stacked copies of the scalar numbering).

    """
    def __init__(self, sizes, ncomp=1):

        sizes = [int(s) for s in sizes]
        assert ncomp >= 1

        self._offset    = np.concatenate([[0], np.cumsum(sizes)]).astype(int)
        self._parent    = np.arange(self._offset[-1])
        self._marked    = np.zeros(self._offset[-1], dtype=bool)
        self._ncomp     = int(ncomp)
        self._shift     = 0
        self._finalized = False

        self._dofs     = None
        self._nfree    = 0
        self._ncoupled = 0
        self._nbound   = 0

    #--------------------------------------------------------------------------
    @classmethod
    def from_basis(cls, mbasis, dirichlet_sides=(), glue_interfaces=True, ncomp=1):
        """
        Build and finalize the mapper of a multi-patch basis.

        Parameters
        ----------
        mbasis : igaexpr.fem.multipatch.MultiPatchBasis

        dirichlet_sides : list of PatchSide
            Sides whose basis functions are eliminated.

        glue_interfaces : bool
            If True, the basis functions facing each other on an interface are
            merged into coupled DOFs (conforming patches). Otherwise the
            patches are left independent (discontinuous Galerkin).

        ncomp : int
            Number of components.

        """
        mapper = cls(mbasis.sizes(), ncomp)

        if glue_interfaces:
            for iface in mbasis.interfaces:
                m, p = iface.minus, iface.plus
                idx_m = mbasis.basis(m.patch).boundary(*m.side)
                idx_p = mbasis.basis(p.patch).boundary(*p.side)
                if iface.orientation == -1:
                    idx_p = idx_p[::-1]
                mapper.match_dofs(m.patch, idx_m, p.patch, idx_p)

        for side in dirichlet_sides:
            mapper.mark_boundary(side.patch, mbasis.basis(side.patch).boundary(*side.side))

        mapper.finalize()
        return mapper

    #--------------------------------------------------------------------------
    # Setup
    #--------------------------------------------------------------------------
    def _find(self, i):
        root = i
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[i] != root:
            self._parent[i], i = root, self._parent[i]
        return root

    def match_dofs(self, patch1, indices1, patch2, indices2):
        """ Merge the local DOFs indices1 of patch1 with indices2 of patch2. """
        if self._finalized:
            raise RuntimeError('Cannot match DOFs of a finalized mapper.')

        indices1 = np.asarray(indices1, dtype=int)
        indices2 = np.asarray(indices2, dtype=int)
        if indices1.shape != indices2.shape:
            raise ValueError('Non-conforming interface: {} DOFs on patch {}, {} DOFs on patch {}'
                             .format(indices1.size, patch1, indices2.size, patch2))

        for a, b in zip(indices1 + self._offset[patch1], indices2 + self._offset[patch2]):
            ra = self._find(a)
            rb = self._find(b)
            if ra != rb:
                self._parent[max(ra, rb)] = min(ra, rb)

    def mark_boundary(self, patch, indices):
        """ Mark local DOFs of a patch as eliminated. """
        if self._finalized:
            raise RuntimeError('Cannot mark DOFs of a finalized mapper.')
        self._marked[np.asarray(indices, dtype=int) + self._offset[patch]] = True

    def finalize(self):
        """ Fix the free / coupled / eliminated partition and the numbering. """
        n     = self._parent.size
        roots = np.array([self._find(i) for i in range(n)], dtype=int)

        class_size   = np.bincount(roots, minlength=n)
        class_marked = np.zeros(n, dtype=bool)
        np.logical_or.at(class_marked, roots, self._marked)

        reps     = np.unique(roots)
        bound    = reps[class_marked[reps]]
        coupled  = reps[~class_marked[reps] & (class_size[reps] > 1)]
        interior = reps[~class_marked[reps] & (class_size[reps] == 1)]

        numbering = np.full(n, -1, dtype=int)
        ordered   = np.concatenate([interior, coupled, bound]).astype(int)
        numbering[ordered] = np.arange(ordered.size)

        self._dofs      = numbering[roots]
        self._nfree     = interior.size + coupled.size
        self._ncoupled  = coupled.size
        self._nbound    = bound.size
        self._finalized = True

        logger.debug('DofMapper finalized: %d free (%d coupled), %d eliminated, %d components',
                     self._nfree, self._ncoupled, self._nbound, self._ncomp)

    #--------------------------------------------------------------------------
    # Sizes
    #--------------------------------------------------------------------------
    def _check(self):
        if not self._finalized:
            raise RuntimeError('DofMapper is not finalized.')

    def is_finalized(self):
        return self._finalized

    @property
    def ncomp(self):
        return self._ncomp

    @property
    def num_patches(self):
        return self._offset.size - 1

    def patch_size(self, patch):
        return self._offset[patch+1] - self._offset[patch]

    def free_size(self):
        """ Number of free DOFs of one component. """
        self._check()
        return self._nfree

    def coupled_size(self):
        self._check()
        return self._ncoupled

    def boundary_size(self):
        """ Number of eliminated DOFs of one component. """
        self._check()
        return self._nbound

    def size(self):
        """ Number of distinct DOFs of one component. """
        self._check()
        return self._nfree + self._nbound

    def first_index(self):
        return self._shift

    def set_shift(self, shift):
        self._shift = int(shift)

    #--------------------------------------------------------------------------
    # Index mapping
    #--------------------------------------------------------------------------
    def local_to_global(self, indices, patch, comp=0):
        """ Global indices of the local basis indices of a patch. """
        self._check()
        assert 0 <= comp < self._ncomp
        v = self._dofs[np.asarray(indices, dtype=int) + self._offset[patch]]
        nf, nb = self._nfree, self._nbound
        return np.where(v < nf,
                        self._shift + comp*nf + v,
                        self._shift + self._ncomp*nf + comp*nb + (v - nf))

    def index(self, i, patch=0, comp=0):
        return int(self.local_to_global(i, patch, comp))

    def bindex(self, i, patch=0, comp=0):
        """ Position of an eliminated local DOF in the fixed-DOF vector. """
        self._check()
        v = self._dofs[self._offset[patch] + i]
        if v < self._nfree:
            raise ValueError('Local DOF {} of patch {} is not eliminated'.format(i, patch))
        return comp*self._nbound + int(v - self._nfree)

    def is_free_index(self, gl):
        self._check()
        return np.asarray(gl) < self._shift + self._ncomp*self._nfree

    def is_boundary_index(self, gl):
        return ~self.is_free_index(gl)

    def is_coupled_index(self, gl):
        self._check()
        gl = np.asarray(gl)
        if self._ncoupled == 0:
            return np.zeros(gl.shape, dtype=bool)
        local = (gl - self._shift) % self._nfree
        return self.is_free_index(gl) & (local >= self._nfree - self._ncoupled)

    def global_to_bindex(self, gl):
        """ Position of an eliminated global index in the fixed-DOF vector. """
        self._check()
        return np.asarray(gl) - self._shift - self._ncomp*self._nfree

    def __repr__(self):
        if not self._finalized:
            return 'DofMapper(patches={}, not finalized)'.format(self.num_patches)
        return 'DofMapper(free={}, coupled={}, boundary={}, ncomp={}, shift={})'.format(
            self._nfree, self._ncoupled, self._nbound, self._ncomp, self._shift)
