#---------------------------------------------------------------------------#
# This file is part of IGAEXPR which is released under MIT License. See the #
# LICENSE file for full license details.                                    #
#---------------------------------------------------------------------------#
import numpy as np

from igaexpr.fem.basic    import FemBasis
from igaexpr.fem.splines  import SplineSpace
from igaexpr.fem.tensor   import TensorSplineBasis
from igaexpr.fem.topology import PatchSide, PatchInterface

__all__ = ('MultiPatchBasis',)

#==============================================================================
class MultiPatchBasis:
    """
    Container of the patch bases of a multi-patch discretization, together
    with the patch topology (interfaces and outer boundary sides).

    Parameters
    ----------
    patches : list of FemBasis
        Basis of each patch.

    interfaces : list of PatchInterface
        Interfaces shared by pairs of patches.

    boundaries : list of PatchSide, optional
        Sides on the outer boundary of the domain. By default, every patch
        side which is not part of an interface.

    """
    def __init__(self, patches, interfaces=(), boundaries=None):

        if isinstance(patches, FemBasis):
            patches = [patches]

        assert len(patches) > 0
        assert all(isinstance(b, FemBasis) for b in patches)
        assert len({b.ldim for b in patches}) == 1

        interfaces = list(interfaces)
        assert all(isinstance(i, PatchInterface) for i in interfaces)

        if boundaries is None:
            inner = {s for i in interfaces for s in (i.minus, i.plus)}
            boundaries = [PatchSide(k, axis, ext)
                          for k, b in enumerate(patches)
                          for axis in range(b.ldim)
                          for ext in (-1, 1)
                          if PatchSide(k, axis, ext) not in inner]

        self._patches    = list(patches)
        self._interfaces = interfaces
        self._boundaries = list(boundaries)

    #--------------------------------------------------------------------------
    @classmethod
    def from_sympde(cls, domain, ncells, degree):
        """
        Create uniform spline bases on the patches of a sympde domain.

        Parameters
        ----------
        domain : sympde.topology.Domain
            Single or multi-patch logical domain (e.g. built with
            `Domain.join`).

        ncells : list of int
            Number of cells along each direction, on every patch.

        degree : list of int
            Spline degree along each direction.

        """
        from sympde.topology import Union, Interface

        interiors  = domain.interior
        interfaces = []
        if isinstance(interiors, Union):
            interiors  = list(interiors.args)
            interfaces = domain.interfaces
            if isinstance(interfaces, Interface):
                interfaces = [interfaces]
            elif isinstance(interfaces, Union):
                interfaces = list(interfaces.args)
            elif interfaces is None:
                interfaces = []
        else:
            interiors = [interiors]

        assert len(ncells) == len(degree) == domain.dim

        patches = []
        for interior in interiors:
            grids = [np.linspace(xmin, xmax, num=ne + 1)
                     for xmin, xmax, ne in zip(interior.min_coords, interior.max_coords, ncells)]
            spaces = [SplineSpace(int(p), grid=grid) for p, grid in zip(degree, grids)]
            patches.append(TensorSplineBasis(*spaces))

        ifaces = []
        for e in interfaces:
            i = interiors.index(e.minus.domain)
            j = interiors.index(e.plus.domain)
            ornt = getattr(e, 'ornt', 1)
            ornt = int(ornt) if ornt in (-1, 1) else 1
            ifaces.append(PatchInterface(PatchSide(i, e.minus.axis, e.minus.ext),
                                         PatchSide(j, e.plus.axis , e.plus.ext ),
                                         orientation=ornt))

        return cls(patches, ifaces)

    #--------------------------------------------------------------------------
    @property
    def ldim(self):
        return self._patches[0].ldim

    @property
    def target_dim(self):
        return 1

    @property
    def nbases(self):
        return len(self._patches)

    @property
    def bases(self):
        return tuple(self._patches)

    def basis(self, patch):
        return self._patches[patch]

    def __getitem__(self, patch):
        return self._patches[patch]

    def __len__(self):
        return len(self._patches)

    def sizes(self):
        """ Number of basis functions on each patch. """
        return [b.size for b in self._patches]

    @property
    def size(self):
        return sum(self.sizes())

    def max_degree(self, axis):
        return max(b.degree(axis) for b in self._patches)

    @property
    def interfaces(self):
        return list(self._interfaces)

    @property
    def boundaries(self):
        return list(self._boundaries)

    def __str__(self):
        return 'MultiPatchBasis(patches={}, interfaces={})'.format(self.nbases, len(self._interfaces))
