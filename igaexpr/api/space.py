#---------------------------------------------------------------------------#
# This file is part of IGAEXPR which is released under MIT License. See the #
# LICENSE file for full license details.                                    #
#---------------------------------------------------------------------------#
import logging

import numpy as np

from igaexpr.api.settings      import (DIRICHLET_INTERPOLATION, INTERFACE_CONFORMING,
                                       INTERFACE_DG, IGAEXPR_DIRICHLET_STRATEGIES,
                                       IGAEXPR_INTERFACE_STRATEGIES)
from igaexpr.fem.basic         import FemBasis
from igaexpr.fem.dirichlet     import compute_dirichlet_values
from igaexpr.fem.dof_mapper    import DofMapper
from igaexpr.fem.multipatch    import MultiPatchBasis
from igaexpr.fem.topology      import BoundaryConditions

__all__ = ('FeSpace', 'SideRef')

logger = logging.getLogger(__name__)

#==============================================================================
class SideRef:
    """ A space evaluated on the plus side of an interface. """

    def __init__(self, space):
        self._space = space

    @property
    def space(self):
        return self._space

    def __repr__(self):
        return '{}.plus()'.format(self._space)

#==============================================================================
class FeSpace:
    """
    Trial or test field registered in an expression assembler.

    Parameters
    ----------
    basis : MultiPatchBasis or FemBasis
        Scalar function set; a single patch basis is wrapped.

    dim : int
        Number of components.

    id : int
        Block id.

    dirichlet, interface : int or str
        Initial strategies, see `setup`.

    """
    def __init__(self, basis, dim=1, id=0, dirichlet=DIRICHLET_INTERPOLATION,
                 interface=INTERFACE_CONFORMING):

        if isinstance(basis, FemBasis):
            basis = MultiPatchBasis([basis])

        if basis.target_dim != 1:
            raise ValueError('Only scalar valued function sets can be registered, '
                             'got target dimension {}'.format(basis.target_dim))
        if dim < 1:
            raise ValueError('Space dimension must be positive, got {}'.format(dim))

        self._basis = basis
        self._dim   = int(dim)
        self._id    = int(id)
        self._bc    = BoundaryConditions()

        self._dirichlet = IGAEXPR_DIRICHLET_STRATEGIES.get(dirichlet, dirichlet)
        self._interface = IGAEXPR_INTERFACE_STRATEGIES.get(interface, interface)
        self._mappings  = None

        # Built on first use, so that the strategies can still be changed
        self._mapper = None
        self._fixed  = None

    #--------------------------------------------------------------------------
    def setup(self, bc=None, dirichlet=None, interface=None, mappings=None):
        """
        Build the DOF mapper and the fixed-DOF values of the space.
        Arguments left to None keep their previous value.

        Parameters
        ----------
        bc : BoundaryConditions, optional
            Sides with a Dirichlet condition are eliminated.

        dirichlet : int or str
            Strategy for the values of the eliminated DOFs.

        interface : int or str
            1 ('conforming') glues the DOFs of matching interfaces, 2 ('dg')
            keeps the patches independent.

        mappings : list of Mapping, optional
            Geometry of the patches, for the Dirichlet values.

        """
        dirichlet = self._dirichlet if dirichlet is None else dirichlet
        interface = self._interface if interface is None else interface
        mappings  = self._mappings  if mappings  is None else mappings

        dirichlet = IGAEXPR_DIRICHLET_STRATEGIES.get(dirichlet, dirichlet)
        interface = IGAEXPR_INTERFACE_STRATEGIES.get(interface, interface)
        if interface not in (INTERFACE_CONFORMING, INTERFACE_DG):
            raise ValueError('Unknown interface strategy {}'.format(interface))

        if bc is not None:
            self._bc = bc
        dirichlet_bcs = self._bc.dirichlet_sides()

        self._mapper = DofMapper.from_basis(self._basis,
                                            dirichlet_sides=[d.side for d in dirichlet_bcs],
                                            glue_interfaces=(interface == INTERFACE_CONFORMING),
                                            ncomp=self._dim)
        self._fixed  = compute_dirichlet_values(self._basis, self._mapper, dirichlet_bcs,
                                                dirichlet, ncomp=self._dim, mappings=mappings)
        self._dirichlet = dirichlet
        self._interface = interface
        self._mappings  = mappings

        logger.debug('Space %d set up: %r', self._id, self._mapper)

    #--------------------------------------------------------------------------
    @property
    def basis(self):
        return self._basis

    @property
    def dim(self):
        return self._dim

    @property
    def id(self):
        return self._id

    @property
    def mapper(self):
        if self._mapper is None:
            self.setup()
        return self._mapper

    @property
    def bc(self):
        return self._bc

    @property
    def dirichlet_strategy(self):
        return self._dirichlet

    @property
    def interface_strategy(self):
        return self._interface

    @property
    def fixed_dofs(self):
        if self._fixed is None:
            self.setup()
        return self._fixed

    @fixed_dofs.setter
    def fixed_dofs(self, values):
        values = np.asarray(values, dtype=float).ravel()
        expected = self._dim * self.mapper.boundary_size()
        if values.size != expected:
            raise ValueError('The Dirichlet DOFs were not provided correctly: '
                             'got {} values, expected {}'.format(values.size, expected))
        self._fixed = values

    def global_indices(self, actives, patch):
        """ Global indices of active functions, component-major. """
        return np.concatenate([self.mapper.local_to_global(actives, patch, c)
                               for c in range(self._dim)])

    #--------------------------------------------------------------------------
    def minus(self):
        return self

    def plus(self):
        return SideRef(self)

    def __repr__(self):
        return 'FeSpace(id={}, dim={})'.format(self._id, self._dim)
