#---------------------------------------------------------------------------#
# This file is part of IGAEXPR which is released under MIT License. See the #
# LICENSE file for full license details.                                    #
#---------------------------------------------------------------------------#
import pytest
import numpy as np

from igaexpr.fem.splines    import SplineSpace
from igaexpr.fem.tensor     import TensorSplineBasis
from igaexpr.fem.multipatch import MultiPatchBasis
from igaexpr.fem.topology   import PatchSide, PatchInterface
from igaexpr.fem.dof_mapper import DofMapper

#==============================================================================
def two_patches( orientation=1, degree=1, ncells=2 ):
    V  = SplineSpace( degree, grid=np.linspace( 0., 1., ncells+1 ) )
    W  = SplineSpace( degree, grid=np.linspace( 1., 2., ncells+1 ) )
    B0 = TensorSplineBasis( V, V )
    B1 = TensorSplineBasis( W, V )
    iface = PatchInterface( PatchSide( 0, 0, 1 ), PatchSide( 1, 0, -1 ), orientation )
    return MultiPatchBasis( [B0, B1], [iface] )

def small_mapper( ncomp=1 ):
    # Two patches of 3 DOFs: DOF 2 of patch 0 is DOF 0 of patch 1, DOF 0 of
    # patch 0 is eliminated
    dm = DofMapper( [3, 3], ncomp )
    dm.match_dofs( 0, [2], 1, [0] )
    dm.mark_boundary( 0, [0] )
    dm.finalize()
    return dm

#==============================================================================
def test_not_finalized():

    dm = DofMapper( [4] )
    assert not dm.is_finalized()
    with pytest.raises( RuntimeError ):
        dm.free_size()
    with pytest.raises( RuntimeError ):
        dm.local_to_global( [0], 0 )

def test_finalized_is_frozen():

    dm = small_mapper()
    with pytest.raises( RuntimeError ):
        dm.mark_boundary( 0, [1] )
    with pytest.raises( RuntimeError ):
        dm.match_dofs( 0, [1], 1, [1] )

def test_non_conforming_match():

    dm = DofMapper( [4, 4] )
    with pytest.raises( ValueError ):
        dm.match_dofs( 0, [0, 1], 1, [0] )

#==============================================================================
def test_classification():

    dm = small_mapper()

    assert dm.num_patches  == 2
    assert dm.free_size()     == 4
    assert dm.coupled_size()  == 1
    assert dm.boundary_size() == 1
    assert dm.size()          == 5

    # interior free DOFs first, then coupled, then eliminated
    assert np.array_equal( dm.local_to_global( [0, 1, 2], 0 ), [4, 0, 3] )
    assert np.array_equal( dm.local_to_global( [0, 1, 2], 1 ), [3, 1, 2] )

    assert dm.index( 2, 0 ) == dm.index( 0, 1 )
    assert np.array_equal( dm.is_free_index( [0, 3, 4] ), [True, True, False] )
    assert np.array_equal( dm.is_coupled_index( [0, 3, 4] ), [False, True, False] )
    assert np.array_equal( dm.is_boundary_index( [4] ), [True] )

def test_bindex():

    dm = small_mapper()

    assert dm.bindex( 0, 0 ) == 0
    assert dm.global_to_bindex( dm.index( 0, 0 ) ) == 0
    with pytest.raises( ValueError ):
        dm.bindex( 1, 0 )

#==============================================================================
def test_components():

    dm = small_mapper( ncomp=2 )

    # free DOFs of all components come before the eliminated ones
    assert np.array_equal( dm.local_to_global( [0, 1, 2], 0, comp=0 ), [8, 0, 3] )
    assert np.array_equal( dm.local_to_global( [0, 1, 2], 0, comp=1 ), [9, 4, 7] )
    assert dm.bindex( 0, 0, comp=1 ) == 1
    assert dm.global_to_bindex( 9 ) == 1
    assert np.array_equal( dm.is_coupled_index( [3, 7, 6] ), [True, True, False] )

def test_shift():

    dm = small_mapper()
    dm.set_shift( 10 )

    assert dm.first_index() == 10
    assert dm.index( 1, 0 ) == 10
    assert dm.index( 0, 0 ) == 14
    assert dm.global_to_bindex( 14 ) == 0
    assert np.array_equal( dm.is_free_index( [10, 13, 14] ), [True, True, False] )

#==============================================================================
@pytest.mark.parametrize( 'orientation', [1, -1] )
def test_from_basis_glued( orientation ):

    mb = two_patches( orientation )
    dm = DofMapper.from_basis( mb )

    assert dm.free_size()     == 15
    assert dm.coupled_size()  == 3
    assert dm.boundary_size() == 0

    minus = mb.basis( 0 ).boundary( 0, 1 )
    plus  = mb.basis( 1 ).boundary( 0, -1 )
    if orientation == -1:
        plus = plus[::-1]
    assert np.array_equal( dm.local_to_global( minus, 0 ), dm.local_to_global( plus, 1 ) )
    assert dm.is_coupled_index( dm.local_to_global( minus, 0 ) ).all()

def test_from_basis_discontinuous():

    dm = DofMapper.from_basis( two_patches(), glue_interfaces=False )

    assert dm.free_size()    == 18
    assert dm.coupled_size() == 0

def test_from_basis_dirichlet():

    mb    = two_patches()
    sides = mb.boundaries
    dm    = DofMapper.from_basis( mb, dirichlet_sides=sides )

    # 3x5 grid of distinct DOFs, only the middle row of 3 is interior
    assert dm.size()          == 15
    assert dm.free_size()     == 3
    assert dm.boundary_size() == 12
    assert dm.coupled_size()  == 1

def test_from_basis_non_conforming():

    V0 = SplineSpace( 1, grid=np.linspace( 0., 1., 3 ) )
    V1 = SplineSpace( 1, grid=np.linspace( 0., 1., 4 ) )
    mb = MultiPatchBasis( [TensorSplineBasis( V0, V0 ), TensorSplineBasis( V1, V1 )],
                          [PatchInterface( PatchSide( 0, 0, 1 ), PatchSide( 1, 0, -1 ) )] )

    with pytest.raises( ValueError ):
        DofMapper.from_basis( mb )
