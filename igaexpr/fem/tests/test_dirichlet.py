#---------------------------------------------------------------------------#
# This file is part of IGAEXPR which is released under MIT License. See the #
# LICENSE file for full license details.                                    #
#---------------------------------------------------------------------------#
import pytest
import numpy as np

from igaexpr.api.settings      import (DIRICHLET_L2PROJECTION, DIRICHLET_INTERPOLATION,
                                       DIRICHLET_USER, DIRICHLET_HOMOGENEOUS)
from igaexpr.fem.splines       import SplineSpace
from igaexpr.fem.tensor        import TensorSplineBasis
from igaexpr.fem.multipatch    import MultiPatchBasis
from igaexpr.fem.topology      import BoundaryConditions
from igaexpr.fem.dof_mapper    import DofMapper
from igaexpr.fem.dirichlet     import compute_dirichlet_values, interpolate_side, project_side
from igaexpr.mapping.analytical import IdentityMapping
from igaexpr.mapping.analytical_gallery import Affine
from igaexpr.utilities.utils   import vectorize_function

#==============================================================================
def setup_problem( degree, ncells, function ):

    V1 = SplineSpace( degree, grid=np.linspace( 0., 1., ncells+1 ) )
    V2 = SplineSpace( degree, grid=np.linspace( 0., 2., ncells+1 ) )
    mb = MultiPatchBasis( [TensorSplineBasis( V1, V2 )] )

    bcs = BoundaryConditions()
    for s in mb.boundaries:
        bcs.add_dirichlet( s.patch, s.side, function )

    mapper = DofMapper.from_basis( mb, dirichlet_sides=[bc.side for bc in bcs] )
    return mb, mapper, bcs.dirichlet_sides()

def expected_linear( mb, mapper, a, b, ncomp=1 ):
    # Greville abscissae reproduce linear functions exactly
    basis  = mb.basis( 0 )
    g1, g2 = [s.greville for s in basis.spaces]
    nb     = mapper.boundary_size()
    out    = np.zeros( ncomp*nb )
    for i in range( basis.shape[0] ):
        for j in range( basis.shape[1] ):
            k = np.ravel_multi_index( (i, j), basis.shape )
            if not mapper.is_free_index( mapper.index( k ) ):
                out[mapper.bindex( k )] = a*g1[i] + b*g2[j]
    return out

#==============================================================================
@pytest.mark.parametrize( 'strategy', [DIRICHLET_INTERPOLATION, DIRICHLET_L2PROJECTION] )
@pytest.mark.parametrize( 'degree', [1, 2, 3] )
def test_linear_function_is_reproduced( strategy, degree ):

    mb, mapper, bcs = setup_problem( degree, 3, 'x + 2*y' )
    fixed = compute_dirichlet_values( mb, mapper, bcs, strategy )

    assert fixed.shape == (mapper.boundary_size(),)
    assert np.allclose( fixed, expected_linear( mb, mapper, 1., 2. ) )

#==============================================================================
@pytest.mark.parametrize( 'strategy', [DIRICHLET_HOMOGENEOUS, DIRICHLET_USER] )
def test_zero_values( strategy ):

    mb, mapper, bcs = setup_problem( 2, 2, 1.0 )
    fixed = compute_dirichlet_values( mb, mapper, bcs, strategy, ncomp=2 )

    assert fixed.shape == (2*mapper.boundary_size(),)
    assert np.all( fixed == 0.0 )

def test_unknown_strategy():

    mb, mapper, bcs = setup_problem( 1, 2, 1.0 )
    with pytest.raises( ValueError ):
        compute_dirichlet_values( mb, mapper, bcs, 999 )

#==============================================================================
def test_vector_valued():

    mb, mapper, bcs = setup_problem( 2, 2, [1.0, 'y'] )
    fixed = compute_dirichlet_values( mb, mapper, bcs, DIRICHLET_INTERPOLATION, ncomp=2 )
    nb    = mapper.boundary_size()

    assert np.allclose( fixed[:nb], 1.0 )
    assert np.allclose( fixed[nb:], expected_linear( mb, mapper, 0., 1. ) )

#==============================================================================
def test_physical_coordinates():

    # x = 1 + 2*s, y = t on [0,1]x[0,2]
    F = Affine( x0=1., y0=0., a=2., b=1. )
    mb, mapper, bcs = setup_problem( 2, 2, 'x' )

    fixed = compute_dirichlet_values( mb, mapper, bcs, DIRICHLET_INTERPOLATION, mappings=[F] )
    assert np.allclose( fixed, 1. + 2.*expected_linear( mb, mapper, 1., 0. ) )

#==============================================================================
def test_side_operators_agree():

    V = SplineSpace( 2, grid=np.linspace( 0., 1., 4 ) )
    B = TensorSplineBasis( V, V )
    g = vectorize_function( lambda x, y: np.sin( y ) )
    F = IdentityMapping( 2 )

    ci = interpolate_side( B, 0, -1, g, F )
    cp = project_side( B, 0, -1, g, F )

    assert ci.shape == cp.shape == (V.nbasis, 1)
    assert np.allclose( ci, cp, atol=1e-2 )
