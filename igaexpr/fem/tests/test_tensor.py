#---------------------------------------------------------------------------#
# This file is part of IGAEXPR which is released under MIT License. See the #
# LICENSE file for full license details.                                    #
#---------------------------------------------------------------------------#
import pytest
import numpy as np

from igaexpr.fem.splines           import SplineSpace
from igaexpr.fem.tensor            import TensorSplineBasis
from igaexpr.utilities.quadratures import QuadRule

#==============================================================================
def test_spline_space():

    V = SplineSpace( 2, grid=np.linspace( 0., 1., 5 ) )

    assert V.nbasis == 6
    assert V.ncells == 4
    assert V.domain == (0., 1.)
    assert len( V.greville ) == V.nbasis

def test_spline_space_arguments():

    with pytest.raises( ValueError ):
        SplineSpace( 2 )
    with pytest.raises( ValueError ):
        SplineSpace( 2, knots=[0, 0, 0, 1, 1, 1], grid=[0, 1] )

#==============================================================================
@pytest.mark.parametrize( 'p1', [0, 1, 2] )
@pytest.mark.parametrize( 'p2', [1, 3] )
def test_tensor_basis_partition_of_unity( p1, p2 ):

    V1 = SplineSpace( p1, grid=np.linspace( 0., 1., 4 ) )
    V2 = SplineSpace( p2, grid=np.linspace( 0., 2., 3 ) )
    B  = TensorSplineBasis( V1, V2 )

    assert B.ldim == 2
    assert B.size == V1.nbasis * V2.nbasis
    assert B.num_elements == 6

    rule = QuadRule( [2, 2] )
    for lower, upper in B.element_boxes():
        pts, wts = rule.map_to( lower, upper )
        actives, values, derivs = B.element_data( lower, upper, pts )

        assert actives.size == (p1+1) * (p2+1)
        assert values.shape == (actives.size, 4)
        assert derivs.shape == (2, actives.size, 4)
        assert np.allclose( values.sum( axis=0 ), 1.0 )
        assert np.allclose( derivs.sum( axis=1 ), 0.0 )

#==============================================================================
def test_element_data_nderiv_zero():

    V = SplineSpace( 1, grid=[0., 1.] )
    B = TensorSplineBasis( V, V )

    actives, values, derivs = B.element_data( [0., 0.], [1., 1.], np.array( [[0.5], [0.5]] ), nderiv=0 )

    assert derivs is None
    assert np.array_equal( actives, [0, 1, 2, 3] )
    assert np.allclose( values[:, 0], 0.25 )

#==============================================================================
def test_element_boxes_on_side():

    V1 = SplineSpace( 1, grid=np.linspace( 0., 1., 4 ) )
    V2 = SplineSpace( 1, grid=np.linspace( 0., 1., 3 ) )
    B  = TensorSplineBasis( V1, V2 )

    boxes = B.element_boxes( side=(0, 1) )
    assert len( boxes ) == 2
    for lower, upper in boxes:
        assert lower[0] == upper[0] == 1.0
        assert upper[1] > lower[1]

    boxes = B.element_boxes( side=(1, -1) )
    assert len( boxes ) == 3
    assert all( lo[1] == up[1] == 0.0 for lo, up in boxes )

#==============================================================================
def test_boundary_indices():

    V1 = SplineSpace( 2, grid=np.linspace( 0., 1., 3 ) )
    V2 = SplineSpace( 1, grid=np.linspace( 0., 1., 3 ) )
    B  = TensorSplineBasis( V1, V2 )
    n1, n2 = B.shape

    assert (n1, n2) == (4, 3)
    assert np.array_equal( B.boundary( 0, -1 ), np.arange( n2 ) )
    assert np.array_equal( B.boundary( 0,  1 ), (n1-1)*n2 + np.arange( n2 ) )
    assert np.array_equal( B.boundary( 1, -1 ), n2*np.arange( n1 ) )
    assert np.array_equal( B.boundary( 1,  1 ), n2*np.arange( n1 ) + n2-1 )
    assert np.array_equal( B.boundary( 0, -1, offset=1 ), n2 + np.arange( n2 ) )

#==============================================================================
def test_basis_vanishes_on_side_except_boundary_functions():

    V = SplineSpace( 2, grid=np.linspace( 0., 1., 4 ) )
    B = TensorSplineBasis( V, V )

    lower, upper = B.element_boxes( side=(1, 1) )[0]
    pts = QuadRule( [3, 3], fix_dir=1 ).map_to( lower, upper )[0]
    actives, values, _ = B.element_data( lower, upper, pts, nderiv=0 )

    on_side = np.isin( actives, B.boundary( 1, 1 ) )
    assert np.allclose( values[~on_side], 0.0 )
    assert np.allclose( values[on_side].sum( axis=0 ), 1.0 )
