#coding: utf-8

import pytest
import numpy as np

from igaexpr.core.bsplines import ( find_span,
        basis_funs,
        basis_funs_all_ders,
        collocation_matrix,
        breakpoints,
        greville,
        make_knots )

#==============================================================================
@pytest.mark.parametrize( 'lims', ([0,1], [-2,3]) )
@pytest.mark.parametrize( 'nc', (10, 18) )
@pytest.mark.parametrize( 'p' , (1,2,3,7) )

def test_find_span( lims, nc, p, eps=1e-12 ):

    grid  = np.linspace( *lims, num=nc+1 )
    knots = np.r_[ [grid[0]]*p, grid, [grid[-1]]*p ]

    for i,xi in enumerate( grid ):
        assert find_span( knots, p, x=xi-eps ) == p + max( 0,  i-1 )
        assert find_span( knots, p, x=xi     ) == p + min( i, nc-1 )
        assert find_span( knots, p, x=xi+eps ) == p + min( i, nc-1 )

#==============================================================================
@pytest.mark.parametrize( 'lims', ([0,1], [-2,3]) )
@pytest.mark.parametrize( 'nc', (10, 18) )
@pytest.mark.parametrize( 'p' , (0,1,2,3,7) )

def test_basis_funs( lims, nc, p, tol=1e-14 ):

    grid  = np.linspace( *lims, num=nc+1 )
    knots = make_knots( grid, p )

    xx = np.linspace( *lims, num=101 )
    for x in xx:
        span  =  find_span( knots, p, x )
        basis = basis_funs( knots, p, x, span )
        assert len( basis ) == p+1
        assert np.all( basis >= 0 )
        assert abs( sum( basis ) - 1.0 ) < tol

#==============================================================================
@pytest.mark.parametrize( 'p' , (0,1,2,3) )

def test_basis_funs_all_ders( p, tol=1e-12 ):

    grid  = np.linspace( 0., 1., num=7 )
    knots = make_knots( grid, p )

    for x in np.linspace( 0., 1., num=31 ):
        span = find_span( knots, p, x )
        ders = basis_funs_all_ders( knots, p, x, span, 1 )

        assert ders.shape == (2, p+1)
        assert np.allclose( ders[0], basis_funs( knots, p, x, span ), atol=tol )
        # Partition of unity: derivatives sum to zero
        assert abs( ders[1].sum() ) < 1e-10

#==============================================================================
def test_basis_funs_all_ders_piecewise_constant():

    knots = make_knots( [0., 0.5, 1.], 0 )
    span  = find_span( knots, 0, 0.25 )
    ders  = basis_funs_all_ders( knots, 0, 0.25, span, 2 )

    assert np.array_equal( ders, [[1.], [0.], [0.]] )

#==============================================================================
@pytest.mark.parametrize( 'p' , (1,2,3) )

def test_first_derivative_finite_difference( p, h=1e-6 ):

    grid  = np.linspace( 0., 1., num=5 )
    knots = make_knots( grid, p )
    x     = 0.3
    span  = find_span( knots, p, x )

    ders  = basis_funs_all_ders( knots, p, x, span, 1 )
    fd    = (basis_funs( knots, p, x+h, span ) - basis_funs( knots, p, x-h, span )) / (2*h)

    assert np.allclose( ders[1], fd, atol=1e-6 )

#==============================================================================
@pytest.mark.parametrize( 'p' , (0,1,2,3) )

def test_collocation_matrix( p ):

    grid  = np.linspace( 0., 2., num=6 )
    knots = make_knots( grid, p )
    xg    = greville( knots, p )
    mat   = collocation_matrix( knots, p, xg )

    nb = len(knots)-p-1
    assert mat.shape == (nb, nb)
    assert np.allclose( mat.sum( axis=1 ), 1.0 )
    assert abs( np.linalg.det( mat ) ) > 1e-12

#==============================================================================
def test_make_knots_and_breakpoints():

    grid  = [0., 0.25, 0.5, 1.]
    knots = make_knots( grid, 2 )

    assert np.allclose( knots, [0., 0., 0., 0.25, 0.5, 1., 1., 1.] )
    assert np.allclose( breakpoints( knots, 2 ), grid )
    assert np.allclose( breakpoints( make_knots( grid, 0 ), 0 ), grid )

#==============================================================================
def test_greville():

    knots = make_knots( [0., 0.5, 1.], 2 )
    assert np.allclose( greville( knots, 2 ), [0., 0.25, 0.75, 1.] )

    knots = make_knots( [0., 0.5, 1.], 0 )
    assert np.allclose( greville( knots, 0 ), [0.25, 0.75] )
