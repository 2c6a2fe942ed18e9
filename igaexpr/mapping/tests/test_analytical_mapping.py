# coding: utf-8
#
# Copyright 2018 Yaman Güçlü

import pytest
import numpy as np

from igaexpr.mapping.analytical         import (AnalyticalMapping, ExpressionMapping,
                                                IdentityMapping)
from igaexpr.mapping.analytical_gallery import Affine, Annulus, Target, Collela

#==============================================================================
def random_points( ldim, n=7, seed=0 ):
    return np.random.default_rng( seed ).random( (ldim, n) )

def fd_jacobian( F, eta, h=1e-6 ):
    """ Centered finite-difference Jacobian, shape (n, pdim, ldim). """
    cols = []
    for d in range( eta.shape[0] ):
        e = np.zeros_like( eta ); e[d] = h
        cols.append( (F( eta + e ) - F( eta - e )) / (2*h) )
    return np.stack( cols, axis=-1 ).transpose( 1, 0, 2 )

#==============================================================================
@pytest.mark.parametrize( 'mapping', [Affine( a=2., b=3. ),
                                      Annulus( rmin=0.5, rmax=1.0 ),
                                      Target(),
                                      Collela()] )
def test_gallery_shapes_and_jacobian( mapping ):

    eta = random_points( 2 )
    x   = mapping( eta )
    J   = mapping.jac_mat( eta )

    assert mapping.ldim == mapping.pdim == 2
    assert x.shape == (2, 7)
    assert J.shape == (7, 2, 2)
    assert np.allclose( J, fd_jacobian( mapping, eta ), atol=1e-6 )

#==============================================================================
def test_affine_constant_jacobian():

    F   = Affine( x0=1., y0=-1., a=2., b=0.5 )
    eta = random_points( 2 )

    assert np.allclose( F( eta ), [1. + 2.*eta[0], -1. + 0.5*eta[1]] )
    assert np.allclose( F.jac_mat( eta ), np.diag( [2., 0.5] ) )
    assert F.params['a'] == 2.

def test_annulus_determinant():

    F   = Annulus( rmin=0.5, rmax=1.5 )
    eta = random_points( 2 )
    r   = 0.5*(1 - eta[0]) + 1.5*eta[0]

    assert np.allclose( np.linalg.det( F.jac_mat( eta ) ), 1.0 * r )

#==============================================================================
def test_expression_mapping():

    F   = ExpressionMapping( ['s', 't'], ['c*s', 't + s**2'], c=3 )
    eta = random_points( 2 )

    assert np.allclose( F( eta ), [3*eta[0], eta[1] + eta[0]**2] )
    J = F.jac_mat( eta )
    assert np.allclose( J[:, 0, 0], 3. )
    assert np.allclose( J[:, 1, 0], 2*eta[0] )
    assert np.allclose( J[:, 1, 1], 1. )

def test_expression_mapping_surface():

    # Surface in 3D: pdim != ldim
    F   = ExpressionMapping( ['s', 't'], ['s', 't', 's*t'] )
    eta = random_points( 2 )

    assert (F.ldim, F.pdim) == (2, 3)
    assert F( eta ).shape == (3, 7)
    assert F.jac_mat( eta ).shape == (7, 3, 2)

#==============================================================================
@pytest.mark.parametrize( 'ndim', [1, 2, 3] )
def test_identity( ndim ):

    F   = IdentityMapping( ndim )
    eta = random_points( ndim )

    assert np.array_equal( F( eta ), eta )
    assert np.allclose( F.jac_mat( eta ), np.eye( ndim ) )

#==============================================================================
def test_base_class_cannot_be_instantiated():

    with pytest.raises( TypeError ):
        AnalyticalMapping()

    with pytest.raises( TypeError ):
        class Incomplete( AnalyticalMapping ):
            eta_symbols = ['s']
            expressions = ['s']
