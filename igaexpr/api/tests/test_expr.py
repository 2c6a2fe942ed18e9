#---------------------------------------------------------------------------#
# This file is part of IGAEXPR which is released under MIT License. See the #
# LICENSE file for full license details.                                    #
#---------------------------------------------------------------------------#
import pytest
import numpy as np

from igaexpr.api.context    import ElementData
from igaexpr.api.expr       import Coefficient, MutableCoefficient, Solution, mass
from igaexpr.api.space      import FeSpace, SideRef
from igaexpr.fem.splines    import SplineSpace
from igaexpr.fem.tensor     import TensorSplineBasis
from igaexpr.mapping.analytical_gallery import Affine
from igaexpr.utilities.quadratures      import QuadRule

#==============================================================================
def element_context( mappings=None, side=None ):
    V   = SplineSpace( 2, grid=np.linspace( 0., 1., 3 ) )
    B   = TensorSplineBasis( V, V )
    ctx = ElementData( mappings )
    lower, upper = B.element_boxes( side )[0]
    rule = QuadRule( [3, 3], fix_dir=None if side is None else side[0] )
    pts, _ = rule.map_to( lower, upper )
    ctx.precompute( 0, lower, upper, pts, side )
    return B, ctx

#==============================================================================
def test_coefficients():

    _, ctx = element_context( [Affine( x0=1., a=2. )] )

    c = Coefficient( 'x' )
    assert np.allclose( ctx.eval( c ), ctx.x[:1] )
    assert np.allclose( Coefficient( 'x', parametric=True ).evaluate( ctx ), ctx.points[:1] )

    m = MutableCoefficient( 2 )
    assert not m.is_set()
    assert np.all( m.evaluate( ctx ) == 0.0 )
    m.set( [1.0, 'y'] )
    assert m.is_set()
    assert np.allclose( m.evaluate( ctx )[1], ctx.x[1] )

def test_side_measure_and_normal():

    F = Affine( a=2., b=3. )
    _, ctx = element_context( [F], side=(1, -1) )

    # side t = 0 is stretched by a factor 2 and faces -y
    assert np.allclose( ctx.measure, 2.0 )
    assert np.allclose( ctx.normal, [[0.], [-1.]] )

def test_space_validation():

    V = SplineSpace( 1, grid=[0., 1.] )
    with pytest.raises( ValueError ):
        FeSpace( TensorSplineBasis( V, V ), dim=0 )

    u = FeSpace( TensorSplineBasis( V, V ) )
    assert u.minus() is u
    assert isinstance( u.plus(), SideRef ) and u.plus().space is u
    with pytest.raises( ValueError ):
        u.setup( interface='mortar' )
    with pytest.raises( ValueError ):
        u.fixed_dofs = np.ones( 3 )

def test_solution_evaluation():

    B, ctx = element_context()
    u = FeSpace( B, dim=2 )

    n   = u.mapper.free_size()
    vec = np.concatenate( [np.ones( n ), 2*np.ones( n )] )
    sol = Solution( u, vec )

    assert sol.extract().shape == (B.size, 2)
    assert np.allclose( ctx.eval( sol ), [[1.], [2.]] )

    sol.vector = -vec
    assert np.allclose( sol.evaluate( ctx ), [[-1.], [-2.]] )

def test_term_binding():

    B, ctx = element_context()
    u = FeSpace( B )
    t = mass( u )

    assert t.is_matrix() and not t.is_vector()
    bound = t.bind( ctx )
    assert bound is not t

    space, patch, data = bound.row_data()
    assert space is u and patch == 0
    assert bound.evaluate( 0 ).shape == (data.nactive, data.nactive)
