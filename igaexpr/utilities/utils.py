# coding: utf-8
#
# Copyright 2018 Yaman Güçlü

import numpy as np
import sympy as sym

__all__ = ('COORDINATES', 'vectorize_function')

# Physical coordinates recognized in sympy expressions
COORDINATES = sym.symbols('x y z')

#===============================================================================
def _scalar_function( f ):

    if isinstance( f, str ):
        f = sym.sympify( f )

    if isinstance( f, sym.Basic ):
        f = sym.lambdify( COORDINATES, f, 'numpy' )
        def g( x ):
            args = list( x ) + [np.zeros( x.shape[1] )]*(3 - x.shape[0])
            return f( *args )
        return g

    if callable( f ):
        return lambda x: f( *x )

    value = float( f )
    return lambda x: value

#===============================================================================
def vectorize_function( f, ncomp=1 ):
    """
    Turn a user function into a callable evaluated on arrays of points.

    Parameters
    ----------
    f : callable, sympy expression, str, float or sequence of those
        Callables take one array per coordinate, sympy expressions and strings
        use the symbols x, y, z. A sequence gives one entry per component. A
        callable may also return all components at once.

    ncomp : int
        Number of components.

    Returns
    -------
    g : callable
        g(points) with points of shape (dim, npts) returns an array of shape
        (ncomp, npts).

    """
    if isinstance( f, (list, tuple, np.ndarray) ):
        assert len( f ) == ncomp
        funcs = [_scalar_function( fi ) for fi in f]
    else:
        funcs = [_scalar_function( f )]

    def g( x ):
        x   = np.asarray( x, dtype=float )
        n   = x.shape[1]
        out = np.empty( (ncomp, n) )
        if len( funcs ) == ncomp:
            for c, fc in enumerate( funcs ):
                out[c] = np.broadcast_to( fc( x ), (n,) )
        else:
            val = np.asarray( funcs[0]( x ), dtype=float )
            if val.ndim == 2:
                out[:] = val
            else:
                out[:] = np.broadcast_to( val, (n,) )
        return out

    return g
