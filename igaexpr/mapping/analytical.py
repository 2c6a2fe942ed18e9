# coding: utf-8
#
# Copyright 2018 Yaman Güçlü

import numpy as np
import sympy as sym
from abc import ABCMeta

from igaexpr.mapping.basic import Mapping

__all__ = ['IdentityMapping', 'SymbolicMapping', 'AnalyticalMapping', 'ExpressionMapping']

#==============================================================================
class SymbolicMapping:
    """ Coordinate transformation from parametric space (eta)
        to physical space (x).

        Object is purely symbolic.

    """
    def __init__( self, eta_symbols, map_expressions ):

        self._eta = sym.Array( eta_symbols     )
        self._map = sym.Array( map_expressions )

    #--------------------------------------------------------------------------
    @property
    def eta( self ):
        return self._eta

    @property
    def map( self ):
        return self._map

    @property
    def jac_mat( self ):
        if not hasattr( self, '_jac_mat' ):
            self._jac_mat = sym.Matrix( self._map ).jacobian( self._eta )
        return self._jac_mat

    @property
    def ldim( self ):
        return len( self._eta )

    @property
    def pdim( self ):
        return len( self._map )

#==============================================================================
def _lambdify_entries( eta, exprs ):
    return [sym.lambdify( eta, e, 'numpy' ) for e in exprs]

def _evaluate_entries( funcs, shape, eta ):
    """ Evaluate scalar callables at all points, even constant ones. """
    eta = np.asarray( eta, dtype=float )
    n   = eta.shape[1]
    out = np.empty( shape + (n,) )
    for idx, f in zip( np.ndindex( *shape ), funcs ):
        out[idx] = np.broadcast_to( f( *eta ), (n,) )
    return out

#==============================================================================
class SymbolicEvaluationMixin:
    """ Numerical evaluation of a SymbolicMapping with given parameters. """

    def _setup( self, symbolic, params ):

        eta_symbols = tuple( symbolic.eta )

        expr = [sym.sympify( e ).subs( params ) for e in symbolic.map]
        self._func_eval = _lambdify_entries( eta_symbols, expr )

        jm   = symbolic.jac_mat.subs( params )
        expr = [jm[i, j] for i in range( jm.rows ) for j in range( jm.cols )]
        self._func_jac_mat = _lambdify_entries( eta_symbols, expr )

        self._ldim   = symbolic.ldim
        self._pdim   = symbolic.pdim
        self._params = params

    #--------------------------------------------------------------------------
    # Abstract interface
    #--------------------------------------------------------------------------
    def __call__( self, eta ):
        return _evaluate_entries( self._func_eval, (self._pdim,), eta )

    def jac_mat( self, eta ):
        jm = _evaluate_entries( self._func_jac_mat, (self._pdim, self._ldim), eta )
        return jm.transpose( 2, 0, 1 )

    @property
    def ldim( self ):
        return self._ldim

    @property
    def pdim( self ):
        return self._pdim

    @property
    def params( self ):
        return self._params

#==============================================================================
class AnalyticalMappingMeta( ABCMeta ):

    #--------------------------------------------------------------------------
    # Overwrite class creation for any subclass of 'AnalyticalMapping'
    #--------------------------------------------------------------------------
    def __new__( meta, name, bases, dct ):

        if name != 'AnalyticalMapping':

            assert bases == (AnalyticalMapping,)

            for key in ['eta_symbols', 'expressions', 'default_params']:
                if key not in dct.keys():
                    raise TypeError( "Missing attribute '{}' ".format( key ) +
                        "when subclassing 'AnalyticalMapping'." )

            eta_symbols = sym.sympify( tuple( dct['eta_symbols'] ) )
            expressions = sym.sympify( tuple( dct['expressions'] ) )
            symbolic    = SymbolicMapping( eta_symbols, expressions )
            defaults    = dct['default_params']

            del dct['eta_symbols']
            del dct['expressions']
            del dct['default_params']

            cls = super().__new__( meta, name, bases, dct )
            cls._symbolic       = symbolic
            cls._default_params = defaults

        else:

            cls = super().__new__( meta, name, bases, dct )

        return cls

    #--------------------------------------------------------------------------
    # Add class properties to any subclass of 'AnalyticMapping'
    #--------------------------------------------------------------------------
    @property
    def symbolic( cls ):
        return cls._symbolic

    @property
    def default_params( cls ):
        return cls._default_params

    #--------------------------------------------------------------------------
    # Forbid instantiation of 'AnalyticMapping' base class
    #--------------------------------------------------------------------------
    def __call__( cls, *args, **kwargs ):

        if cls.__name__ == 'AnalyticalMapping':
            raise TypeError("Can't instantiate helper class 'AnalyticalMapping'")
        else:
            return super().__call__( *args, **kwargs )

#==============================================================================
class AnalyticalMapping( SymbolicEvaluationMixin, Mapping, metaclass=AnalyticalMappingMeta ):
    """
    Base class of the mappings of the gallery: subclasses provide the class
    attributes 'eta_symbols', 'expressions' and 'default_params'.

    """
    def __init__( self, **kwargs ):

        cls    = type( self )
        params = cls.default_params.copy(); params.update( kwargs )
        self._setup( cls.symbolic, params )

#==============================================================================
class ExpressionMapping( SymbolicEvaluationMixin, Mapping ):
    """
    Mapping given by sympy expressions (or strings) of the parametric
    coordinates.

    Parameters
    ----------
    eta_symbols : list of str or sympy.Symbol
        Parametric coordinates, e.g. ['s', 't'].

    expressions : list of str or sympy.Expr
        One expression per physical coordinate.

    **params
        Values substituted for the remaining free symbols.

    Examples
    --------
    >>> F = ExpressionMapping(['s', 't'], ['2*s', 't + s**2'])

    """
    def __init__( self, eta_symbols, expressions, **params ):

        eta_symbols = sym.sympify( tuple( eta_symbols ) )
        expressions = sym.sympify( tuple( expressions ) )
        self._setup( SymbolicMapping( eta_symbols, expressions ), params )

#==============================================================================
class IdentityMapping( Mapping ):

    def __init__( self, ndim ):

        self._ndim = int( ndim )

    #--------------------------------------------------------------------------
    # Abstract interface
    #--------------------------------------------------------------------------
    def __call__( self, eta ):
        return np.array( eta, dtype=float )

    def jac_mat( self, eta ):
        n = np.shape( eta )[1]
        return np.broadcast_to( np.eye( self._ndim ), (n, self._ndim, self._ndim) )

    @property
    def ldim( self ):
        return self._ndim

    @property
    def pdim( self ):
        return self._ndim
