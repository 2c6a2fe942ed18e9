# coding: utf-8
# Copyright 2018 Ahmed Ratnani, Yaman Güçlü

import numpy as np

from igaexpr.core.bsplines import (
        find_span,
        basis_funs_all_ders,
        collocation_matrix,
        breakpoints,
        greville,
        make_knots
        )

__all__ = ['SplineSpace']

#===============================================================================
class SplineSpace:
    """
    a 1D Splines space on a clamped knot sequence

    Parameters
    ----------
    degree : int
        Polynomial degree.

    knots : array_like
        Coordinates of knots (clamped).

    grid: array_like
        Coorinates of the grid. Used to construct the knots sequence, if not given.

    """
    def __init__( self, degree, knots=None, grid=None ):

        if not( knots is None ) and not( grid is None ):
            raise ValueError( 'Cannot provide both grid and knots.' )

        if knots is None:
            if grid is None:
                raise ValueError( 'Either grid or knots must be provided.' )
            knots = make_knots( grid, degree )

        knots = np.asarray( knots, dtype=float )
        if len(knots) < 2*degree + 2:
            raise ValueError( 'Knot sequence too short for degree {}'.format( degree ) )

        self._degree = degree
        self._knots  = knots
        self._breaks = breakpoints( knots, degree )
        self._ncells = len(self._breaks) - 1
        self._nbasis = len(knots) - degree - 1

    #--------------------------------------------------------------------------
    # Read-only attributes
    #--------------------------------------------------------------------------
    @property
    def ldim( self ):
        """ Parametric dimension.
        """
        return 1

    @property
    def nbasis( self ):
        return self._nbasis

    @property
    def degree( self ):
        """ Degree of B-splines.
        """
        return self._degree

    @property
    def ncells( self ):
        """ Number of cells in domain.
        """
        return self._ncells

    @property
    def knots( self ):
        """ Knot sequence.
        """
        return self._knots

    @property
    def breaks( self ):
        """ List of breakpoints.
        """
        return self._breaks

    @property
    def domain( self ):
        """ Domain boundaries [a,b].
        """
        return self._breaks[0], self._breaks[-1]

    @property
    def greville( self ):
        """ Coordinates of all Greville points.
        """
        return greville( self._knots, self._degree )

    #--------------------------------------------------------------------------
    # Evaluation
    #--------------------------------------------------------------------------
    def span( self, x ):
        """ Knot span containing x. """
        return find_span( self._knots, self._degree, x )

    def ders_on_span( self, span, xx, nderiv ):
        """
        Values and derivatives of the degree+1 splines which are non-zero on
        the given knot span, at all locations xx.

        Returns
        -------
        ders : numpy.ndarray (nderiv+1, degree+1, len(xx))

        """
        p = self._degree
        ders = [basis_funs_all_ders( self._knots, p, x, span, nderiv ) for x in xx]
        return np.array( ders ).reshape( len(xx), nderiv+1, p+1 ).transpose( 1, 2, 0 )

    def collocation_matrix( self, xgrid ):
        return collocation_matrix( self._knots, self._degree, xgrid )

    def __str__(self):
        """Pretty printing"""
        txt  = '\n'
        txt += '> ldim   :: {ldim}\n'.format( ldim=self.ldim )
        txt += '> nbasis :: {dim} \n'.format( dim=self.nbasis )
        txt += '> degree :: {degree}'.format( degree=self.degree )
        return txt
