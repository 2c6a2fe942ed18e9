#---------------------------------------------------------------------------#
# This file is part of IGAEXPR which is released under MIT License. See the #
# LICENSE file for full license details.                                    #
#---------------------------------------------------------------------------#
"""
We assume here that a tensor basis is the product of 1D spline spaces whose
basis functions are of compact support. Basis functions are numbered with the
first parametric direction running slowest (C ordering).

"""
import itertools

import numpy as np

from igaexpr.fem.basic   import FemBasis
from igaexpr.fem.splines import SplineSpace

__all__ = ('TensorSplineBasis',)

#===============================================================================
class TensorSplineBasis( FemBasis ):
    """
    Tensor-product B-spline basis of one patch.

    Parameters
    ----------
    *spaces : igaexpr.fem.splines.SplineSpace
        1D spline space along each parametric direction.

    """
    def __init__( self, *spaces ):

        assert len(spaces) >= 1
        assert all( isinstance( s, SplineSpace ) for s in spaces )

        self._spaces = tuple( spaces )
        self._shape  = tuple( s.nbasis for s in spaces )

    #--------------------------------------------------------------------------
    # Abstract interface: read-only attributes
    #--------------------------------------------------------------------------
    @property
    def ldim( self ):
        return len( self._spaces )

    @property
    def size( self ):
        return int( np.prod( self._shape ) )

    def degree( self, axis ):
        return self._spaces[axis].degree

    #--------------------------------------------------------------------------
    # Other properties
    #--------------------------------------------------------------------------
    @property
    def spaces( self ):
        return self._spaces

    @property
    def shape( self ):
        """ Number of basis functions along each direction. """
        return self._shape

    @property
    def ncells( self ):
        return tuple( s.ncells for s in self._spaces )

    @property
    def num_elements( self ):
        return int( np.prod( self.ncells ) )

    @property
    def max_degree( self ):
        return max( s.degree for s in self._spaces )

    @property
    def min_coords( self ):
        return np.array( [s.domain[0] for s in self._spaces] )

    @property
    def max_coords( self ):
        return np.array( [s.domain[1] for s in self._spaces] )

    #--------------------------------------------------------------------------
    # Element iteration
    #--------------------------------------------------------------------------
    def element_boxes( self, side=None ):
        """
        Elements of the patch as a list of (lower, upper) corners, in C order.

        Parameters
        ----------
        side : tuple (axis, ext), optional
            If given, only the elements touching the side are visited. Their
            boxes are collapsed onto the side along `axis`.

        """
        breaks = [s.breaks for s in self._spaces]
        ranges = [range( len(b)-1 ) for b in breaks]

        if side is not None:
            axis, ext = side
            ranges[axis] = [0 if ext == -1 else len(breaks[axis])-2]

        boxes = []
        for cell in itertools.product( *ranges ):
            lower = np.array( [b[i  ] for b, i in zip( breaks, cell )] )
            upper = np.array( [b[i+1] for b, i in zip( breaks, cell )] )
            if side is not None:
                c = breaks[axis][0] if ext == -1 else breaks[axis][-1]
                lower[axis] = upper[axis] = c
            boxes.append( (lower, upper) )

        return boxes

    def element_spans( self, lower, upper ):
        """ Knot span of the element along each direction. """
        mid = 0.5 * (np.asarray( lower ) + np.asarray( upper ))
        return [s.span( x ) for s, x in zip( self._spaces, mid )]

    def active( self, lower, upper ):
        """ Indices of the basis functions which are non-zero on an element. """
        spans  = self.element_spans( lower, upper )
        ranges = [np.arange( sp-s.degree, sp+1 ) for sp, s in zip( spans, self._spaces )]
        grids  = np.meshgrid( *ranges, indexing='ij' )
        return np.ravel_multi_index( [g.ravel() for g in grids], self._shape )

    #--------------------------------------------------------------------------
    # Evaluation
    #--------------------------------------------------------------------------
    def element_data( self, lower, upper, points, nderiv=1 ):

        points = np.asarray( points, dtype=float )
        assert points.ndim == 2 and points.shape[0] == self.ldim
        nq = points.shape[1]

        spans = self.element_spans( lower, upper )
        ders  = [s.ders_on_span( sp, x, nderiv )
                 for s, sp, x in zip( self._spaces, spans, points )]

        def tensor( orders ):
            out = ders[0][orders[0]]
            for d in range( 1, self.ldim ):
                out = (out[:, None, :] * ders[d][orders[d]][None, :, :]).reshape( -1, nq )
            return out

        actives = self.active( lower, upper )
        values  = tensor( [0]*self.ldim )
        if nderiv == 0:
            return actives, values, None

        derivs = np.array( [tensor( [int( d == k ) for d in range( self.ldim )] )
                            for k in range( self.ldim )] )
        return actives, values, derivs

    #--------------------------------------------------------------------------
    # Boundary
    #--------------------------------------------------------------------------
    def boundary( self, axis, ext, offset=0 ):
        """
        Indices of the basis functions on a side, ordered as the tensor basis
        of the side (remaining directions in C order).

        """
        ranges = [np.arange( n ) for n in self._shape]
        ranges[axis] = np.array( [offset if ext == -1 else self._shape[axis]-1-offset] )
        grids  = np.meshgrid( *ranges, indexing='ij' )
        return np.ravel_multi_index( [g.ravel() for g in grids], self._shape )

    def side_spaces( self, axis ):
        """ 1D spaces spanning a side normal to `axis`. """
        return tuple( s for d, s in enumerate( self._spaces ) if d != axis )

    def __str__(self):
        txt  = '\n'
        txt += '> ldim   :: {ldim}\n'.format( ldim=self.ldim )
        txt += '> shape  :: {shape}\n'.format( shape=self._shape )
        txt += '> degree :: {degree}'.format( degree=[s.degree for s in self._spaces] )
        return txt
