# coding: utf-8

"""
Abstract interface of the function sets which can be registered as trial or
test spaces of an assembler. A function set is scalar valued; vector valued
spaces are built by stacking copies of a scalar set.
"""

from abc import ABCMeta, abstractmethod

__all__ = ('FemBasis',)

#===============================================================================
# ABSTRACT BASE CLASS: PATCH BASIS
#===============================================================================
class FemBasis( metaclass=ABCMeta ):
    """
    Generic basis of a finite element space defined on one patch.

    The elements of the patch are boxes in the parametric domain. On each
    element only a few basis functions are active (non-zero).

    """

    #-----------------------------------------
    # Abstract interface: read-only attributes
    #-----------------------------------------
    @property
    @abstractmethod
    def ldim( self ):
        """
        Number of dimensions in logical space,
        i.e. number of scalar logical coordinates.

        """

    @property
    def target_dim( self ):
        """ Number of components of each basis function. """
        return 1

    @property
    @abstractmethod
    def size( self ):
        """ Number of basis functions. """

    @abstractmethod
    def degree( self, axis ):
        """ Polynomial degree along a parametric direction. """

    #---------------------------------------
    # Abstract interface: element iteration
    #---------------------------------------
    @abstractmethod
    def element_boxes( self, side=None ):
        """
        List of elements as (lower, upper) corner pairs. If a side is given
        only the elements touching it are returned, flattened onto the side.

        """

    @abstractmethod
    def element_data( self, lower, upper, points, nderiv=1 ):
        """
        Evaluate the basis functions which are active on one element.

        Returns
        -------
        actives : numpy.ndarray (nactive,)
            Indices of the active basis functions.

        values : numpy.ndarray (nactive, npts)

        derivs : numpy.ndarray (ldim, nactive, npts)
            First parametric derivatives (only if nderiv > 0).

        """

    @abstractmethod
    def boundary( self, axis, ext, offset=0 ):
        """ Indices of the basis functions on a side of the patch. """
