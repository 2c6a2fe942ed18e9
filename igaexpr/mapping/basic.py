# coding: utf-8
#
# Copyright 2018 Yaman Güçlü

from abc import ABCMeta, abstractmethod

__all__ = ['Mapping']

#==============================================================================
class Mapping( metaclass=ABCMeta ):
    """
    Transformation of coordinates from the parametric domain of a patch to
    physical space. Points are given as arrays of shape (ldim, npts).

    """
    @abstractmethod
    def __call__( self, eta ):
        """ Evaluate mapping at location eta, shape (pdim, npts). """

    @abstractmethod
    def jac_mat( self, eta ):
        """ Compute Jacobian matrix at location eta, shape (npts, pdim, ldim). """

    @property
    @abstractmethod
    def ldim( self ):
        """ Number of logical/parametric dimensions in mapping
            (= number of eta components).
        """

    @property
    @abstractmethod
    def pdim( self ):
        """ Number of physical dimensions in mapping
            (= number of x components).
        """
