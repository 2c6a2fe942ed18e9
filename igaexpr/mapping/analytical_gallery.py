# coding: utf-8
#
# Copyright 2018 Yaman Güçlü

from igaexpr.mapping.analytical import AnalyticalMapping

__all__ = ['Affine', 'Annulus', 'Target', 'Collela']

#==============================================================================
class Affine( AnalyticalMapping ):

    eta_symbols = ['s','t']
    expressions = ['x0 + a*s',
                   'y0 + b*t']

    default_params = dict( x0=0.0, y0=0.0, a=1.0, b=1.0 )

#==============================================================================
class Annulus( AnalyticalMapping ):

    eta_symbols = ['s','t']
    expressions = ['xc1 + (rmin*(1-s)+rmax*s)*cos(t+t0)',
                   'xc2 + (rmin*(1-s)+rmax*s)*sin(t+t0)']

    default_params = dict( rmin=0.0, rmax=1.0, xc1=0.0, xc2=0.0, t0=0.0 )

#==============================================================================
class Target( AnalyticalMapping ):

    eta_symbols = ['s','t']
    expressions = ['x0 + (1-k)*s*cos(t) - D*s**2',
                   'y0 + (1+k)*s*sin(t)'         ]

    # With k=0 and D=0 Target geometry reduces to a circle
    default_params = dict( x0=0, y0=0, k=0.3, D=0.2 )

#==============================================================================
class Collela( AnalyticalMapping ):

    eta_symbols = ['s','t']
    expressions = ['2.*(s + eps*sin(2.*pi*k1*s)*sin(2.*pi*k2*t)) - 1.',
                   '2.*(t + eps*sin(2.*pi*k1*s)*sin(2.*pi*k2*t)) - 1.']

    default_params = dict( k1=1.0, k2=1.0, eps=0.1 )
