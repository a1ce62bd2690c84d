#!/usr/bin/python3

r"""

Halo Density Profiles
=====================

Halo models implementing the `HaloModel` interface (density, enclosed mass and scale radius
as functions of the distance from the center, in kpc and Msun units):

- `NFWModel` - NFW profile by Navarro, Frenk and White (1997), defined in `density_profiles`.
- `SolNFWModel` - soliton core and NFW envelope, defined in `soliton`.

"""

from .density_profiles import NFWModel, density_nfw, density_derivative_nfw, mass_nfw
from .soliton import (SolNFWModel,
                      density_sol,
                      density_derivative_sol,
                      mass_sol,
                      matching_radius,
                      m22_from_sol,
                      rhosol_from_rsol,
                      rsol_from_Mvir,
                      solnfw_from_virial, )

__all__ = ['density_profiles', 'soliton']
