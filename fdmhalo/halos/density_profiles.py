#!/usr/bin/python3

r"""

NFW halo profile, by Navarro, Frenk and White (1997). Density, its radial derivative and
the enclosed mass are given as functions of the radius (kpc), scale radius `rs` (kpc) and
scale density `rhos` (Msun/kpc^3), together with the `NFWModel` halo.

"""

import numpy as np
from dataclasses import dataclass
from typing import Any
from .._base import Cosmology, HaloModel, HaloError
from ..cosmology import default_cosmo
from ..utils.constants import FOUR_PI

def density_nfw(r: Any, rs: float, rhos: float) -> Any:
    r"""
    NFW density profile, :math:`\rho_s / [x (1+x)^2]` with :math:`x = r/r_s`.
    """
    x = np.divide(r, rs)
    return rhos / ( x * (1 + x)**2 )

def density_derivative_nfw(r: Any, rs: float, rhos: float) -> Any:
    r"""
    Derivative of the NFW density profile with respect to r.
    """
    x = np.divide(r, rs)
    return -rhos / rs * (1 + 3*x) / ( x**2 * (1 + x)**3 )

def mass_nfw(r: Any, rs: float, rhos: float) -> Any:
    r"""
    Mass enclosed by the NFW profile within radius r. This is linear in `rhos`.
    """
    x = np.divide(r, rs)
    return FOUR_PI * rhos * rs**3 * ( np.log1p(x) - x / (1 + x) )

@dataclass(frozen = True)
class NFWModel(HaloModel):
    r"""
    A halo with the NFW density profile.

    Parameters
    ----------
    rs: float
        Scale radius in kpc.
    rhos: float
        Scale density in Msun/kpc^3.

    Raises
    ------
    HaloError

    """
    rs: float
    rhos: float

    def __post_init__(self) -> None:
        if self.rs <= 0:
            raise HaloError("scale radius must be positive")
        if self.rhos <= 0:
            raise HaloError("scale density must be positive")

    @classmethod
    def fromVirial(cls,
                   Mvir: float,
                   cvir: float,
                   mdef: str = '200c',
                   cosmo: Cosmology = default_cosmo,
                   z: float = 0., ) -> 'NFWModel':
        r"""
        Create an NFW halo of virial mass `Mvir` (Msun) and concentration `cvir`.

        Parameters
        ----------
        Mvir: float
        cvir: float
        mdef: str, default = `200c`
            Halo mass definition (see `Cosmology.virialOverdensity`).
        cosmo: Cosmology, optional
        z: float, default = 0

        Returns
        -------
        halo: NFWModel

        """
        Rvir = float( cosmo.virialRadius(Mvir, mdef, z) )
        rs   = Rvir / cvir
        rhos = Mvir / mass_nfw(Rvir, rs, 1.0)
        return cls(rs, float(rhos))

    def density(self, r: Any) -> Any:
        return density_nfw(r, self.rs, self.rhos)

    def mass(self, r: Any) -> Any:
        return mass_nfw(r, self.rs, self.rhos)

    def scaleRadius(self) -> float:
        return self.rs
