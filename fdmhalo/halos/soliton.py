#!/usr/bin/python3

r"""

Soliton + NFW halo model
========================

Halo made of a soliton core, as found in fuzzy (wave) dark-matter simulations, and an NFW
envelope, which meet at the matching radius `repsilon`. See Marsh & Pop (2015) and Robles
et al. (2019).

- `density_sol`, `density_derivative_sol` and `mass_sol` are the soliton profile functions.
- `matching_radius` finds the radius where the NFW and soliton densities are equal.
- `SolNFWModel` is the composite halo and `solnfw_from_virial` creates one from the virial mass,
  concentration and axion mass.
- `m22_from_sol`, `rhosol_from_rsol` and `rsol_from_Mvir` relate the soliton parameters to the
  axion mass `m22` (in 1e-22 eV) and the halo mass.

References
----------
.. [1] D. J. E. Marsh and A.-R. Pop. Axion dark matter, solitons and the cusp-core problem.
       Mon. Not. R. Astron. Soc. 451, 2479-2492 (2015)
.. [2] V. H. Robles et al. The Milky Way's halo and subhalos in self-interacting ultralight
       dark matter. <http://arxiv.org/abs/1807.06018>

"""

import logging
import warnings
import numpy as np
from dataclasses import dataclass
from typing import Any
from .._base import Cosmology, HaloModel, HaloError
from ..cosmology import default_cosmo
from ..utils.objects import Newton, ConvergenceError
from ..utils.constants import FOUR_PI
from .density_profiles import density_nfw, density_derivative_nfw, mass_nfw

# squared relative density mismatch allowed at the matching radius
MATCHING_TOLERANCE = 1e-09

###################################################################################################
#                                       Soliton profile                                           #
###################################################################################################

def density_sol(r: Any, rsol: float, rhosol: float) -> Any:
    r"""
    Soliton density profile, :math:`\rho_{sol} [1 + (r/r_{sol})^2]^{-8}`.

    Parameters
    ----------
    r: array_like
        Distance from the center in kpc.
    rsol: float
        Soliton scale radius in kpc.
    rhosol: float
        Soliton scale (central) density in Msun/kpc^3.

    Returns
    -------
    res: array_like

    """
    x = np.divide(r, rsol)
    return rhosol * (1. + x**2)**-8

def density_derivative_sol(r: Any, rsol: float, rhosol: float) -> Any:
    r"""
    Derivative of the soliton density profile with respect to r. Note that this includes the
    factor :math:`1/r_{sol}` from :math:`x = r/r_{sol}`, i.e., it is :math:`d\rho/dr` and not
    :math:`d\rho/dx = -16 \rho_{sol} x (1+x^2)^{-9}`.
    """
    x = np.divide(r, rsol)
    return -16. * rhosol / rsol * x * (1. + x**2)**-9

def mass_sol(r: Any, rsol: float, rhosol: float) -> Any:
    r"""
    Mass enclosed by the soliton profile within radius r. The integral of :math:`4\pi r^2 \rho(r)`
    is analytic with the substitution :math:`r = r_{sol} \tan t`.

    Parameters
    ----------
    r: array_like
    rsol: float
    rhosol: float

    Returns
    -------
    res: array_like
        Mass in Msun.

    """
    t   = np.arctan( np.divide(r, rsol) )
    res = ( 27720. * t
           + 17325. * np.sin( 2*t)
           -  1155. * np.sin( 4*t)
           -  4235. * np.sin( 6*t)
           -  2625. * np.sin( 8*t)
           -   903. * np.sin(10*t)
           -   175. * np.sin(12*t)
           -    15. * np.sin(14*t) )
    return FOUR_PI * rhosol * rsol**3 / 1720320. * res

###################################################################################################
#                                       Matching radius                                           #
###################################################################################################

def matching_radius(rs: float,
                    rhos: float,
                    rsol: float,
                    rhosol: float,
                    xstart: float = 2.0,
                    rtol: float = 1e-09,
                    maxiter: int = 200, ) -> float:
    r"""
    Compute the matching radius, where the NFW density is equal to the soliton density.

    The root of :math:`f(r) = (1 - \rho_{NFW}(r) / \rho_{sol}(r))^2` is found with Newton's method,
    starting from `xstart * rsol`. Iterations are done in :math:`\ln r`, so that the radius is
    always positive.

    Parameters
    ----------
    rs, rhos: float
        NFW scale radius (kpc) and scale density (Msun/kpc^3).
    rsol, rhosol: float
        Soliton scale radius (kpc) and scale density (Msun/kpc^3).
    xstart: float, default = 2.0
        Starting point, in units of `rsol`.
    rtol: float, default = 1e-9
        Relative tolerance on the radius.
    maxiter: int, default = 200
        Maximum number of iterations.

    Returns
    -------
    repsilon: float
        Matching radius in kpc.

    Raises
    ------
    ConvergenceError

    """

    def cost(lnr: float) -> float:
        r   = np.exp(lnr)
        res = 1. - density_nfw(r, rs, rhos) / density_sol(r, rsol, rhosol)
        return res**2

    def dcost(lnr: float) -> float:
        r = np.exp(lnr)
        rho1, drho1 = density_nfw(r, rs, rhos), density_derivative_nfw(r, rs, rhos)
        rho2, drho2 = density_sol(r, rsol, rhosol), density_derivative_sol(r, rsol, rhosol)
        res = -2. * (1. - rho1 / rho2) * (drho1 / rho2 - rho1 * drho2 / rho2**2)
        return r * res

    params = dict(rs = rs, rhos = rhos, rsol = rsol, rhosol = rhosol)
    finder = Newton(reltol = rtol, maxiter = maxiter)
    try:
        lnr = finder.rootof(cost, np.log(xstart * rsol), fprime = dcost)
    except ConvergenceError as _e:
        raise ConvergenceError(f"failed to find matching radius: {_e.args[0]}", **params) from _e

    # a vanishing step may also happen away from a root
    with np.errstate(divide = 'ignore', invalid = 'ignore', over = 'ignore'):
        residual = cost(lnr)
    if not residual < rtol:
        raise ConvergenceError(f"densities do not match at r = {np.exp(lnr):g}", **params)
    return float( np.exp(lnr) )

###################################################################################################
#                                       Soliton NFW model                                         #
###################################################################################################

@dataclass(frozen = True)
class SolNFWModel(HaloModel):
    r"""
    Soliton NFW model. For consistency, the NFW density must match the soliton density at
    `repsilon`. If that is not the case, the constructor will update `repsilon`, with a warning.
    Calling without arguments gives a halo with the parameters of Robles et al. (2019).

    Parameters
    ----------
    rs: float, default = 21.1
        NFW scale radius in kpc.
    rhos: float, default = 5.6e+06
        NFW scale density in Msun/kpc^3.
    rsol: float, default = 0.53
        Soliton scale radius in kpc.
    rhosol: float, default = 3.1e+10
        Soliton scale density in Msun/kpc^3.
    repsilon: float, default = 0.48
        Matching (transition) radius in kpc.

    Raises
    ------
    HaloError
        If any parameter is not positive, or the matching radius cannot be found.

    Examples
    --------
    >>> halo = SolNFWModel()
    >>> halo.density([0.1, 1.0, 10.0])

    """
    rs: float       = 21.1
    rhos: float     = 5.6e+06
    rsol: float     = 0.53
    rhosol: float   = 3.1e+10
    repsilon: float = 0.48

    def __post_init__(self) -> None:
        for attr in ('rs', 'rhos', 'rsol', 'rhosol', 'repsilon'):
            if not getattr(self, attr) > 0:
                raise HaloError(f"{attr} must be positive")
        # enforce density matching
        if self.matchingResidual() < MATCHING_TOLERANCE:
            return
        warnings.warn("recalculating matching radius", stacklevel = 3)
        try:
            repsilon = matching_radius(self.rs, self.rhos, self.rsol, self.rhosol)
        except ConvergenceError as _e:
            logging.error("failed to find matching radius for rs = %g, rhos = %g, rsol = %g, rhosol = %g",
                          self.rs, self.rhos, self.rsol, self.rhosol)
            raise HaloError(f"failed to find matching radius for rs = {self.rs}, rhos = {self.rhos}, "
                            f"rsol = {self.rsol}, rhosol = {self.rhosol}") from _e
        logging.info("matching radius changed from %g to %g kpc", self.repsilon, repsilon)
        object.__setattr__(self, 'repsilon', repsilon)

    @classmethod
    def fromVirial(cls, *args: Any, **kwargs: Any) -> 'SolNFWModel':
        r"""
        Create a halo from its virial parameters. See `solnfw_from_virial`.
        """
        return solnfw_from_virial(*args, **kwargs)

    def matchingResidual(self) -> float:
        r"""
        Return the squared relative difference between the NFW and soliton densities at the
        matching radius.
        """
        rho_nfw = density_nfw(self.repsilon, self.rs, self.rhos)
        rho_sol = density_sol(self.repsilon, self.rsol, self.rhosol)
        return float( ( (rho_nfw - rho_sol) / rho_sol )**2 )

    def density(self, r: Any) -> Any:
        r = np.asarray(r, dtype = 'float')
        res = np.zeros_like(r)
        idx_sol = r < self.repsilon
        idx_nfw = ~idx_sol
        res[idx_sol] = density_sol(r[idx_sol], self.rsol, self.rhosol)
        res[idx_nfw] = density_nfw(r[idx_nfw], self.rs, self.rhos)
        return res[()]

    def mass(self, r: Any) -> Any:
        r = np.asarray(r, dtype = 'float')
        res = np.zeros_like(r)
        # offset making the mass continuous at repsilon
        dm_epsilon = ( mass_sol(self.repsilon, self.rsol, self.rhosol)
                      - mass_nfw(self.repsilon, self.rs, self.rhos) )
        idx_sol = r < self.repsilon
        idx_nfw = ~idx_sol
        res[idx_sol] = mass_sol(r[idx_sol], self.rsol, self.rhosol)
        res[idx_nfw] = mass_nfw(r[idx_nfw], self.rs, self.rhos) + dm_epsilon
        return res[()]

    def scaleRadius(self) -> float:
        return self.rs

    def m22(self,
            cosmo: Cosmology = default_cosmo,
            z: float = 0.,
            alpha_mp: float = 0.23, ) -> float:
        r"""
        Return the axion mass (in 1e-22 eV) corresponding to the soliton core.
        """
        return float( m22_from_sol(self.rsol, self.rhosol, cosmo = cosmo, z = z, alpha_mp = alpha_mp) )

###################################################################################################
#                                   Parameter derivation                                          #
###################################################################################################

def m22_from_sol(rsol: Any,
                 rhosol: Any,
                 cosmo: Cosmology = default_cosmo,
                 z: float = 0.,
                 alpha_mp: float = 0.23, ) -> Any:
    r"""
    Calculate the axion mass from the soliton scale parameters (Marsh & Pop 2015, equation 8).

    Parameters
    ----------
    rsol: array_like
        Soliton scale radius in kpc.
    rhosol: array_like
        Soliton scale density in Msun/kpc^3.
    cosmo: Cosmology, optional
    z: float, default = 0
    alpha_mp: float, default = 0.23
        The alpha fitting parameter from Marsh & Pop (2015).

    Returns
    -------
    m22: array_like
        Axion mass in units of 1e-22 eV.

    """
    if np.any( np.less_equal(rsol, 0.) ) or np.any( np.less_equal(rhosol, 0.) ):
        raise HaloError("soliton scale radius and density must be positive")
    delta_sol = np.divide(rhosol, cosmo.criticalDensity(z))
    res = np.sqrt( delta_sol**-1 * np.power(rsol, -4.) * (cosmo.h / 0.7)**2 * 5e+04 * alpha_mp**-4 )
    return res

def rhosol_from_rsol(m22: Any,
                     rsol: Any,
                     cosmo: Cosmology = default_cosmo,
                     z: float = 0.,
                     alpha_mp: float = 0.23, ) -> Any:
    r"""
    Calculate the scale density (Msun/kpc^3) of the soliton core from the axion mass m22 and
    the scale radius (kpc). This is the inverse of `m22_from_sol`.
    """
    if np.any( np.less_equal(m22, 0.) ) or np.any( np.less_equal(rsol, 0.) ):
        raise HaloError("axion mass and soliton scale radius must be positive")
    delta_sol = (5e+04 / alpha_mp**4) * (cosmo.h / 0.7)**2 * np.power(m22, -2.) * np.power(rsol, -4.)
    return delta_sol * cosmo.criticalDensity(z)

def rsol_from_Mvir(m22: Any, Mvir: Any) -> Any:
    r"""
    Calculate the scale radius (kpc) of the soliton core from the halo mass scaling relation
    of Robles et al. (2019).
    """
    if np.any( np.less_equal(m22, 0.) ) or np.any( np.less_equal(Mvir, 0.) ):
        raise HaloError("axion mass and halo mass must be positive")
    return 3.315 * 1.6 * np.divide(Mvir, 1e+09)**(-1./3.) / m22

def solnfw_from_virial(Mvir: float,
                       cvir: float,
                       m22: float,
                       rsol: float | None = None,
                       mdef: str = '200c',
                       cosmo: Cosmology = default_cosmo,
                       z: float = 0., ) -> SolNFWModel:
    r"""
    Create a soliton NFW halo from the virial mass, concentration and axion mass.

    Parameters
    ----------
    Mvir: float
        Virial mass in Msun.
    cvir: float
        Concentration of the NFW envelope.
    m22: float
        Axion mass in units of 1e-22 eV.
    rsol: float, optional
        Soliton scale radius in kpc. If not given, calculated from the halo mass scaling.
    mdef: str, default = `200c`
        Halo mass definition (see `Cosmology.virialOverdensity`).
    cosmo: Cosmology, optional
    z: float, default = 0

    Returns
    -------
    halo: SolNFWModel

    Raises
    ------
    ConvergenceError
        If the matching radius cannot be found.

    """
    # soliton parameters, calculate rsol from Mvir scaling if not passed in
    if rsol is None:
        rsol = rsol_from_Mvir(m22, Mvir)
    rhosol = rhosol_from_rsol(m22, rsol, cosmo = cosmo, z = z)
    # NFW parameters
    Rvir = cosmo.virialRadius(Mvir, mdef, z)
    rs   = Rvir / cvir

    # first guess, rhos from normal NFW profile
    rhos = Mvir / mass_nfw(Rvir, rs, 1.0)
    repsilon = matching_radius(rs, rhos, rsol, rhosol)

    return SolNFWModel(float(rs), float(rhos), float(rsol), float(rhosol), repsilon)
