#!/usr/bin/python3

import re
import numpy as np
from abc import ABC, abstractmethod
from typing import Any
from .utils.constants import RHO_CRIT0_KPC, G_KPC_KMPS2, PI

#########################################################################################
#                                   Cosmology model                                     #
#########################################################################################

class CosmologyError(Exception):
    r"""
    Base class of exceptions raised in cosmology calculations.
    """

class Cosmology:
    r"""
    Base class representing a general cosmology model. This is basically a cosmology using a w0-wa dark-
    energy model, without radiation. Only the background quantities needed for the halo calculations
    are available.

    Parameters
    ----------
    h: float
        Present value of the hubble parameter in 100 km/sec/Mpc.
    Om0: float
        Present value of total matter density, in units of critical density. Its value should be greater
        than or equal to `Ob0`.
    Ob0: float
        Present value of baryon density, in units of critical density.
    Ode0: float, default = None
        Present value of dark-energy density, in units of critical density. If not given, calculate its
        value from others, assuming a flat universe.
    w0: float, default = -1.0
        Constant part of the w0-wa model dark-energy state parameter. Default value means cosmological constant.
    wa: float, default = 0.0
        Variable part of the w0-wa model dark-energy state parameter. Default value means cosmological constant.
    Tcmb0: float, default = 2.725
        Present temperature of the micrwave background radiation in K.
    name: str, default = None
        Optional name for the cosmology model.

    Raises
    ------
    CosmologyError

    Notes
    -----
    Densities are in physical units, Msun/kpc^3 (i.e., with the factor h^2 included) and distances in kpc,
    so that they can be used directly with the halo models.

    """

    __slots__ = ('h', 'Om0', 'Ob0', 'Ode0', 'Ok0', 'Tcmb0', 'w0', 'wa', 'name', )

    # unit for density: present critical density in h^2 Msun/kpc^3
    UNIT_DENSITY: float = RHO_CRIT0_KPC

    def __init__(self,
                 h: float,
                 Om0: float,
                 Ob0: float,
                 Ode0: float | None = None,
                 w0: float = -1.,
                 wa: float = 0.,
                 Tcmb0: float = 2.725,
                 name: str | None = None) -> None:
        # hubble parameter in 100 km/sec/Mpc
        if h <= 0:
            raise CosmologyError("hubble parameter must be positive")
        self.h = h
        # total matter (baryon + cdm) density
        if Om0 < 0:
            raise CosmologyError("matter density must be non-negative")
        self.Om0 = Om0
        # baryon density
        if Ob0 < 0:
            raise CosmologyError("baryon density must be non-negative")
        if Ob0 > Om0:
            raise CosmologyError("baryon density cannot exceed total matter density")
        self.Ob0 = Ob0
        # dark energy density and curvature energy density
        if Ode0 is None:
            self.Ode0 = 1 - Om0
            self.Ok0  = 0.
        elif Ode0 >= 0:
            self.Ok0  = 1 - Om0 - Ode0
            self.Ode0 = Ode0
            # round very small curvatures to zero (flat space)
            if abs(self.Ok0) < 1e-08:
                self.Ode0 += self.Ok0
                self.Ok0   = 0.
        else:
            raise CosmologyError("dark energy density must be non-negative")
        # w0-wa dark-energy model parameters
        self.w0, self.wa = w0, wa
        # cosmic microwave background (CMB) temperature in K
        if Tcmb0 <= 0:
            raise CosmologyError("CMB temperature must be positive")
        self.Tcmb0  = Tcmb0

        # name of the model
        if name is not None and not isinstance(name, str):
            raise TypeError("name must be a string")
        self.name = name

    def __repr__(self) -> str:
        attrs = ('h', 'Om0', 'Ob0', 'Ode0')
        if self.name is not None:
            attrs = ('name', *attrs)
        return f"{self.__class__.__name__}({', '.join([f'{attr}={self.__getattribute__(attr)}' for attr in attrs])})"

    def darkEnergyModel(self,
                        z: Any,
                        deriv: int = 0, ) -> Any:
        r"""
        Return the redshift evolution of the dark-energy density.

        Parameters
        ----------
        z: array_like
        deriv: int, default = 0
            If non-zero, return the first derivative of the function.

        Returns
        -------
        res :array_like

        """
        # constant w model: wa = 0, w = w0
        if abs(self.wa) < 1e-08:
            # cosmological constant: w0 = -1
            if abs(self.w0 + 1) < 1e-08:
                if deriv:
                    return np.zeros_like(z, dtype = 'float')
                return np.ones_like(z, dtype = 'float')
            # other constant w values:
            p = (3*self.w0 + 3)
            if deriv:
                return p * np.add(z, 1.)**(p-1)
            return np.add(z, 1.)**p
        # general w0-wa model:
        zp1 = np.add(z, 1.)
        p   = 3*( self.w0 + self.wa * (zp1 - 1) / zp1 ) + 3
        res = zp1**p
        if deriv:
            return res / zp1 * ( p + 3*self.wa * np.log(zp1) / zp1 )
        return res

    def isFlat(self) -> bool:
        r"""
        Tell if the cosmology is flat or curved.
        """
        return abs(self.Ok0) < 1e-08

    def lnE2(self,
             lnzp1: Any,
             deriv: int = 0, ) -> Any:
        r"""
        Return the redshift evolution of the hubble parameter, as function of the redshift
        variable :math:`\ln(z+1)`.

        Parameters
        ----------
        lnzp1: array_like
        deriv: int, default = 0
            If non-zero, return the first derivative of the function.

        Returns
        -------
        res :array_like

        """
        zp1  = np.exp(lnzp1)
        res1 = self.Om0 * zp1**3
        if deriv:
            res2 = 3*res1

        if not self.isFlat():
            __tmp = self.Ok0 * zp1**2
            res1 += __tmp
            if deriv:
                res2 += 2*__tmp

        res1 += self.Ode0 * self.darkEnergyModel(zp1-1, deriv = 0)
        if deriv:
            res2 += self.Ode0 * self.darkEnergyModel(zp1-1, deriv = 1) * zp1

        if deriv:
            return res2 / res1
        return np.log(res1)

    def E(self,
          z: Any,
          deriv: int = 0, ) -> Any:
        r"""
        Return the redshift evolution of the hubble parameter.

        Parameters
        ----------
        z: array_like
        deriv: int, default = 0
            If non-zero, return the first derivative of the function.

        Returns
        -------
        res :array_like

        See Also
        --------
        Cosmology.lnE2

        """
        lnzp1 = np.log( np.add(z, 1.) )
        res   = np.exp( 0.5 * self.lnE2(lnzp1, deriv = 0) )
        if deriv:
            res *= 0.5 * self.lnE2(lnzp1, deriv = 1) * np.exp(-lnzp1)
        return res

    def Om(self, z: Any) -> Any:
        r"""
        Return the redshift evolution of the matter density, in unit of critical density.
        """
        lnzp1 = np.log( np.add(z, 1.) )
        return self.Om0 * np.exp( 3*lnzp1 - self.lnE2(lnzp1, deriv = 0) )

    def criticalDensity(self, z: Any = 0.) -> Any:
        r"""
        Return the critical density at redshift z.

        Parameters
        ----------
        z: array_like, default = 0

        Returns
        -------
        res :array_like
            Critical density in Msun/kpc^3.

        """
        return Cosmology.UNIT_DENSITY * self.h**2 * self.E(z)**2

    def meanDensity(self, z: Any = 0.) -> Any:
        r"""
        Return the mean matter density at redshift z, in Msun/kpc^3.
        """
        return Cosmology.UNIT_DENSITY * self.h**2 * self.Om0 * np.add(z, 1.)**3

    ###########################################################################################################
    #                                           Halo mass definitions                                         #
    ###########################################################################################################

    def virialOverdensity(self,
                          mdef: str = '200c',
                          z: Any = 0., ) -> Any:
        r"""
        Return the overdensity of a halo, w.r.to the critical density, for a mass definition.

        Parameters
        ----------
        mdef: str, default = `200c`
            Halo mass definition. Allowed values are `<N>c` (N times the critical density),
            `<N>m` (N times the mean matter density) or `vir` (Bryan & Norman 1998).
        z: array_like, default = 0

        Returns
        -------
        res: array_like

        Raises
        ------
        CosmologyError

        """
        if not isinstance(mdef, str):
            raise TypeError("mdef must be a string")
        if mdef == 'vir':
            x = self.Om(z) - 1.
            return 18*PI**2 + 82*x - 39*x**2
        m = re.fullmatch(r'(\d+(?:\.\d*)?)([cm])', mdef)
        if not m:
            raise CosmologyError(f"invalid halo mass definition: '{mdef}'")
        delta, ref = float( m.group(1) ), m.group(2)
        if ref == 'm':
            return delta * self.Om(z)
        return delta * np.ones_like(z, dtype = 'float')

    def virialRadius(self,
                     m: Any,
                     mdef: str = '200c',
                     z: Any = 0., ) -> Any:
        r"""
        Return the radius of a halo of mass m (Msun), for a mass definition.

        Parameters
        ----------
        m: array_like
        mdef: str, default = `200c`
        z: array_like, default = 0

        Returns
        -------
        res: array_like
            Radius in kpc.

        """
        halo_density = self.virialOverdensity(mdef, z) * self.criticalDensity(z)
        res = np.cbrt( 0.75*np.asarray(m, dtype = 'float') / PI / halo_density )
        return res

    def virialMass(self,
                   r: Any,
                   mdef: str = '200c',
                   z: Any = 0., ) -> Any:
        r"""
        Return the mass (Msun) of a halo of radius r (kpc), for a mass definition.
        """
        halo_density = self.virialOverdensity(mdef, z) * self.criticalDensity(z)
        res = 4*PI/3. * np.asarray(r, dtype = 'float')**3 * halo_density
        return res

#########################################################################################
#                                       Halo models                                     #
#########################################################################################

class HaloError(Exception):
    r"""
    Base class of exceptions raised by halo model calculations.
    """

class HaloModel(ABC):
    r"""
    Base class representing a spherical dark-matter halo. Radii are in kpc, masses in Msun and
    densities in Msun/kpc^3.
    """

    @abstractmethod
    def density(self, r: Any) -> Any:
        r"""
        Return the density at distance r from the center.

        Parameters
        ----------
        r: array_like

        Returns
        -------
        res: array_like

        """

    @abstractmethod
    def mass(self, r: Any) -> Any:
        r"""
        Return the mass enclosed within distance r from the center.

        Parameters
        ----------
        r: array_like

        Returns
        -------
        res: array_like

        """

    @abstractmethod
    def scaleRadius(self) -> float:
        r"""
        Return the scale radius of the halo.
        """

    def circularVelocity(self, r: Any) -> Any:
        r"""
        Return the circular velocity (km/s) at distance r from the center.
        """
        r = np.asarray(r, dtype = 'float')
        return np.sqrt( G_KPC_KMPS2 * self.mass(r) / r )
