#!/usr/bin/python3

import numpy as np
from typing import Any
from ._base import Cosmology, CosmologyError

class FlatLambdaCDM(Cosmology):
    r"""
    A class representing a flat Lambda-CDM cosmlogy.
    """

    def __init__(self,
                 h: float,
                 Om0: float,
                 Ob0: float,
                 Tcmb0: float = 2.725,
                 name: str | None = None, ) -> None:
        super().__init__(h, Om0, Ob0,
                         Ode0 = None,
                         w0 = -1.,
                         wa = 0.,
                         Tcmb0 = Tcmb0,
                         name = name, )
        return

    def darkEnergyModel(self,
                        z: Any,
                        deriv: int = 0, ) -> Any:
        return np.zeros_like(z, dtype = 'float') if deriv else np.ones_like(z, dtype = 'float')

#########################################################################################
#                               Built-in models + constructor                           #
#########################################################################################

def cosmology(name: str, *args, **kwargs) -> Cosmology:
    r"""
    Return a cosmology model.

    Parameters
    ----------
    name: str
        If a predefined name, return that cosmology. Otherwise, create a cosmology with
        this name.
    *args, **kwargs: Any
        Other arguments are passed to `Cosmology` object constructor. If `flat = True` is
        given, a `FlatLambdaCDM` object is created.

    Returns
    -------
    cm: Cosmology

    See Also
    --------
    Cosmology

    """
    if name is not None and not isinstance(name, str):
        raise TypeError("name must be an 'str' or None")
    # cosmology with parameters from Plank et al (2018)
    if name == 'plank18':
        return Cosmology(h = 0.6790, Om0 = 0.3065, Ob0 = 0.0483, Ode0 = 0.6935, Tcmb0 = 2.7255, name = 'plank18')
    # cosmology with parameters from Plank et al (2015)
    if name == 'plank15':
        return Cosmology(h = 0.6736, Om0 = 0.3153, Ob0 = 0.0493, Ode0 = 0.6947, Tcmb0 = 2.7255, name = 'plank15')
    # cosmology with parameters from WMAP survay
    if name == 'wmap08':
        return Cosmology(h = 0.719, Om0 = 0.2581, Ob0 = 0.0441, Ode0 = 0.742, Tcmb0 = 2.7255, name = 'wmap08')
    # cosmology for millanium simulation
    if name == 'millanium':
        return Cosmology(h = 0.73, Om0 = 0.25, Ob0 = 0.045, Tcmb0 = 2.7255, name = 'millanium')
    if not args and not kwargs:
        raise CosmologyError(f"model not available: '{name}'")
    # create a new model with given name
    if kwargs.pop( 'flat', False ): return FlatLambdaCDM(*args, **kwargs, name = name)
    return Cosmology(*args, **kwargs, name = name)

# cosmology used when none is specified
default_cosmo = cosmology('plank18')
