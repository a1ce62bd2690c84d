#!/usr/bin/python3

# for basic cosmology calculations
from ._base import Cosmology, CosmologyError
# for halo structure
from ._base import HaloModel, HaloError
from .utils.objects import ConvergenceError
# specialised models and constructors
from .cosmology import cosmology, FlatLambdaCDM, default_cosmo
from .halos import NFWModel, SolNFWModel, solnfw_from_virial

__all__ = ['halos',
           'utils',
           'cosmology',
           'FlatLambdaCDM',
           'default_cosmo',
           'Cosmology',
           'CosmologyError',
           'HaloModel',
           'HaloError',
           'ConvergenceError',
           'NFWModel',
           'SolNFWModel',
           'solnfw_from_virial', ]
