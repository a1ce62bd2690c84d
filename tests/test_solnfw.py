#!/usr/bin/python3

import dataclasses
import warnings
import numpy as np
import pytest
from fdmhalo import SolNFWModel, HaloModel, HaloError, ConvergenceError, solnfw_from_virial, cosmology
from fdmhalo.halos.soliton import (density_sol,
                                   mass_sol,
                                   matching_radius,
                                   m22_from_sol,
                                   rhosol_from_rsol,
                                   rsol_from_Mvir, )
from fdmhalo.halos.density_profiles import density_nfw, mass_nfw

PARAMS = (21.1, 5.6e+06, 0.53, 3.1e+10)

@pytest.fixture(scope = 'module')
def halo():
    # stored matching radius already consistent, so no recalculation
    return SolNFWModel(*PARAMS, matching_radius(*PARAMS))

def recalculation_warnings(records):
    return [ w for w in records if 'recalculating matching radius' in str(w.message) ]

###################################################################################################
#                                          Construction                                           #
###################################################################################################

def test_consistent_matching_radius_is_kept():
    repsilon = matching_radius(*PARAMS)
    with warnings.catch_warnings(record = True) as records:
        warnings.simplefilter('always')
        halo = SolNFWModel(*PARAMS, repsilon)
    assert not recalculation_warnings(records)
    assert halo.repsilon == repsilon
    assert halo.matchingResidual() < 1e-09

def test_wrong_matching_radius_is_recalculated():
    with pytest.warns(UserWarning, match = 'recalculating matching radius'):
        halo = SolNFWModel(*PARAMS, 1.0)
    assert halo.repsilon != 1.0
    assert halo.repsilon == pytest.approx(matching_radius(*PARAMS), rel = 1e-12)
    assert halo.matchingResidual() < 1e-09
    assert (halo.rs, halo.rhos, halo.rsol, halo.rhosol) == PARAMS

def test_default_model():
    # the tabulated 0.48 kpc is off by a few percent in density, and gets refined
    with pytest.warns(UserWarning, match = 'recalculating matching radius'):
        halo = SolNFWModel()
    assert (halo.rs, halo.rhos, halo.rsol, halo.rhosol) == PARAMS
    assert halo.repsilon == pytest.approx(0.48, abs = 0.02)
    assert halo.matchingResidual() < 1e-09

@pytest.mark.parametrize('index', range(5))
def test_non_positive_parameters(index):
    args = [*PARAMS, 0.48]
    args[index] = -args[index]
    with pytest.raises(HaloError):
        SolNFWModel(*args)

@pytest.mark.filterwarnings('ignore::UserWarning')
@pytest.mark.filterwarnings('ignore::RuntimeWarning')
def test_failed_recalculation():
    with pytest.raises(HaloError, match = 'rhosol = 1000.0') as exc_info:
        SolNFWModel(21.1, 5.6e+06, 0.53, 1e+03, 0.48)
    assert isinstance(exc_info.value.__cause__, ConvergenceError)
    assert exc_info.value.__cause__.params['rhosol'] == 1e+03

def test_model_is_immutable(halo):
    with pytest.raises(dataclasses.FrozenInstanceError):
        halo.repsilon = 1.0
    assert isinstance(halo, HaloModel)
    assert halo.scaleRadius() == 21.1

###################################################################################################
#                                      Density and mass                                           #
###################################################################################################

def test_density_branches(halo):
    r_in, r_out = 0.5 * halo.repsilon, 2. * halo.repsilon
    assert halo.density(r_in) == pytest.approx(density_sol(r_in, halo.rsol, halo.rhosol), rel = 1e-14)
    assert halo.density(r_out) == pytest.approx(density_nfw(r_out, halo.rs, halo.rhos), rel = 1e-14)
    assert halo.density(halo.repsilon) == pytest.approx(density_nfw(halo.repsilon, halo.rs, halo.rhos), rel = 1e-14)
    assert halo.density(0.) == halo.rhosol

def test_mass_branches(halo):
    r_in, r_out = 0.5 * halo.repsilon, 2. * halo.repsilon
    dm = mass_sol(halo.repsilon, halo.rsol, halo.rhosol) - mass_nfw(halo.repsilon, halo.rs, halo.rhos)
    assert halo.mass(r_in) == pytest.approx(mass_sol(r_in, halo.rsol, halo.rhosol), rel = 1e-14)
    assert halo.mass(r_out) == pytest.approx(mass_nfw(r_out, halo.rs, halo.rhos) + dm, rel = 1e-14)
    assert halo.mass(0.) == 0.

@pytest.mark.parametrize('eps', [1e-04, 1e-06, 1e-08])
def test_continuity_at_matching_radius(halo, eps):
    r1, r2 = halo.repsilon * (1 - eps), halo.repsilon * (1 + eps)
    assert halo.density(r1) == pytest.approx(halo.density(r2), rel = 20*eps + 1e-07)
    assert halo.mass(r1) == pytest.approx(halo.mass(r2), rel = 5*eps + 1e-09)

def test_vector_matches_scalar(halo):
    r = np.array([5.0, 0.01, halo.repsilon, 0.3, 120., halo.repsilon * 1.001, 0.2])
    rho, mass = halo.density(r), halo.mass(r)
    assert isinstance(rho, np.ndarray) and rho.shape == r.shape
    assert isinstance(mass, np.ndarray) and mass.shape == r.shape
    np.testing.assert_allclose(rho, [ halo.density(float(ri)) for ri in r ], rtol = 1e-14)
    np.testing.assert_allclose(mass, [ halo.mass(float(ri)) for ri in r ], rtol = 1e-14)

def test_scalar_and_sequence_inputs(halo):
    assert isinstance(halo.density(1.0), float)
    assert isinstance(halo.mass(1.0), float)
    assert halo.density([0.1, 10.]).shape == (2, )
    assert halo.mass(np.full((3, 2), 1.5)).shape == (3, 2)

def test_circular_velocity(halo):
    r = np.array([0.1, 1., 10.])
    vc = halo.circularVelocity(r)
    np.testing.assert_allclose(vc**2, 4.30091727e-06 * halo.mass(r) / r, rtol = 1e-12)
    assert np.all(vc > 0.)

###################################################################################################
#                                   Parameter derivation                                          #
###################################################################################################

@pytest.mark.parametrize('rsol, rhosol', [(0.53, 3.1e+10), (2.0, 1e+07), (0.05, 4e+12)])
@pytest.mark.parametrize('h, z', [(0.7, 0.), (0.679, 0.), (0.5, 1.5)])
def test_m22_round_trip(rsol, rhosol, h, z):
    cm  = cosmology('test', h = h, Om0 = 0.3, Ob0 = 0.05)
    m22 = m22_from_sol(rsol, rhosol, cosmo = cm, z = z)
    assert rhosol_from_rsol(m22, rsol, cosmo = cm, z = z) == pytest.approx(rhosol, rel = 1e-12)

def test_m22_of_default_halo(halo):
    assert halo.m22() == pytest.approx(m22_from_sol(halo.rsol, halo.rhosol))
    assert 0.5 < halo.m22() < 1.5

def test_m22_scaling():
    # m22 ~ rhosol^-1/2 at fixed rsol
    assert m22_from_sol(0.5, 4e+10) == pytest.approx(0.5 * m22_from_sol(0.5, 1e+10), rel = 1e-12)

def test_invalid_soliton_parameters():
    with pytest.raises(HaloError):
        m22_from_sol(-0.5, 1e+10)
    with pytest.raises(HaloError):
        m22_from_sol(0.5, [1e+10, 0.])
    with pytest.raises(HaloError):
        rhosol_from_rsol(0., 0.5)

def test_rsol_from_mvir():
    assert rsol_from_Mvir(1.0, 1e+09) == pytest.approx(3.315 * 1.6)
    assert rsol_from_Mvir(2.0, 8e+09) == pytest.approx(3.315 * 1.6 / 4.)
    np.testing.assert_allclose(rsol_from_Mvir(1.0, [1e+09, 1e+12]), [5.304, 0.5304])

def test_from_virial():
    cm = cosmology('plank18')
    with warnings.catch_warnings(record = True) as records:
        warnings.simplefilter('always')
        halo = solnfw_from_virial(1e+12, 10., 1.0, cosmo = cm)
    assert not recalculation_warnings(records)

    rvir = cm.virialRadius(1e+12, '200c')
    assert halo.rsol == pytest.approx(rsol_from_Mvir(1.0, 1e+12))
    assert halo.rhosol == pytest.approx(rhosol_from_rsol(1.0, halo.rsol, cosmo = cm))
    assert halo.rs == pytest.approx(rvir / 10.)
    assert mass_nfw(rvir, halo.rs, halo.rhos) == pytest.approx(1e+12, rel = 1e-12)
    assert halo.matchingResidual() < 1e-09
    assert 0.1 < halo.repsilon < 2.

def test_from_virial_options():
    cm   = cosmology('plank18')
    halo = SolNFWModel.fromVirial(1e+12, 10., 1.0, rsol = 0.6, mdef = 'vir', cosmo = cm)
    assert halo.rsol == 0.6
    assert halo.rs == pytest.approx(cm.virialRadius(1e+12, 'vir') / 10.)
    assert halo.matchingResidual() < 1e-09

@pytest.mark.parametrize('h', [0.5, 0.679, 0.7, 0.9])
def test_soliton_density_is_inverse_of_m22(h):
    cm = cosmology('test', h = h, Om0 = 0.3, Ob0 = 0.05)
    assert m22_from_sol(0.53, rhosol_from_rsol(0.8, 0.53, cosmo = cm), cosmo = cm) == pytest.approx(0.8, rel = 1e-12)

def test_from_virial_keeps_axion_mass():
    cm   = cosmology('plank18')
    halo = solnfw_from_virial(1e+12, 10., 0.8, cosmo = cm)
    assert halo.m22(cosmo = cm) == pytest.approx(0.8, rel = 1e-12)

def test_invalid_halo_mass_scaling():
    with pytest.raises(HaloError):
        rsol_from_Mvir(0., 1e+12)
    with pytest.raises(HaloError):
        rsol_from_Mvir(-1.0, 1e+12)
    with pytest.raises(HaloError):
        rsol_from_Mvir(1.0, [1e+12, -1.])
