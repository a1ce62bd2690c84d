#!/usr/bin/python3

# Critical density in h^2 Msun / kpc^3
RHO_CRIT0_KPC = 2.77536627E+02

# Gravitational constant in kpc (km/s)^2 / Msun
G_KPC_KMPS2 = 4.30091727e-06

# Others
PI      = 3.141592653589793
FOUR_PI = 12.566370614359172
