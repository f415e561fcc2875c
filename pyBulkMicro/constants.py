"""
Constants for the two-moment bulk warm rain microphysics.
Coefficients tied to a specific closure are grouped by reference.
Tunable values that the host model may change live in BulkMicroConfig.
"""

from ndsl.dsl.typing import Float


# Math constants
PI = Float(3.14159265358979323846)
SQRT2 = Float(1.4142135623730951)

# Thermodynamics
RLV = Float(2.53e6)  # latent heat of vaporisation [J/kg]
CP = Float(1004.0)  # specific heat of dry air at constant pressure [J/kg/K]
RV = Float(461.5)  # gas constant for water vapour [J/kg/K]
RHOW = Float(1.0e3)  # density of liquid water [kg/m3]
PIRHOW = PI * RHOW / Float(6.0)  # mass of a drop of unit diameter [kg/m3]
RHO_REF = Float(1.225)  # reference air density for fall speed corrections [kg/m3]

# Small numbers
EPS0 = Float(1.0e-20)  # division guard
EPS1 = Float(1.0e-10)  # liquid content guard in lognormal sedimentation

# Seifert & Beheng (2001, 2006)
X_S = Float(2.6e-10)  # separating mass between cloud droplets and rain drops [kg]
D_S = (X_S / PIRHOW) ** (Float(1.0) / Float(3.0))  # separating diameter [m]
K_C = Float(9.44e9)  # long kernel constant [m3/kg2/s]
K_1 = Float(6.0e2)  # autoconversion correction parameter
K_2 = Float(0.68)  # autoconversion correction exponent
K_R = Float(5.78)  # accretion kernel [m3/kg/s]
K_L = Float(5.0e-4)  # accretion correction parameter
K_RR = Float(4.33)  # self-collection kernel
KAPPA_R = Float(60.7)  # self-collection exponential correction [1/m]
K_BR = Float(1.0e3)  # breakup parameter [1/m]
D_EQ = Float(1.1e-3)  # equilibrium diameter for breakup [m]
D_BREAKUP = Float(0.30e-3)  # mean diameter threshold for breakup [m]

# Mean drop mass limits (Seifert & Beheng 2006)
XRMIN = X_S
XRMAX = Float(5.0e-6)

# Khairoutdinov & Kogan (2000)
D0_KK = Float(50.0e-6)  # separating diameter [m]
C_EVAPKK = Float(0.86)  # evaporation coefficient

# Cloud sedimentation
C_ST = Float(1.19e8)  # Stokes fall speed constant [1/m/s]

# Evaporation (Seifert 2008)
NU_A = Float(1.41e-5)  # kinematic viscosity of air [m2/s]
SC_NUM = Float(0.71)  # Schmidt number
AVF = Float(0.78)  # ventilation coefficient, constant term
BVF = Float(0.308)  # ventilation coefficient, Reynolds term
DV = Float(3.0e-5)  # diffusivity of water vapour [m2/s]
KT = Float(2.5e-2)  # thermal conductivity of air [J/m/s/K]
C_NEVAP = Float(0.7)  # number to mass evaporation ratio

# Kohler activation (Petters & Kreidenweis 2007)
R_GAS = Float(8.314)  # universal gas constant [J/mol/K]
MW = Float(0.018)  # molar mass of water [kg/mol]
SW = Float(0.072)  # surface tension of water [J/m2]

# Lognormal flux integral (Feingold et al. 1986, Rogers & Yau 1989)
ERF_A1 = Float(0.278393)
ERF_A2 = Float(0.230389)
ERF_A3 = Float(0.000972)
ERF_A4 = Float(0.078108)
ERFINT_EPS = Float(1.0e-10)
SQRT_HALF = Float(0.707107)
SED_D_INTMIN = Float(1.0e-6)
SED_D_INTMAX = Float(4.3e-3)
LIQ_D_INTMAX = Float(3.0e-3)
D_QUAD_LIN = Float(133.0e-6)  # breakpoint between D^2 and D fall speed laws [m]
D_LIN_SQRT = Float(1.25e-3)  # breakpoint between D and D^0.5 fall speed laws [m]
ALFA_QUAD = Float(3.0e7)  # [1/m/s]
ALFA_LIN = Float(4.0e3)  # [1/s]
ALFA_SQRT = Float(140.0)  # [m^0.5/s]

# Khairoutdinov & Kogan linear fall speed law
KK_VQ_SLOPE = Float(0.006e6)
KK_VQ_OFFSET = Float(0.2)
KK_VN_SLOPE = Float(0.0035e6)
KK_VN_OFFSET = Float(0.1)

# Ventilation table: shape parameter sampled every 1/100
VENT_TABLE_SCALE = 100
VENT_TABLE_MIN_INDEX = -99
VENT_TABLE_MAX_INDEX = 3000
