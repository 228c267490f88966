"""Physical constants used throughout SRM Pro.

All values in SI units unless otherwise noted.
"""

import math

# Universal constants
R_UNIVERSAL = 8.31446261815324  # J/(mol·K), universal gas constant

# Gravitational
G_0 = 9.80665  # m/s², standard gravitational acceleration
G_DESIGN = 9.8  # m/s², rounded value used by the sizing correlations

# Atmospheric
P_ATM = 101325.0  # Pa, standard atmospheric pressure
RHO_AIR_STP = 1.225  # kg/m³, air density at STP
RHO_AIR_DESIGN = 1.2  # kg/m³, rounded value used by the sizing correlations

# Mathematical
PI = math.pi
DEG_TO_RAD = math.pi / 180.0
RAD_TO_DEG = 180.0 / math.pi

# Conversion factors
MPA_TO_PA = 1.0e6
PA_TO_MPA = 1.0e-6
MM_TO_M = 1.0e-3
M_TO_MM = 1.0e3
M2_TO_CM2 = 1.0e4
M2_TO_MM2 = 1.0e6
