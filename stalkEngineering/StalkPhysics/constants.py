# -- Constants for Stalk Cross-Section Analysis -- #

'''
Numerical, sampling, and material constants for stalk cross-section
shape modeling and stiffness analysis.

Lengths are in millimeters and moduli in the units of the source
material study unless otherwise noted.

Sean Bowman [10/19/2026]
'''

import math

######################################################################
# -- Boundary Sampling -- #
######################################################################

# Number of angular samples per boundary curve
# theta_i = 2*pi*i / N, i = 0..N-1 (no repeated endpoint)
defaultSampleCount: int = 360

# Radial integration step for polar moment of inertia [mm]
defaultRadialStep: float = 0.1

######################################################################
# -- Synthesis Limits -- #
######################################################################

# Smallest notch width the synthesizer accepts [rad-scale]
# Width enters as 10/width in the notch profile, so zero is a needle notch
notchWidthFloor: float = 0.05

# Uniform noise amplitude relative to the half diameters
defaultNoiseAmplitude: float = 0.0025

######################################################################
# -- Registration -- #
######################################################################

# Fixed-point tolerance for centroid centering (relative to equivalent radius)
registrationTolerance: float = 1e-12

# Maximum registration fixed-point iterations
registrationMaxIterations: int = 50

# Angular harmonics 0..N of the radius treated as the smooth elliptical trend
# when locating the notch
notchHarmonics: int = 4

######################################################################
# -- Principal Component Analysis -- #
######################################################################

# Minimum cumulative explained variance [%] for component selection
explainedVarianceThreshold: float = 95.0

# Angular span of the notch-region window [deg], centered on pi
notchRegionDegrees: float = 60.0

######################################################################
# -- Stiffness Study -- #
######################################################################

# Percentiles reported for the signed stiffness error [%]
errorPercentiles: tuple[float, ...] = (5.0, 25.0, 50.0, 75.0, 95.0)

# numpy percentile method; 'hazen' places sample i at (i - 0.5) / n
percentileMethod: str = 'hazen'

# Rind-to-pith modulus ratio (study range is 20 - 80)
defaultModulusRatio: float = 20.0

# Slice positions relative to the node [mm]
defaultSlicePositions: tuple[int, ...] = (-40, -30, -20, -15, -10, -5, 0, 5, 10, 15, 20, 30, 40)

# Valid stalk indices in the population study are 1..stalkCount
stalkCount: int = 980

# Tolerance on a negative rind moment before it is treated as an error
# (relative to the total moment)
rindMomentTolerance: float = 1e-9

######################################################################
# -- Material Properties -- #
######################################################################

# Rind transverse modulus: mean, standard deviation, 95% interval
rindModulusMean: float = 8.0747e-04
rindModulusStd: float = 3.3517e-04
rindModulusInterval: tuple[float, float] = (6.7414e-04, 9.4081e-04)

# Pith transverse modulus: mean, standard deviation, 95% interval
pithModulusMean: float = 2.5976e-05
pithModulusStd: float = 1.0303e-05
pithModulusInterval: tuple[float, float] = (2.1878e-05, 3.0075e-05)

######################################################################
# -- Export -- #
######################################################################

# Millimeters to micrometers for downstream solver input
exportUnitScale: float = 1000.0
