# -- Mechanics Subpackage -- #

'''
Polar moments and material properties of stalk cross-sections.

The population stiffness study lives in mechanics.stiffness; it depends on
the reconstruction package and is imported from there directly.
'''

from stalkEngineering.StalkPhysics.mechanics.protocols import MomentResult, RadialBoundary
from stalkEngineering.StalkPhysics.mechanics.polarInertia import polarMomentOfInertia, computeMoments
from stalkEngineering.StalkPhysics.mechanics.materials import MaterialProperties, MaterialSampler
