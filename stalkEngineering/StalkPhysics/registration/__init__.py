# -- Registration Subpackage -- #

'''
Centering, notch alignment, and uniform resampling of section boundaries.
'''

from stalkEngineering.StalkPhysics.registration.registrar import (
    ShapeRegistrar,
    RegistrationResult,
    RigidTransform,
    resampleRadius,
)
