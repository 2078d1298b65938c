# -- StalkPhysics Package -- #

'''
Stalk cross-section shape modeling and stiffness analysis.

Parametric boundary synthesis, registration, principal component bases,
ellipse + residual reconstruction, and polar-moment stiffness error
statistics for populations of plant-stalk cross-sections.

Sean Bowman [10/19/2026]
'''

__version__ = '0.1.0'

from stalkEngineering.StalkPhysics.errors import (
    StalkPhysicsError,
    DegenerateGeometryError,
    EmptyPopulationError,
    InconsistentMomentError,
    MissingSampleError,
    RegistrationError,
)
from stalkEngineering.StalkPhysics.geometry.parameters import ShapeParameters, ParameterBounds
from stalkEngineering.StalkPhysics.geometry.boundary import BoundaryCurve
from stalkEngineering.StalkPhysics.geometry.synthesizer import BoundarySynthesizer, SynthesisRanges
from stalkEngineering.StalkPhysics.registration.registrar import ShapeRegistrar
from stalkEngineering.StalkPhysics.pca.basis import PrincipalComponentBasis, buildBasis
from stalkEngineering.StalkPhysics.population.store import PopulationStore, CrossSectionSample, MISSING_ROW
from stalkEngineering.StalkPhysics.population.builder import PopulationBuilder
from stalkEngineering.StalkPhysics.reconstruction.reconstructor import EllipseResidualReconstructor
from stalkEngineering.StalkPhysics.mechanics.polarInertia import polarMomentOfInertia, computeMoments
from stalkEngineering.StalkPhysics.mechanics.stiffness import StiffnessStudy, ErrorPercentileSummary
from stalkEngineering.StalkPhysics.optimization.curveFitter import CurveFitter, FitResult
