# -- Geometry Subpackage -- #

'''
Stalk cross-section geometry: parametric boundary synthesis, polar boundary
curves, ellipse approximation, and notch location.
'''

from stalkEngineering.StalkPhysics.geometry.parameters import ShapeParameters, ParameterBounds
from stalkEngineering.StalkPhysics.geometry.boundary import BoundaryCurve, uniformTheta, isUniformTheta
from stalkEngineering.StalkPhysics.geometry.ellipse import EllipseFit, ellipseRadius, fitEllipse
from stalkEngineering.StalkPhysics.geometry.notch import locateNotch, locateNotchIndex
from stalkEngineering.StalkPhysics.geometry.synthesizer import (
    BoundarySynthesizer,
    SynthesisRanges,
    SyntheticSection,
    shapeModel,
)
