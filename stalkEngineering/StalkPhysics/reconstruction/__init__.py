# -- Reconstruction Subpackage -- #

'''
Ellipse + principal component reconstruction of section boundaries and
one-parameter sensitivity cases.
'''

from stalkEngineering.StalkPhysics.reconstruction.reconstructor import (
    EllipseResidualReconstructor,
    Reconstruction,
    SectionCase,
    baseCase,
    caseBoundaries,
    normalizedInterior,
    perturbCase,
    perturbComponent,
    reconstructRadius,
    sensitivityCases,
)
