# -- Shared Test Fixtures -- #

'''
Fixtures shared by the StalkPhysics test modules.

The synthetic population is built once per session: 50 registered
stalks at a single slice position.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import numpy as np
import pytest

from stalkEngineering.StalkPhysics.geometry.parameters import ShapeParameters
from stalkEngineering.StalkPhysics.geometry.synthesizer import BoundarySynthesizer
from stalkEngineering.StalkPhysics.population.builder import PopulationBuilder
from stalkEngineering.StalkPhysics.population.store import PopulationStore


@pytest.fixture(scope='session')
def population() -> PopulationStore:
    '''50 synthetic stalks at slice 0 with all channel bases built.'''
    return PopulationBuilder().synthesize(slicePositions=(0.0,), stalksPerSlice=50, seed=7)


@pytest.fixture
def synthesizer() -> BoundarySynthesizer:
    return BoundarySynthesizer(nPoints=360)


@pytest.fixture
def skewedParams() -> ShapeParameters:
    '''Notched section that is rotated, shifted, and asymmetric.'''
    return ShapeParameters(
        majorDiameter=22.0,
        minorDiameter=18.0,
        notchDepth=1.0,
        notchWidth=4.0,
        notchLocation=np.pi + 0.1,
        rotation=0.3,
        xShift=2.0,
        yShift=-1.0,
        xAsymAmplitude=0.3,
        xAsymPhase=0.5,
        yAsymAmplitude=-0.2,
        yAsymPhase=1.2,
    )
