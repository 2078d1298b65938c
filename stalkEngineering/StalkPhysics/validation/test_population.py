# -- Population Store Tests -- #

'''
Tests for the compound-key population store, its persistence, and the
synthetic population builder.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import numpy as np
import pytest

from stalkEngineering.StalkPhysics import constants as const
from stalkEngineering.StalkPhysics.errors import EmptyPopulationError, MissingSampleError
from stalkEngineering.StalkPhysics.geometry.boundary import BoundaryCurve
from stalkEngineering.StalkPhysics.geometry.parameters import ShapeParameters
from stalkEngineering.StalkPhysics.geometry.synthesizer import SynthesisRanges
from stalkEngineering.StalkPhysics.population.builder import PopulationBuilder, averageRindThickness
from stalkEngineering.StalkPhysics.population.store import MISSING_ROW, PopulationStore


@pytest.fixture(scope='module')
def smallStore() -> PopulationStore:
    '''Two slices with stalks 1-3 each, built from fixed shapes.'''
    builder = PopulationBuilder()
    samples = []
    for slicePosition in (10.0, -10.0):
        for stalkIndex in (3, 1, 2):
            params = ShapeParameters(
                majorDiameter=20.0 + stalkIndex,
                minorDiameter=17.0 + 0.5 * stalkIndex,
                notchDepth=0.4 + 0.1 * stalkIndex,
                notchWidth=3.0 + stalkIndex,
            )
            samples.append(builder.buildSample(slicePosition, stalkIndex, params, 1.0))

    store = PopulationStore(samples, buildProblems=[(10.0, 4)])
    store.buildBases()
    return store


def testRowsGroupedBySliceAndSortedByStalk(smallStore):
    assert len(smallStore) == 6
    assert smallStore.slicePositions == [10.0, -10.0]
    assert smallStore.stalkIndices(10.0) == [1, 2, 3]

    assert smallStore.rowIndex(10.0, 1) == 0
    assert smallStore.rowIndex(10.0, 3) == 2
    assert smallStore.rowIndex(-10.0, 1) == 3
    assert smallStore.row(4).key == (-10.0, 2)


def testMissingPairsResolveToSentinel(smallStore):
    assert smallStore.rowIndex(10.0, 981) == MISSING_ROW
    assert smallStore.rowIndex(99.0, 1) == MISSING_ROW
    assert not smallStore.has(10.0, 981)
    assert smallStore.stalkIndices(99.0) == []


def testGetMissingRaises(smallStore):
    with pytest.raises(MissingSampleError):
        smallStore.get(10.0, 981)
    with pytest.raises(KeyError):
        smallStore.coefficients(99.0, 1, 'exterior')


def testDuplicateSampleRaises(smallStore):
    with pytest.raises(ValueError):
        PopulationStore([smallStore.row(0), smallStore.row(0)])


def testChannelsAndBases(smallStore):
    sample = smallStore.get(10.0, 2)
    residual = sample.exteriorEllipse.radius(sample.exterior.theta) - sample.exterior.radius

    np.testing.assert_allclose(sample.channel('exterior'), residual)
    np.testing.assert_allclose(sample.channel('x'), sample.exterior.x)
    assert set(smallStore.bases) == {'exterior', 'interior', 'x', 'y'}
    assert smallStore.basis('exterior').nComponents == 5
    assert smallStore.coefficients(10.0, 2, 'exterior').shape == (5,)

    with pytest.raises(ValueError):
        sample.channel('pith')


def testUnbuiltBasisRaises(smallStore):
    store = PopulationStore(list(smallStore))
    with pytest.raises(KeyError):
        store.basis('exterior')


def testSaveLoadRoundTrip(smallStore, tmp_path):
    path = tmp_path / 'population.npz'
    smallStore.save(str(path))
    loaded = PopulationStore.load(str(path))

    assert len(loaded) == len(smallStore)
    assert loaded.slicePositions == smallStore.slicePositions
    assert loaded.rowIndex(-10.0, 3) == smallStore.rowIndex(-10.0, 3)
    assert loaded.buildProblems == [(10.0, 4)]

    saved, restored = smallStore.get(-10.0, 2), loaded.get(-10.0, 2)
    np.testing.assert_array_equal(restored.exterior.radius, saved.exterior.radius)
    np.testing.assert_array_equal(restored.interior.radius, saved.interior.radius)
    assert restored.exteriorEllipse == saved.exteriorEllipse
    assert restored.rindThickness == saved.rindThickness
    assert restored.params == saved.params

    np.testing.assert_array_equal(loaded.basis('exterior').coefficients, smallStore.basis('exterior').coefficients)
    np.testing.assert_array_equal(loaded.basis('y').components, smallStore.basis('y').components)


def testPrintSummary(smallStore, capsys):
    smallStore.printSummary()
    out = capsys.readouterr().out
    assert 'POPULATION STORE SUMMARY' in out
    assert 'Build problems:   1' in out


#--------------------------------------------------------------------#
# -- Builder -- #
#--------------------------------------------------------------------#

def testAverageRindThicknessOfConcentricCircles():
    exterior = BoundaryCurve.fromRadius(np.full(360, 10.0))
    interior = BoundaryCurve.fromRadius(np.full(360, 9.0))
    assert averageRindThickness(exterior, interior) == pytest.approx(1.0, abs=1e-3)


def testBuiltSampleKeepsMillimeters(smallStore):
    sample = smallStore.get(10.0, 1)

    assert sample.exteriorEllipse.majorDiameter == pytest.approx(21.0, rel=0.05)
    assert sample.rindThickness == pytest.approx(1.0, rel=0.02)
    assert np.all(sample.interior.radius < sample.exterior.radius)


def testBuilderRecordsFailedSamples():
    builder = PopulationBuilder(ranges=SynthesisRanges(rindThickness=(30.0, 30.0)))
    store = builder.synthesize(slicePositions=(0.0,), stalksPerSlice=3, seed=1)

    assert len(store) == 0
    assert store.buildProblems == [(0.0, 1), (0.0, 2), (0.0, 3)]
    assert store.bases == {}


def testBuilderIsSeeded():
    first = PopulationBuilder().synthesize(stalksPerSlice=3, seed=2, buildBases=False)
    second = PopulationBuilder().synthesize(stalksPerSlice=3, seed=2, buildBases=False)

    for a, b in zip(first, second):
        assert a.params == b.params
        np.testing.assert_array_equal(a.exterior.radius, b.exterior.radius)


def testNoisyPopulationBuilds():
    store = PopulationBuilder(noiseAmplitude=const.defaultNoiseAmplitude).synthesize((0.0,), 20, seed=7)

    assert len(store) + len(store.buildProblems) == 20
    assert len(store) >= 18
    assert {'exterior', 'interior'} <= set(store.bases)
    for sample in store:
        assert np.all(sample.interior.radius < sample.exterior.radius)


def testRequireBasesReportsBuildProblems():
    failed = PopulationBuilder(ranges=SynthesisRanges(rindThickness=(30.0, 30.0))).synthesize(stalksPerSlice=2, seed=1)
    with pytest.raises(EmptyPopulationError) as info:
        failed.requireBases()
    assert info.value.buildProblems == [(0.0, 1), (0.0, 2)]
    assert '2 pairs failed to build' in str(info.value)

    unbuilt = PopulationBuilder().synthesize(stalksPerSlice=3, seed=2, buildBases=False)
    with pytest.raises(EmptyPopulationError):
        unbuilt.requireBases(('exterior',))
