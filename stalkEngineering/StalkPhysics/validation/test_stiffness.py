# -- Stiffness Error Study Tests -- #

'''
End-to-end tests of the torsional stiffness error study on a synthetic
population: percentile table layout, accuracy gain from added components,
and problem-pair bookkeeping.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import json

import numpy as np
import pytest
from scipy.stats import kendalltau

from stalkEngineering.StalkPhysics.errors import EmptyPopulationError
from stalkEngineering.StalkPhysics.mechanics.stiffness import StiffnessStudy, evaluateSample, percentError
from stalkEngineering.StalkPhysics.population.store import PopulationStore
from stalkEngineering.StalkPhysics.reconstruction.reconstructor import EllipseResidualReconstructor
from stalkEngineering.StalkPhysics.runner import runStudy


@pytest.fixture(scope='module')
def summary(population):
    # Fine rings keep the integration error well below the level-to-level differences
    return StiffnessStudy(population, nComponents=3, modulusRatio=20.0, dr=0.02, showProgress=False).run()


def hazenPercentile(values: np.ndarray, percentile: float) -> float:
    '''Sorted sample i (1-based) sits at percentile 100 * (i - 0.5) / n.'''
    ordered = np.sort(values)
    position = np.clip(len(ordered) * percentile / 100.0 + 0.5, 1.0, len(ordered))
    lower = int(np.floor(position))
    upper = min(lower + 1, len(ordered))
    return float(ordered[lower - 1] + (position - lower) * (ordered[upper - 1] - ordered[lower - 1]))


def testPercentError():
    assert percentError(110.0, 100.0) == pytest.approx(10.0)
    assert percentError(95.0, 100.0) == pytest.approx(-5.0)


def testPopulationBuiltCompletely(population):
    assert len(population) + len(population.buildProblems) == 50
    assert len(population) >= 45


def testSummaryTableLayout(summary, population):
    assert summary.table.shape == (4, 5)
    assert summary.nLevels == 4
    assert summary.percentiles == (5.0, 25.0, 50.0, 75.0, 95.0)
    assert summary.sampleCounts == {0.0: len(population)}
    assert summary.problems == ()

    # Percentiles ascend along each row
    assert np.all(np.diff(summary.table, axis=1) >= -1e-12)


def testMedianErrorMagnitudeFallsWithEachComponent(summary):
    magnitude = summary.medianAbsoluteError

    assert magnitude.shape == (4,)
    assert np.all(np.diff(magnitude) < 0.0)
    assert summary.meanAbsoluteError[0] > summary.meanAbsoluteError[3]


def testPercentilesUseMidpointPlotting(population):
    study = StiffnessStudy(population, nComponents=1, showProgress=False)
    result = study.run()
    errors = np.vstack([sample.errors for sample in study.results])

    for level in range(2):
        for column, percentile in enumerate(result.percentiles):
            assert result.table[level, column] == pytest.approx(hazenPercentile(errors[:, level], percentile))
        assert result.medianAbsoluteError[level] == pytest.approx(np.median(np.abs(errors[:, level])))


def testMissingStalkIsReportedNotFatal(population):
    study = StiffnessStudy(population, nComponents=2, showProgress=False)
    stalks = population.stalkIndices(0.0)[:5] + [981]

    result = study.run(stalkIndices=stalks)

    assert (0.0, 981) in result.problems
    assert result.sampleCounts[0.0] == 5
    assert len(study.results) == 5
    assert result.table.shape == (3, 5)


def testEmptySliceIsSkipped(population):
    study = StiffnessStudy(population, nComponents=1, showProgress=False)
    result = study.run(slicePositions=[0.0, 99.0])

    assert list(result.perSlice) == [0.0]
    np.testing.assert_allclose(result.table, result.perSlice[0.0])


def testFullRankReconstructionHasNoError(population):
    reconstructor = EllipseResidualReconstructor(population)
    stalkIndex = population.row(0).stalkIndex

    result = evaluateSample(reconstructor, 0.0, stalkIndex, reconstructor.maxComponents)

    assert result.errors.shape == (reconstructor.maxComponents + 1,)
    assert abs(result.errors[-1]) < 1e-6
    assert result.approximations[0].label == 'ellipse'
    assert result.trueMoments.label == 'true'


def testNormalizedInteriorPolicyRuns(population):
    study = StiffnessStudy(population, nComponents=3, interiorPolicy='normalized', showProgress=False)
    result = study.run()

    assert result.table.shape == (4, 5)
    assert sum(result.sampleCounts.values()) + len(result.problems) == len(population)


@pytest.mark.parametrize('nComponents', [-1, 500])
def testComponentCountOutOfRangeRaises(population, nComponents):
    with pytest.raises(ValueError):
        StiffnessStudy(population, nComponents=nComponents)


def testUnknownInteriorPolicyRaises(population):
    with pytest.raises(ValueError):
        StiffnessStudy(population, interiorPolicy='offset')


def testSummaryExports(summary, capsys):
    data = json.loads(json.dumps(summary.toDict()))
    assert data['modulusRatio'] == 20.0
    assert len(data['table']) == 4

    summary.printTable()
    assert 'STIFFNESS ERROR PERCENTILES' in capsys.readouterr().out


def testErrorTrendsDownTowardFullRank(population):
    study = StiffnessStudy(population, showProgress=False)
    fullRank = StiffnessStudy(population, nComponents=study.reconstructor.maxComponents, showProgress=False).run()

    mae = fullRank.meanAbsoluteError
    assert mae[-1] < 1e-6
    assert np.mean(mae[:5]) > np.mean(mae[-5:])

    # Rank correlation over every level, not just the ends
    tau, pValue = kendalltau(np.arange(len(mae)), mae)
    assert tau < -0.5
    assert pValue < 0.01

    # No block of ten consecutive levels averages above the block before it
    nBlocks = len(mae) // 10
    blockMeans = mae[:10 * nBlocks].reshape(nBlocks, 10).mean(axis=1)
    assert np.all(np.diff(blockMeans) <= 0.0)


def testStudyOfEmptyPopulationReportsBuildProblems():
    empty = PopulationStore([], buildProblems=[(0.0, 1), (0.0, 2)])

    with pytest.raises(EmptyPopulationError) as info:
        StiffnessStudy(empty, showProgress=False)
    assert info.value.buildProblems == [(0.0, 1), (0.0, 2)]

    with pytest.raises(EmptyPopulationError):
        runStudy(empty, showDashboard=False)


def testStudyOfStoreWithoutBasesRaises(population):
    unbuilt = PopulationStore(list(population))
    with pytest.raises(EmptyPopulationError):
        StiffnessStudy(unbuilt, showProgress=False)
