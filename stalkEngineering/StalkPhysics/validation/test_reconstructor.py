# -- Reconstruction Tests -- #

'''
Tests for ellipse + residual reconstruction levels, the normalized
interior offset, and one-parameter sensitivity cases.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import numpy as np
import pytest

from stalkEngineering.StalkPhysics.geometry.boundary import BoundaryCurve
from stalkEngineering.StalkPhysics.mechanics.materials import MaterialSampler
from stalkEngineering.StalkPhysics.reconstruction.reconstructor import (
    EllipseResidualReconstructor,
    baseCase,
    caseBoundaries,
    normalizedInterior,
    perturbCase,
    perturbComponent,
    sensitivityCases,
)


@pytest.fixture
def firstSample(population):
    return population.row(0)


def testLevelZeroIsTheEllipse(population, firstSample):
    reconstructor = EllipseResidualReconstructor(population)
    reconstruction = reconstructor.reconstruct(firstSample.slicePosition, firstSample.stalkIndex, 0)

    theta = firstSample.exterior.theta
    np.testing.assert_allclose(reconstruction.exterior.radius, firstSample.exteriorEllipse.radius(theta))
    np.testing.assert_allclose(reconstruction.interior.radius, firstSample.interiorEllipse.radius(theta))
    assert reconstruction.label == 'ellipse'


def testFullRankReproducesTrueBoundaries(population, firstSample):
    reconstructor = EllipseResidualReconstructor(population)
    reconstruction = reconstructor.reconstruct(
        firstSample.slicePosition, firstSample.stalkIndex, reconstructor.maxComponents,
    )

    np.testing.assert_allclose(reconstruction.exterior.radius, firstSample.exterior.radius, rtol=1e-9)
    np.testing.assert_allclose(reconstruction.interior.radius, firstSample.interior.radius, rtol=1e-9)


def testEachLevelAddsOneComponent(population, firstSample):
    reconstructor = EllipseResidualReconstructor(population)
    levels = reconstructor.levels(firstSample.slicePosition, firstSample.stalkIndex, 3)

    assert [r.label for r in levels] == ['ellipse', 'pc1', 'pc2', 'pc3']

    basis = population.basis('exterior')
    coefficients = population.coefficients(firstSample.slicePosition, firstSample.stalkIndex, 'exterior')
    for k in (2, 3):
        step = levels[k - 1].exterior.radius - levels[k].exterior.radius
        np.testing.assert_allclose(step, coefficients[k - 1] * basis.components[k - 1], atol=1e-12)


def testFirstLevelAddsMeanResidualAndFirstComponent(population, firstSample):
    reconstructor = EllipseResidualReconstructor(population)
    levels = reconstructor.levels(firstSample.slicePosition, firstSample.stalkIndex, 1)

    basis = population.basis('exterior')
    coefficients = population.coefficients(firstSample.slicePosition, firstSample.stalkIndex, 'exterior')
    step = levels[0].exterior.radius - levels[1].exterior.radius
    np.testing.assert_allclose(step, basis.mean + coefficients[0] * basis.components[0], atol=1e-12)


def testLevelsBeyondRankRaise(population, firstSample):
    reconstructor = EllipseResidualReconstructor(population)
    with pytest.raises(ValueError):
        reconstructor.levels(firstSample.slicePosition, firstSample.stalkIndex, reconstructor.maxComponents + 1)


def testNormalizedInteriorOfCircle():
    exterior = BoundaryCurve.fromRadius(np.full(360, 10.0))
    interior = normalizedInterior(exterior, 1.0)
    np.testing.assert_allclose(interior.radius, 9.0, rtol=1e-9)


def testNormalizedPolicyKeepsRindThickness(population, firstSample):
    reconstructor = EllipseResidualReconstructor(population, interiorPolicy='normalized')
    reconstruction = reconstructor.reconstruct(firstSample.slicePosition, firstSample.stalkIndex, 0)

    gap = reconstruction.exterior.radius - reconstruction.interior.radius
    assert np.all(gap > 0.0)
    assert np.median(gap) == pytest.approx(firstSample.rindThickness, rel=0.05)


#--------------------------------------------------------------------#
# -- Sensitivity Cases -- #
#--------------------------------------------------------------------#

@pytest.fixture
def case(population, firstSample):
    materials = MaterialSampler().sample('avg')
    return baseCase(population, firstSample.slicePosition, firstSample.stalkIndex, 3, materials)


def testBaseCaseCarriesSampleValues(case, firstSample):
    assert case.nComponents == 3
    assert case.majorDiameter == firstSample.exteriorEllipse.majorDiameter
    assert case.rindThickness == firstSample.rindThickness
    assert case.caseNumber == 0


def testPerturbComponentChangesOnlyThatCoefficient(case):
    perturbed = perturbComponent(case, 2, 1.1, caseNumber=7)

    assert perturbed.coefficients[1] == pytest.approx(1.1 * case.coefficients[1])
    assert perturbed.coefficients[0] == case.coefficients[0]
    assert perturbed.coefficients[2] == case.coefficients[2]
    assert perturbed.majorDiameter == case.majorDiameter
    assert perturbed.caseNumber == 7


def testPerturbCaseTargets(case):
    major = perturbCase(case, 'majorDiameter', 1.1)
    rind = perturbCase(case, 'rindModulus', 1.1)

    assert major.majorDiameter == pytest.approx(1.1 * case.majorDiameter)
    assert major.minorDiameter == case.minorDiameter
    assert rind.materials.rindModulus == pytest.approx(1.1 * case.materials.rindModulus)
    assert rind.materials.pithModulus == case.materials.pithModulus

    with pytest.raises(ValueError):
        perturbCase(case, 'notchDepth', 1.1)
    with pytest.raises(ValueError):
        perturbComponent(case, 4, 1.1)


def testSensitivityCaseSet(case):
    cases = sensitivityCases(case, 10.0)

    assert len(cases) == 6 + case.nComponents
    assert [c.caseNumber for c in cases] == list(range(9))
    assert cases[0].description == 'base'
    assert cases[2].minorDiameter == pytest.approx(1.1 * case.minorDiameter)
    assert cases[3].rindThickness == pytest.approx(1.1 * case.rindThickness)
    assert cases[5].materials.pithModulus == pytest.approx(1.1 * case.materials.pithModulus)
    assert cases[8].coefficients[2] == pytest.approx(1.1 * case.coefficients[2])
    np.testing.assert_array_equal(cases[8].coefficients[:2], case.coefficients[:2])


def testCaseBoundariesMatchReconstruction(population, firstSample, case):
    boundaries = caseBoundaries(case, population.basis('exterior'), population.theta)
    reconstruction = EllipseResidualReconstructor(population, interiorPolicy='normalized').reconstruct(
        firstSample.slicePosition, firstSample.stalkIndex, 3,
    )

    np.testing.assert_allclose(boundaries.exterior.radius, reconstruction.exterior.radius)
    np.testing.assert_allclose(boundaries.interior.radius, reconstruction.interior.radius)
