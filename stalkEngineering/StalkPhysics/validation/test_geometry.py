# -- Geometry Module Tests -- #

'''
Tests for shape parameters, boundary synthesis, polar boundary curves,
ellipse fitting, notch location, and the planar utilities.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import math

import numpy as np
import pytest

from stalkEngineering.StalkPhysics.errors import DegenerateGeometryError
from stalkEngineering.StalkPhysics.geometry.boundary import BoundaryCurve, isUniformTheta, uniformTheta
from stalkEngineering.StalkPhysics.geometry.ellipse import ellipseRadius, fitEllipse
from stalkEngineering.StalkPhysics.geometry.notch import locateNotch, locateNotchIndex
from stalkEngineering.StalkPhysics.geometry.parameters import ParameterBounds, ShapeParameters
from stalkEngineering.StalkPhysics.geometry.synthesizer import BoundarySynthesizer, SynthesisRanges, notchProfile
from stalkEngineering.StalkPhysics.registration.registrar import ShapeRegistrar
from stalkEngineering.utilsSE import parallelOffset, polygonArea, polygonCentroid, stripClosingPoint


#--------------------------------------------------------------------#
# -- Shape Parameters -- #
#--------------------------------------------------------------------#

def testParameterVectorOrder():
    params = ShapeParameters.typicalStalk()
    vector = params.toVector()
    assert len(vector) == 12
    assert vector[0] == params.majorDiameter
    assert ShapeParameters.fromVector(vector) == params


def testFromVectorRejectsWrongLength():
    with pytest.raises(ValueError):
        ShapeParameters.fromVector([1.0, 2.0, 3.0])


def testParameterJsonRoundTrip(tmp_path, skewedParams):
    path = tmp_path / 'shape.json'
    skewedParams.toJson(str(path))
    assert ShapeParameters.fromJson(str(path)) == skewedParams


def testBoundsRejectInvertedLimits():
    with pytest.raises(ValueError):
        ParameterBounds(lower=np.array([2.0]), upper=np.array([1.0]))


#--------------------------------------------------------------------#
# -- Boundary Synthesis -- #
#--------------------------------------------------------------------#

def testSynthesizedBoundaryIsClosedWithoutRepeat(synthesizer):
    section = synthesizer.synthesize(ShapeParameters.typicalStalk())
    assert section.nPoints == 360

    points = section.closedXY()
    assert points.shape == (361, 2)
    np.testing.assert_array_equal(points[0], points[-1])
    assert not np.allclose(points[0], points[-2])


def testNotchPointsInwardAtItsLocation(synthesizer):
    params = ShapeParameters.typicalStalk()
    section = synthesizer.synthesize(params)

    # theta = pi is sample 180; the notch pushes the -x extreme toward the center
    assert section.x[180] == pytest.approx(-params.semiMajor + params.notchDepth)
    assert section.y[180] == pytest.approx(0.0, abs=1e-12)


def testMinorDiameterClampedToMajor(synthesizer):
    section = synthesizer.synthesize(ShapeParameters(majorDiameter=18.0, minorDiameter=22.0))
    assert section.params.minorDiameter == section.params.majorDiameter == 18.0


def testParametersClampedToBounds(synthesizer):
    section = synthesizer.synthesize(ShapeParameters(majorDiameter=100.0, notchDepth=-1.0))
    assert section.params.majorDiameter == 40.0
    assert section.params.notchDepth == 0.0


@pytest.mark.parametrize('width', [0.0, 0.01, 0.05])
def testNotchWidthAtFloorRaises(synthesizer, width):
    with pytest.raises(DegenerateGeometryError):
        synthesizer.synthesize(ShapeParameters(notchWidth=width))


def testNarrowNotchProfileIsFinite():
    theta = uniformTheta(360)
    profile = notchProfile(theta, 1.0, 0.06, math.pi)
    assert np.all(np.isfinite(profile))
    assert profile.max() == pytest.approx(1.0)
    assert profile.min() >= 0.0


def testNoiseIsReproducibleAndBounded():
    params = ShapeParameters.typicalStalk()
    noisy = BoundarySynthesizer(noiseAmplitude=0.0025)
    clean = BoundarySynthesizer()

    first = noisy.synthesize(params, np.random.default_rng(1))
    second = noisy.synthesize(params, np.random.default_rng(1))
    reference = clean.synthesize(params)

    np.testing.assert_array_equal(first.x, second.x)
    assert np.max(np.abs(first.x - reference.x)) <= 0.0025 * params.semiMajor + 1e-12
    assert np.max(np.abs(first.y - reference.y)) <= 0.0025 * params.semiMinor + 1e-12
    assert not np.allclose(first.x, reference.x)


def testGeneratePopulationIsSeeded(synthesizer):
    first = synthesizer.generatePopulation(5, seed=3)
    second = synthesizer.generatePopulation(5, seed=3)

    assert len(first) == 5
    for a, b in zip(first, second):
        assert a.params == b.params
        np.testing.assert_array_equal(a.x, b.x)
    for section in first:
        assert section.params.minorDiameter <= section.params.majorDiameter


def testSampledParametersStayInRanges():
    ranges = SynthesisRanges()
    rng = np.random.default_rng(0)
    for _ in range(20):
        params = ranges.sampleParameters(rng)
        assert 15.0 <= params.majorDiameter <= 25.0
        assert 0.5 <= params.notchDepth <= 2.0
        assert 2.0 <= params.notchWidth <= 9.0
        assert abs(params.notchLocation - math.pi) <= 0.2
        assert params.rotation == 0.0


def testInteriorSitsInsideExterior(synthesizer):
    exterior = synthesizer.synthesize(ShapeParameters.typicalStalk())
    interior = synthesizer.synthesizeInterior(exterior, 1.0)

    assert interior.nPoints == exterior.nPoints
    assert 0.0 < polygonArea(interior.x, interior.y) < polygonArea(exterior.x, exterior.y)


def testInteriorCollapseRaises(synthesizer):
    exterior = synthesizer.synthesize(ShapeParameters.typicalStalk())
    with pytest.raises(DegenerateGeometryError):
        synthesizer.synthesizeInterior(exterior, 30.0)
    with pytest.raises(DegenerateGeometryError):
        synthesizer.synthesizeInterior(exterior, 0.0)


#--------------------------------------------------------------------#
# -- Boundary Curves -- #
#--------------------------------------------------------------------#

def testUniformThetaHasNoEndpoint():
    theta = uniformTheta(8)
    assert theta[0] == 0.0
    assert theta[-1] == pytest.approx(2.0 * math.pi * 7 / 8)
    assert isUniformTheta(theta)
    assert not isUniformTheta(np.linspace(0.0, 2.0 * math.pi, 8))


def testBoundaryCurveRejectsNonUniformAngles():
    with pytest.raises(ValueError):
        BoundaryCurve(theta=np.linspace(0.0, 2.0 * math.pi, 10), radius=np.ones(10))


def testBoundaryCurveRejectsNonFiniteRadius():
    radius = np.ones(10)
    radius[3] = np.nan
    with pytest.raises(DegenerateGeometryError):
        BoundaryCurve.fromRadius(radius)


def testReferencePointsOfCircle():
    curve = BoundaryCurve.fromRadius(np.full(360, 10.0))
    (x90, y90), (x270, y270) = curve.referencePoints()

    assert x90 == pytest.approx(0.0, abs=1e-9)
    assert y90 == pytest.approx(10.0)
    assert x270 == pytest.approx(0.0, abs=1e-9)
    assert y270 == pytest.approx(-10.0)


def testRequirePositiveRaises():
    radius = np.full(12, 5.0)
    radius[4] = 0.0
    with pytest.raises(DegenerateGeometryError):
        BoundaryCurve.fromRadius(radius).requirePositive()


#--------------------------------------------------------------------#
# -- Ellipse -- #
#--------------------------------------------------------------------#

def testEllipseRadiusOnAxes():
    radius = ellipseRadius(np.array([0.0, math.pi / 2.0, math.pi]), 20.0, 10.0)
    np.testing.assert_allclose(radius, [10.0, 5.0, 10.0])


def testFitEllipseRecoversDiameters():
    theta = uniformTheta(360)
    fit = fitEllipse(theta, ellipseRadius(theta, 22.0, 18.0))

    assert fit.majorDiameter == pytest.approx(22.0, rel=1e-6)
    assert fit.minorDiameter == pytest.approx(18.0, rel=1e-6)
    assert fit.rmsResidual < 1e-6


def testFitEllipseRejectsNonPositiveRadius():
    theta = uniformTheta(36)
    radius = np.full(36, 5.0)
    radius[0] = -1.0
    with pytest.raises(DegenerateGeometryError):
        fitEllipse(theta, radius)


#--------------------------------------------------------------------#
# -- Notch Location -- #
#--------------------------------------------------------------------#

def testLocateNotchOnEllipse():
    theta = uniformTheta(360)
    radius = ellipseRadius(theta, 22.0, 18.0) - notchProfile(theta, 1.0, 3.0, theta[200])

    assert locateNotchIndex(radius) == 200
    assert locateNotch(theta, radius) == pytest.approx(theta[200], abs=math.pi / 360.0)


#--------------------------------------------------------------------#
# -- Planar Utilities -- #
#--------------------------------------------------------------------#

def testPolygonAreaAndCentroid():
    x = np.array([1.0, 3.0, 3.0, 1.0])
    y = np.array([2.0, 2.0, 4.0, 4.0])

    assert polygonArea(x, y) == pytest.approx(4.0)
    assert polygonArea(x[::-1], y[::-1]) == pytest.approx(-4.0)
    assert polygonCentroid(x, y) == pytest.approx((2.0, 3.0))


def testParallelOffsetOfCircleMovesInward():
    theta = uniformTheta(360)
    xInner, yInner = parallelOffset(10.0 * np.cos(theta), 10.0 * np.sin(theta), 1.0)
    np.testing.assert_allclose(np.hypot(xInner, yInner), 9.0, rtol=1e-9)


def testStripClosingPoint():
    x, y = stripClosingPoint([0.0, 1.0, 0.0, 0.0], [0.0, 0.0, 1.0, 0.0])
    assert len(x) == len(y) == 3

    x, y = stripClosingPoint([0.0, 1.0, 0.0], [0.0, 0.0, 1.0])
    assert len(x) == 3


def testNoisyInteriorIsOffsetFromCleanShape():
    params = ShapeParameters(majorDiameter=20.0, minorDiameter=16.0, notchDepth=1.5, notchWidth=3.0, notchLocation=math.pi)
    noisy = BoundarySynthesizer(noiseAmplitude=0.0025)
    clean = BoundarySynthesizer()

    exterior = noisy.synthesize(params, np.random.default_rng(4))
    interior = noisy.synthesizeInterior(exterior, 1.4)
    cleanInterior = clean.synthesizeInterior(clean.synthesize(params), 1.4)

    # Unplaced section, so the interior differs from the clean offset by the exterior's noise alone
    np.testing.assert_allclose(interior.x - cleanInterior.x, exterior.noise[:, 0], atol=1e-12)
    np.testing.assert_allclose(interior.y - cleanInterior.y, exterior.noise[:, 1], atol=1e-12)

    registrar = ShapeRegistrar(360, normalizeScale=False)
    registration = registrar.register(exterior.x, exterior.y)
    pith = registrar.applyTransform(registration.transform, interior.x, interior.y)
    assert np.all(pith.radius < registration.curve.radius)


def testPlacedNoisyInteriorFollowsExteriorPlacement(skewedParams):
    noisy = BoundarySynthesizer(noiseAmplitude=0.0025)
    exterior = noisy.synthesize(skewedParams, np.random.default_rng(5))
    interior = noisy.synthesizeInterior(exterior, 1.0)

    assert 0.0 < polygonArea(interior.x, interior.y) < polygonArea(exterior.x, exterior.y)
    np.testing.assert_allclose(polygonCentroid(interior.x, interior.y), polygonCentroid(exterior.x, exterior.y), atol=0.5)
