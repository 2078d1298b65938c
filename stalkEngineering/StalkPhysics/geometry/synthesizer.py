# -- Boundary Synthesizer -- #

'''
Generates closed stalk cross-section boundaries from ShapeParameters.

The model is an ellipse with sinusoidal asymmetry on each axis and a
sech^2 notch. The notch displacement is built pointing along +x and then
rotated by (notchLocation - pi) so the dent sits at the configured angle.
shapeModel() is the single model function shared with the curve fitter.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from stalkEngineering.StalkPhysics import constants as const
from stalkEngineering.StalkPhysics.errors import DegenerateGeometryError
from stalkEngineering.StalkPhysics.geometry.boundary import uniformTheta
from stalkEngineering.StalkPhysics.geometry.parameters import ShapeParameters, ParameterBounds
from stalkEngineering.utilsSE import closeCurve, parallelOffset, polygonArea, rotate2D


######################################################################
# -- Shape Model -- #
######################################################################

def notchProfile(theta: np.ndarray, depth: float, width: float, location: float) -> np.ndarray:
    '''
    Inward notch displacement depth / cosh^2((10 / width) * (theta - location)).

    Parameters:
    -----------
    theta : np.ndarray
        Sample angles [rad]
    depth : float
        Peak displacement [mm]
    width : float
        Width control (larger is wider)
    location : float
        Notch center [rad]

    Returns:
    --------
    np.ndarray : Notch displacement at each angle [mm]
    '''
    # sech^2(u) = 4 e^(-2|u|) / (1 + e^(-2|u|))^2, finite for any u
    decay = np.exp(-2.0 * np.abs((10.0 / width) * (np.asarray(theta, dtype=float) - location)))
    return depth * 4.0 * decay / (1.0 + decay)**2


def shapeModel(params: ShapeParameters, theta: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    '''
    Noise-free boundary points for a parameter set.

    Parameters:
    -----------
    params : ShapeParameters
        Shape definition
    theta : np.ndarray
        Parametric angles [rad]

    Returns:
    --------
    tuple : (x, y) boundary coordinates [mm]
    '''
    x, y = _baseShape(params, theta)
    return _place(params, x, y)


def _baseShape(params: ShapeParameters, theta: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    '''Ellipse + asymmetry + notch, before rotation and translation.'''
    x = params.semiMajor * np.cos(theta) + params.xAsymAmplitude * np.sin(theta - params.xAsymPhase)
    y = params.semiMinor * np.sin(theta) + params.yAsymAmplitude * np.sin(theta - params.yAsymPhase)

    notch = notchProfile(theta, params.notchDepth, params.notchWidth, params.notchLocation)
    notchX, notchY = rotate2D(notch, np.zeros_like(notch), params.notchRotation)

    return x + notchX, y + notchY


def _place(params: ShapeParameters, x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    '''Apply the rigid rotation and translation.'''
    x, y = rotate2D(x, y, params.rotation)
    return x + params.xShift, y + params.yShift


######################################################################
# -- Synthesized Section -- #
######################################################################

@dataclass
class SyntheticSection:
    '''
    Synthesized boundary in Cartesian form.

    Points are ordered counter-clockwise along the parametric angle and
    the closing point is not stored; closedXY() repeats it.

    base holds the noise-free shape before rotation and translation and
    noise the per-point perturbation added to it, both as (N, 2) arrays.
    Sections built directly from coordinates leave them unset.
    '''

    params: ShapeParameters
    x: np.ndarray
    y: np.ndarray
    base: np.ndarray | None = None
    noise: np.ndarray | None = None

    @property
    def nPoints(self) -> int:
        '''Number of boundary points N.'''
        return len(self.x)

    def closedXY(self) -> np.ndarray:
        '''(N + 1, 2) points with the first point repeated at the end.'''
        return closeCurve(self.x, self.y)


######################################################################
# -- Random Population Ranges -- #
######################################################################

@dataclass
class SynthesisRanges:
    '''
    Uniform sampling ranges for random populations.
    Each field is a (low, high) pair; equal values fix the parameter.
    '''

    majorDiameter: tuple[float, float] = (15.0, 25.0)
    minorDiameter: tuple[float, float] = (15.0, 20.0)

    # Notch depth is 5-25% of the half diameter; widths below 2 fold the
    # inward rind offset at the notch shoulders
    notchDepth: tuple[float, float] = (0.5, 2.0)
    notchWidth: tuple[float, float] = (2.0, 9.0)
    notchLocation: tuple[float, float] = (np.pi - 0.2, np.pi + 0.2)

    # Sections are generated without placement unless requested
    rotation: tuple[float, float] = (0.0, 0.0)
    xShift: tuple[float, float] = (0.0, 0.0)
    yShift: tuple[float, float] = (0.0, 0.0)

    asymmetryAmplitude: tuple[float, float] = (-0.05, 0.05)
    asymmetryPhase: tuple[float, float] = (-np.pi, np.pi)

    # Rind thickness used to offset the interior boundary [mm]
    rindThickness: tuple[float, float] = (0.6, 1.4)

    def sampleParameters(self, rng: np.random.Generator) -> ShapeParameters:
        '''
        Draw one parameter set.

        Parameters:
        -----------
        rng : np.random.Generator
            Seeded random generator

        Returns:
        --------
        ShapeParameters : Random shape
        '''
        def draw(bounds: tuple[float, float]) -> float:
            return float(rng.uniform(bounds[0], bounds[1]))

        return ShapeParameters(
            majorDiameter=draw(self.majorDiameter),
            minorDiameter=draw(self.minorDiameter),
            notchDepth=draw(self.notchDepth),
            notchWidth=draw(self.notchWidth),
            notchLocation=draw(self.notchLocation),
            rotation=draw(self.rotation),
            xShift=draw(self.xShift),
            yShift=draw(self.yShift),
            xAsymAmplitude=draw(self.asymmetryAmplitude),
            xAsymPhase=draw(self.asymmetryPhase),
            yAsymAmplitude=draw(self.asymmetryAmplitude),
            yAsymPhase=draw(self.asymmetryPhase),
        )

    def sampleRindThickness(self, rng: np.random.Generator) -> float:
        '''Draw one rind thickness [mm].'''
        return float(rng.uniform(self.rindThickness[0], self.rindThickness[1]))


######################################################################
# -- Synthesizer -- #
######################################################################

class BoundarySynthesizer:
    '''
    Builds exterior and interior section boundaries from shape parameters.
    '''

    def __init__(
        self,
        nPoints: int = const.defaultSampleCount,
        bounds: ParameterBounds | None = None,
        noiseAmplitude: float = 0.0,
    ) -> None:
        '''
        Parameters:
        -----------
        nPoints : int
            Samples per boundary N
        bounds : ParameterBounds | None
            Generation bounds; parameters are clamped into them (synthetic preset by default)
        noiseAmplitude : float
            Uniform noise amplitude relative to the half diameters (0 disables noise)
        '''
        self.theta = uniformTheta(nPoints)
        self.bounds = bounds if bounds is not None else ParameterBounds.synthetic()
        self.noiseAmplitude = noiseAmplitude

    @property
    def nPoints(self) -> int:
        '''Samples per boundary.'''
        return len(self.theta)

    def validate(self, params: ShapeParameters) -> ShapeParameters:
        '''
        Clamp parameters to the generation bounds and reject degenerate shapes.

        Parameters:
        -----------
        params : ShapeParameters
            Requested shape

        Returns:
        --------
        ShapeParameters : Clamped shape with minorDiameter <= majorDiameter
        '''
        clamped = params.clampedTo(self.bounds)

        if clamped.notchWidth <= const.notchWidthFloor:
            raise DegenerateGeometryError(
                f'Notch width {clamped.notchWidth:.4g} is at or below the floor {const.notchWidthFloor}'
            )
        if clamped.minorDiameter <= 0.0:
            raise DegenerateGeometryError('Section diameters must be positive')

        return clamped

    def synthesize(self, params: ShapeParameters, rng: np.random.Generator | None = None) -> SyntheticSection:
        '''
        Synthesize the exterior boundary.

        Parameters:
        -----------
        params : ShapeParameters
            Shape definition (clamped before use)
        rng : np.random.Generator | None
            Noise source; required for reproducible noise

        Returns:
        --------
        SyntheticSection : Boundary at the synthesizer's N angles
        '''
        params = self.validate(params)
        baseX, baseY = _baseShape(params, self.theta)

        noise = np.zeros((self.nPoints, 2))
        if self.noiseAmplitude > 0.0:
            if rng is None:
                rng = np.random.default_rng()
            noise[:, 0] = params.semiMajor * rng.uniform(-self.noiseAmplitude, self.noiseAmplitude, self.nPoints)
            noise[:, 1] = params.semiMinor * rng.uniform(-self.noiseAmplitude, self.noiseAmplitude, self.nPoints)

        x, y = _place(params, baseX + noise[:, 0], baseY + noise[:, 1])
        return SyntheticSection(params=params, x=x, y=y, base=np.column_stack([baseX, baseY]), noise=noise)

    def synthesizeInterior(self, section: SyntheticSection, rindThickness: float) -> SyntheticSection:
        '''
        Interior (pith) boundary as an inward normal offset of the exterior.

        Synthesized sections are offset from their noise-free shape; the
        exterior's noise and placement are then applied to the result, so
        point noise never folds the offset curve.

        Parameters:
        -----------
        section : SyntheticSection
            Exterior boundary
        rindThickness : float
            Offset distance [mm]

        Returns:
        --------
        SyntheticSection : Interior boundary with the exterior's parameters
        '''
        if rindThickness <= 0.0:
            raise DegenerateGeometryError(f'Rind thickness must be positive, got {rindThickness}')

        if section.base is None:
            xOuter, yOuter = section.x, section.y
        else:
            xOuter, yOuter = section.base[:, 0], section.base[:, 1]

        # parallelOffset moves a counter-clockwise curve inward for positive offsets
        orientation = 1.0 if polygonArea(xOuter, yOuter) > 0.0 else -1.0
        xInner, yInner = parallelOffset(xOuter, yOuter, orientation * rindThickness)

        if section.base is not None:
            noise = section.noise if section.noise is not None else np.zeros_like(section.base)
            xInner, yInner = _place(section.params, xInner + noise[:, 0], yInner + noise[:, 1])

        outerArea = orientation * polygonArea(section.x, section.y)
        innerArea = orientation * polygonArea(xInner, yInner)
        if not (np.all(np.isfinite(xInner)) and np.all(np.isfinite(yInner))) or not 0.0 < innerArea < outerArea:
            raise DegenerateGeometryError(f'Rind thickness {rindThickness:.3f} mm collapses the interior')

        return SyntheticSection(params=section.params, x=xInner, y=yInner)

    def generatePopulation(
        self,
        nSections: int,
        ranges: SynthesisRanges | None = None,
        seed: int | None = None,
    ) -> list[SyntheticSection]:
        '''
        Random exterior boundaries drawn from the synthesis ranges.

        Parameters:
        -----------
        nSections : int
            Number of sections
        ranges : SynthesisRanges | None
            Uniform parameter ranges (defaults when None)
        seed : int | None
            Seed for numpy.random.default_rng

        Returns:
        --------
        list[SyntheticSection] : Synthesized sections in draw order
        '''
        ranges = ranges if ranges is not None else SynthesisRanges()
        rng = np.random.default_rng(seed)
        return [self.synthesize(ranges.sampleParameters(rng), rng) for _ in range(nSections)]
