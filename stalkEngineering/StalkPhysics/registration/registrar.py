# -- Shape Registration Module -- #

'''
Brings raw section boundaries into a common frame so they can be compared
point-for-point: uniform angular resampling, centering on the area
centroid, notch alignment at theta = pi, and optional scaling to unit
equivalent radius.

Centering iterates resample-then-recenter to a fixed point. The rotation
is a whole-sample circular shift of the radius signal, so it is exact and
a registered curve registers to itself.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from stalkEngineering.StalkPhysics import constants as const
from stalkEngineering.StalkPhysics.errors import RegistrationError
from stalkEngineering.StalkPhysics.geometry.boundary import BoundaryCurve, uniformTheta
from stalkEngineering.StalkPhysics.geometry.notch import locateNotchIndex
from stalkEngineering.utilsSE import polygonArea, polygonCentroid, rotate2D, stripClosingPoint


#--------------------------------------------------------------------#
# -- Registration Results -- #
#--------------------------------------------------------------------#

@dataclass(frozen=True)
class RigidTransform:
    '''
    Similarity transform taking raw coordinates to the registered frame:
    subtract (xShift, yShift), rotate counter-clockwise by rotation, divide by scale.
    '''
    xShift: float = 0.0
    yShift: float = 0.0
    rotation: float = 0.0
    scale: float = 1.0

    def apply(self, x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        '''Map raw points into the registered frame.'''
        xOut, yOut = rotate2D(np.asarray(x, dtype=float) - self.xShift, np.asarray(y, dtype=float) - self.yShift, self.rotation)
        return xOut / self.scale, yOut / self.scale

    def toDict(self) -> dict:
        '''Convert to dictionary for JSON serialization.'''
        return {
            'xShift': self.xShift,
            'yShift': self.yShift,
            'rotation': self.rotation,
            'scale': self.scale,
        }


@dataclass(frozen=True)
class RegistrationResult:
    '''Registered boundary and the transform that produced it.'''
    curve: BoundaryCurve
    transform: RigidTransform
    iterations: int                 # Centering passes to reach the fixed point
    notchIndex: int                 # Sample index of the notch before alignment


#--------------------------------------------------------------------#
# -- Resampling -- #
#--------------------------------------------------------------------#

def resampleRadius(x: np.ndarray, y: np.ndarray, theta: np.ndarray) -> np.ndarray:
    '''
    Radius of a closed curve at the given angles about the origin.

    The curve must wind once around the origin with strictly increasing
    polar angle (star-shaped); either traversal direction is accepted.

    Parameters:
    -----------
    x, y : np.ndarray
        Curve points without a repeated closing point
    theta : np.ndarray
        Target angles [rad]

    Returns:
    --------
    np.ndarray : Periodic linear interpolation of radius versus angle
    '''
    phi = np.arctan2(y, x)
    radius = np.hypot(x, y)

    if np.any(radius <= 0.0):
        raise RegistrationError('Curve passes through the registration center')

    # Signed angular step between consecutive points, closing edge included
    steps = np.angle(np.exp(1j * (np.roll(phi, -1) - phi)))
    winding = float(np.sum(steps))

    if abs(abs(winding) - 2.0 * math.pi) > 1e-6:
        raise RegistrationError('Curve does not enclose its centroid')
    if winding < 0.0:
        steps = -steps
    if np.any(steps <= 0.0):
        raise RegistrationError('Curve is not star-shaped about its centroid')

    return np.interp(theta, np.mod(phi, 2.0 * math.pi), radius, period=2.0 * math.pi)


#--------------------------------------------------------------------#
# -- Shape Registrar -- #
#--------------------------------------------------------------------#

class ShapeRegistrar:
    '''
    Deterministic, idempotent registration of section boundaries.
    '''

    def __init__(
        self,
        nPoints: int = const.defaultSampleCount,
        normalizeScale: bool = True,
        alignNotch: bool = True,
        tolerance: float = const.registrationTolerance,
        maxIterations: int = const.registrationMaxIterations,
    ) -> None:
        '''
        Parameters:
        -----------
        nPoints : int
            Samples per registered boundary
        normalizeScale : bool
            Scale to unit equivalent radius sqrt(area / pi)
        alignNotch : bool
            Rotate so the notch sits at the sample nearest theta = pi
        tolerance : float
            Centering tolerance relative to the equivalent radius
        maxIterations : int
            Maximum centering passes
        '''
        self.theta = uniformTheta(nPoints)
        self.normalizeScale = normalizeScale
        self.alignNotch = alignNotch
        self.tolerance = tolerance
        self.maxIterations = maxIterations

    @property
    def nPoints(self) -> int:
        '''Samples per registered boundary.'''
        return len(self.theta)

    def register(self, x: np.ndarray, y: np.ndarray) -> RegistrationResult:
        '''
        Register one raw boundary.

        Parameters:
        -----------
        x, y : np.ndarray
            Boundary points in traversal order (a repeated closing point is dropped)

        Returns:
        --------
        RegistrationResult : Registered curve and transform
        '''
        x, y = stripClosingPoint(x, y)
        if len(x) < 3:
            raise RegistrationError(f'Need at least 3 boundary points, got {len(x)}')

        area = abs(polygonArea(x, y))
        if not area > 0.0:
            raise RegistrationError('Boundary encloses zero area')
        size = math.sqrt(area / math.pi)

        cos, sin = np.cos(self.theta), np.sin(self.theta)

        # -- Centering fixed point -- #
        xShift, yShift = polygonCentroid(x, y)
        radius = resampleRadius(x - xShift, y - yShift, self.theta)

        for iteration in range(1, self.maxIterations + 1):
            xCurve, yCurve = radius * cos, radius * sin
            xCentroid, yCentroid = polygonCentroid(xCurve, yCurve)
            if math.hypot(xCentroid, yCentroid) <= self.tolerance * size:
                break
            xShift += xCentroid
            yShift += yCentroid
            radius = resampleRadius(xCurve - xCentroid, yCurve - yCentroid, self.theta)
        else:
            raise RegistrationError(f'Centering did not converge in {self.maxIterations} iterations')

        # -- Notch alignment -- #
        notchIndex = locateNotchIndex(radius)
        rotation = 0.0
        if self.alignNotch:
            sampleShift = self.nPoints // 2 - notchIndex
            radius = np.roll(radius, sampleShift)
            rotation = sampleShift * 2.0 * math.pi / self.nPoints

        # -- Scale -- #
        scale = 1.0
        if self.normalizeScale:
            scale = math.sqrt(abs(polygonArea(radius * cos, radius * sin)) / math.pi)
            radius = radius / scale

        transform = RigidTransform(xShift=xShift, yShift=yShift, rotation=rotation, scale=scale)
        return RegistrationResult(
            curve=BoundaryCurve(theta=self.theta, radius=radius),
            transform=transform,
            iterations=iteration,
            notchIndex=notchIndex,
        )

    def registerCurve(self, curve: BoundaryCurve) -> RegistrationResult:
        '''Register a boundary already in polar form.'''
        return self.register(curve.x, curve.y)

    def applyTransform(self, transform: RigidTransform, x: np.ndarray, y: np.ndarray) -> BoundaryCurve:
        '''
        Map a second boundary (e.g. the interior) through an existing
        registration transform and resample it at the registrar's angles.

        Parameters:
        -----------
        transform : RigidTransform
            Transform from register()
        x, y : np.ndarray
            Raw boundary points

        Returns:
        --------
        BoundaryCurve : Boundary in the registered frame
        '''
        x, y = stripClosingPoint(x, y)
        xOut, yOut = transform.apply(x, y)
        return BoundaryCurve(theta=self.theta, radius=resampleRadius(xOut, yOut, self.theta))

    def registerPopulation(self, curves: list[tuple[np.ndarray, np.ndarray]]) -> list[RegistrationResult]:
        '''Register each (x, y) boundary in order.'''
        return [self.register(x, y) for x, y in curves]
