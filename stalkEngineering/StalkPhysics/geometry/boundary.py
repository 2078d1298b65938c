# -- Boundary Curve -- #

'''
Closed 2D contour sampled at uniform angular steps.

Every curve that is compared, combined, or integrated shares the same
sampling theta_i = 2*pi*i/N, i = 0..N-1. The radius representation is
canonical; Cartesian coordinates are derived.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from stalkEngineering.StalkPhysics import constants as const
from stalkEngineering.StalkPhysics.errors import DegenerateGeometryError
from stalkEngineering.utilsSE import closeCurve


def uniformTheta(nPoints: int = const.defaultSampleCount) -> np.ndarray:
    '''
    Uniform angular sampling without a repeated endpoint.

    Parameters:
    -----------
    nPoints : int
        Number of samples N

    Returns:
    --------
    np.ndarray : theta_i = 2*pi*i/N
    '''
    if nPoints < 3:
        raise ValueError(f'A closed boundary needs at least 3 samples, got {nPoints}')
    return 2.0 * np.pi * np.arange(nPoints) / nPoints


def isUniformTheta(theta: np.ndarray, tolerance: float = 1e-9) -> bool:
    '''True if theta matches uniformTheta(len(theta)) within tolerance.'''
    theta = np.asarray(theta, dtype=float)
    return theta.ndim == 1 and len(theta) >= 3 and bool(np.allclose(theta, uniformTheta(len(theta)), atol=tolerance))


@dataclass(frozen=True)
class BoundaryCurve:
    '''
    Closed boundary in polar form about the origin.

    Parameters:
    -----------
    theta : np.ndarray
        Uniform angles 2*pi*i/N [rad]
    radius : np.ndarray
        Radius at each angle [mm]
    '''

    theta: np.ndarray
    radius: np.ndarray

    def __post_init__(self) -> None:
        theta = np.asarray(self.theta, dtype=float)
        radius = np.asarray(self.radius, dtype=float)
        if theta.shape != radius.shape:
            raise ValueError(f'theta {theta.shape} and radius {radius.shape} differ in shape')
        if not isUniformTheta(theta):
            raise ValueError('Boundary angles must be uniform 2*pi*i/N samples')
        if not np.all(np.isfinite(radius)):
            raise DegenerateGeometryError('Boundary radius contains NaN or infinite values')
        object.__setattr__(self, 'theta', theta)
        object.__setattr__(self, 'radius', radius)

    #--------------------------------------------------------------------#
    # -- Constructors -- #
    #--------------------------------------------------------------------#
    @classmethod
    def fromRadius(cls, radius: np.ndarray | list) -> BoundaryCurve:
        '''Curve from radii at the uniform angles implied by their count.'''
        radius = np.asarray(radius, dtype=float)
        return cls(theta=uniformTheta(len(radius)), radius=radius)

    #--------------------------------------------------------------------#
    # -- Derived Geometry -- #
    #--------------------------------------------------------------------#
    @property
    def nPoints(self) -> int:
        '''Number of angular samples N.'''
        return len(self.theta)

    @property
    def x(self) -> np.ndarray:
        '''Cartesian x coordinates [mm].'''
        return self.radius * np.cos(self.theta)

    @property
    def y(self) -> np.ndarray:
        '''Cartesian y coordinates [mm].'''
        return self.radius * np.sin(self.theta)

    def closedXY(self) -> np.ndarray:
        '''(N + 1, 2) Cartesian points with the first point repeated at the end.'''
        return closeCurve(self.x, self.y)

    def nearestIndex(self, angle: float) -> int:
        '''Index of the sample whose angle is closest to 'angle' [rad].'''
        return int(np.argmin(np.abs(self.theta - angle)))

    def referencePoints(self) -> tuple[tuple[float, float], tuple[float, float]]:
        '''
        Cartesian points nearest 90 and 270 degrees.

        Returns:
        --------
        tuple : ((x90, y90), (x270, y270))
        '''
        i90 = self.nearestIndex(math.pi / 2.0)
        i270 = self.nearestIndex(3.0 * math.pi / 2.0)
        x, y = self.x, self.y
        return (float(x[i90]), float(y[i90])), (float(x[i270]), float(y[i270]))

    def requirePositive(self, name: str = 'boundary') -> BoundaryCurve:
        '''Raise DegenerateGeometryError unless every radius is strictly positive.'''
        if np.any(self.radius <= 0.0):
            raise DegenerateGeometryError(
                f'{name} has non-positive radius (min {float(np.min(self.radius)):.4g})'
            )
        return self
