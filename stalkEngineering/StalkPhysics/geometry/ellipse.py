# -- Ellipse Approximation -- #

'''
Base ellipse of the reconstruction: polar radius of an axis-aligned
ellipse and a least-squares fit of its diameters to a registered section.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy.optimize import least_squares

from stalkEngineering.StalkPhysics.errors import DegenerateGeometryError


def ellipseRadius(theta: np.ndarray, majorDiameter: float, minorDiameter: float) -> np.ndarray:
    '''
    Polar radius of an origin-centered ellipse with its first axis along x.

    r = a*b / sqrt((b*cos(theta))^2 + (a*sin(theta))^2)

    Parameters:
    -----------
    theta : np.ndarray
        Angles [rad]
    majorDiameter : float
        Diameter along x, 2a [mm]
    minorDiameter : float
        Diameter along y, 2b [mm]

    Returns:
    --------
    np.ndarray : Radius at each angle [mm]
    '''
    a = majorDiameter / 2.0
    b = minorDiameter / 2.0
    return a * b / np.sqrt((b * np.cos(theta))**2 + (a * np.sin(theta))**2)


@dataclass(frozen=True)
class EllipseFit:
    '''Least-squares ellipse fitted to one boundary.'''

    majorDiameter: float
    minorDiameter: float
    rmsResidual: float

    def radius(self, theta: np.ndarray) -> np.ndarray:
        '''Ellipse radius at the given angles [mm].'''
        return ellipseRadius(theta, self.majorDiameter, self.minorDiameter)


def fitEllipse(theta: np.ndarray, radius: np.ndarray) -> EllipseFit:
    '''
    Fit ellipse diameters to a registered radius signal.

    Parameters:
    -----------
    theta : np.ndarray
        Uniform angles [rad]
    radius : np.ndarray
        Registered radius at each angle [mm]

    Returns:
    --------
    EllipseFit : Fitted diameters and RMS radial residual
    '''
    theta = np.asarray(theta, dtype=float)
    radius = np.asarray(radius, dtype=float)

    if np.any(radius <= 0.0) or not np.all(np.isfinite(radius)):
        raise DegenerateGeometryError('Cannot fit an ellipse to a non-positive or non-finite radius')

    nPoints = len(radius)
    # Initial semi-axes from the radius along x and along y
    aGuess = 0.5 * (radius[0] + radius[nPoints // 2])
    bGuess = 0.5 * (radius[nPoints // 4] + radius[(3 * nPoints) // 4])

    def residual(semiAxes: np.ndarray) -> np.ndarray:
        return ellipseRadius(theta, 2.0 * semiAxes[0], 2.0 * semiAxes[1]) - radius

    result = least_squares(
        residual,
        x0=np.array([aGuess, bGuess]),
        bounds=([1e-9, 1e-9], [np.inf, np.inf]),
    )

    if not result.success or not np.all(np.isfinite(result.x)):
        raise DegenerateGeometryError(f'Ellipse fit failed: {result.message}')

    rms = float(np.sqrt(np.mean(result.fun**2)))
    return EllipseFit(majorDiameter=2.0 * float(result.x[0]), minorDiameter=2.0 * float(result.x[1]), rmsResidual=rms)
