# -- Polar Moment of Inertia -- #

'''
Polar second moment of area of a closed radial boundary,

    J = integral over the region of rho^3 d(rho) d(theta)

discretized wedge by wedge into concentric rings of thickness dr with the
midpoint rule. The last ring of each wedge is partial so it ends exactly
on the boundary.

Rind moments are never integrated separately: rind = total - pith, so both
share the same discretization.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import numpy as np

from stalkEngineering.StalkPhysics import constants as const
from stalkEngineering.StalkPhysics.errors import DegenerateGeometryError, InconsistentMomentError
from stalkEngineering.StalkPhysics.geometry.boundary import isUniformTheta
from stalkEngineering.StalkPhysics.mechanics.protocols import MomentResult, RadialBoundary


def polarMomentOfInertia(theta: np.ndarray, radius: np.ndarray, dr: float = const.defaultRadialStep) -> float:
    '''
    Polar moment of the region bounded by r(theta).

    Parameters:
    -----------
    theta : np.ndarray
        Uniform angles 2*pi*i/N [rad]
    radius : np.ndarray
        Boundary radius at each angle [mm]
    dr : float
        Radial ring thickness [mm]

    Returns:
    --------
    float : Polar moment about the origin [mm^4]
    '''
    theta = np.asarray(theta, dtype=float)
    radius = np.asarray(radius, dtype=float)

    if dr <= 0.0:
        raise ValueError(f'Radial step must be positive, got {dr}')
    if theta.shape != radius.shape or not isUniformTheta(theta):
        raise ValueError('Polar moment requires radius sampled at uniform angles 2*pi*i/N')
    if not np.all(np.isfinite(radius)) or np.any(radius <= 0.0):
        raise DegenerateGeometryError('Polar moment requires a strictly positive, finite radius')

    dTheta = 2.0 * np.pi / len(theta)
    nRings = int(np.ceil(float(np.max(radius)) / dr))

    # (N, nRings) ring bounds; rings beyond a wedge's radius get zero thickness
    inner = np.arange(nRings) * dr
    outer = np.minimum(inner + dr, radius[:, None])
    thickness = np.clip(outer - inner, 0.0, None)
    midpoint = inner + 0.5 * thickness

    return float(dTheta * np.sum(midpoint**3 * thickness))


def boundaryMoment(boundary: RadialBoundary, dr: float = const.defaultRadialStep) -> float:
    '''Polar moment of any object exposing theta and radius.'''
    return polarMomentOfInertia(boundary.theta, boundary.radius, dr)


def computeMoments(
    pith: RadialBoundary,
    exterior: RadialBoundary,
    dr: float = const.defaultRadialStep,
    label: str = 'true',
    level: int = -1,
    tolerance: float = const.rindMomentTolerance,
) -> MomentResult:
    '''
    Pith, total, and rind polar moments of one section.

    Parameters:
    -----------
    pith : RadialBoundary
        Interior (pith) boundary
    exterior : RadialBoundary
        Exterior boundary on the same angles
    dr : float
        Radial ring thickness [mm]
    label : str
        Approximation label stored on the result
    level : int
        Approximation level stored on the result
    tolerance : float
        Allowed negative rind moment relative to the total moment

    Returns:
    --------
    MomentResult : Moments with rind = total - pith
    '''
    if len(pith.theta) != len(exterior.theta):
        raise ValueError(f'Pith ({len(pith.theta)}) and exterior ({len(exterior.theta)}) sample counts differ')

    pithMoment = boundaryMoment(pith, dr)
    totalMoment = boundaryMoment(exterior, dr)

    if totalMoment - pithMoment < -tolerance * totalMoment:
        raise InconsistentMomentError(
            f'Negative rind moment for {label}: total {totalMoment:.6g} < pith {pithMoment:.6g}'
        )

    return MomentResult(pithMoment=pithMoment, totalMoment=totalMoment, label=label, level=level)
