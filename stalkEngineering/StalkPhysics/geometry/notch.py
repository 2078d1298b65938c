# -- Notch Locator -- #

'''
Locates the notch (the natural inward dent of a stalk section) on a
uniformly sampled radius signal.

The low angular harmonics of the radius carry the elliptical shape and the
asymmetry; what remains after removing them is dominated by the localized
notch, whose deepest point is the notch center.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import numpy as np

from stalkEngineering.StalkPhysics.constants import notchHarmonics


def highPassRadius(radius: np.ndarray, harmonics: int = notchHarmonics) -> np.ndarray:
    '''
    Remove angular harmonics 0..harmonics from a periodic radius signal.

    Parameters:
    -----------
    radius : np.ndarray
        Radius at uniform angles
    harmonics : int
        Highest harmonic removed

    Returns:
    --------
    np.ndarray : Residual radius signal (same length)
    '''
    spectrum = np.fft.rfft(radius)
    spectrum[:harmonics + 1] = 0.0
    return np.fft.irfft(spectrum, n=len(radius))


def locateNotchIndex(radius: np.ndarray, harmonics: int = notchHarmonics) -> int:
    '''
    Sample index of the notch center.

    Parameters:
    -----------
    radius : np.ndarray
        Radius at uniform angles theta_i = 2*pi*i/N
    harmonics : int
        Highest harmonic treated as smooth trend

    Returns:
    --------
    int : Index of the deepest point of the high-passed radius
    '''
    return int(np.argmin(highPassRadius(np.asarray(radius, dtype=float), harmonics)))


def locateNotch(theta: np.ndarray, radius: np.ndarray, harmonics: int = notchHarmonics) -> float:
    '''
    Angle of the notch center, refined between samples with a parabola
    through the three samples around the minimum.

    Parameters:
    -----------
    theta : np.ndarray
        Uniform angles [rad]
    radius : np.ndarray
        Radius at each angle [mm]
    harmonics : int
        Highest harmonic treated as smooth trend

    Returns:
    --------
    float : Notch angle in [0, 2*pi) [rad]
    '''
    residual = highPassRadius(np.asarray(radius, dtype=float), harmonics)
    nPoints = len(residual)
    idx = int(np.argmin(residual))

    before = residual[(idx - 1) % nPoints]
    center = residual[idx]
    after = residual[(idx + 1) % nPoints]

    curvature = before - 2.0 * center + after
    offset = 0.5 * (before - after) / curvature if curvature > 0.0 else 0.0

    step = 2.0 * np.pi / nPoints
    return float(np.mod(theta[idx] + offset * step, 2.0 * np.pi))
