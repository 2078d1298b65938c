# -- Principal Component Basis -- #

'''
Principal component basis of a population of registered boundaries.

Each row of the input matrix is one sample (one value per angular index)
for a single channel: exterior residual, interior residual, x, or y.
Components are the right-singular vectors of the mean-centered matrix,
ordered by descending explained variance.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from stalkEngineering.StalkPhysics import constants as const


#--------------------------------------------------------------------#
# -- Component Selection -- #
#--------------------------------------------------------------------#

def selectComponentCount(explained: np.ndarray, threshold: float = const.explainedVarianceThreshold) -> int:
    '''
    Minimal component count whose cumulative explained variance first
    exceeds the threshold. The component that crosses is included.

    Parameters:
    -----------
    explained : np.ndarray
        Explained variance per component [%], descending
    threshold : float
        Cumulative threshold [%]

    Returns:
    --------
    int : Component count K (all components if the threshold is never exceeded)
    '''
    cumulative = np.cumsum(np.asarray(explained, dtype=float))
    crossing = np.nonzero(cumulative > threshold)[0]
    if len(crossing) == 0:
        return len(cumulative)
    return int(crossing[0]) + 1


def extractAngularWindow(
    matrix: np.ndarray,
    theta: np.ndarray,
    centerAngle: float = math.pi,
    spanDegrees: float = const.notchRegionDegrees,
) -> tuple[np.ndarray, np.ndarray]:
    '''
    Columns of a sample matrix inside an angular window, for notch-region PCA.

    Parameters:
    -----------
    matrix : np.ndarray
        (nSamples, N) sample matrix
    theta : np.ndarray
        Uniform angles of the columns [rad]
    centerAngle : float
        Window center [rad]
    spanDegrees : float
        Full window width [deg]

    Returns:
    --------
    tuple : (windowMatrix, windowTheta)
    '''
    halfSpan = math.radians(spanDegrees) / 2.0
    offset = np.angle(np.exp(1j * (np.asarray(theta) - centerAngle)))
    mask = np.abs(offset) <= halfSpan + 1e-12
    return np.asarray(matrix)[:, mask], np.asarray(theta)[mask]


#--------------------------------------------------------------------#
# -- Basis -- #
#--------------------------------------------------------------------#

@dataclass
class PrincipalComponentBasis:
    '''
    Orthonormal basis of one channel of a sample population.

    Rows of components are orthonormal; coefficients[i, k] is sample i
    projected onto component k.
    '''
    channel: str
    mean: np.ndarray            # (N,) population mean row
    components: np.ndarray      # (K, N) orthonormal rows
    eigenvalues: np.ndarray     # (K,) covariance eigenvalues
    explained: np.ndarray       # (K,) explained variance [%], descending
    coefficients: np.ndarray    # (nSamples, K) per-sample projections

    @property
    def nComponents(self) -> int:
        '''Number of retained components (rank).'''
        return self.components.shape[0]

    @property
    def nSamples(self) -> int:
        '''Number of samples the basis was built from.'''
        return self.coefficients.shape[0]

    @property
    def nPoints(self) -> int:
        '''Length of each component.'''
        return self.components.shape[1]

    def cumulativeExplained(self) -> np.ndarray:
        '''Cumulative explained variance [%].'''
        return np.cumsum(self.explained)

    def selectComponentCount(self, threshold: float = const.explainedVarianceThreshold) -> int:
        '''Minimal K whose cumulative explained variance first exceeds threshold.'''
        return selectComponentCount(self.explained, threshold)

    def project(self, rows: np.ndarray) -> np.ndarray:
        '''
        Coefficients of new rows on this basis.

        Parameters:
        -----------
        rows : np.ndarray
            (m, N) or (N,) samples of this channel

        Returns:
        --------
        np.ndarray : (m, K) or (K,) coefficients
        '''
        rows = np.asarray(rows, dtype=float)
        return (rows - self.mean) @ self.components.T

    def reconstruct(self, coefficients: np.ndarray, nComponents: int | None = None) -> np.ndarray:
        '''
        Mean plus the first nComponents weighted components.

        Parameters:
        -----------
        coefficients : np.ndarray
            (K,) or (m, K) coefficients
        nComponents : int | None
            Leading components to include (all when None)

        Returns:
        --------
        np.ndarray : (N,) or (m, N) reconstructed rows
        '''
        k = self.nComponents if nComponents is None else nComponents
        if not 0 <= k <= self.nComponents:
            raise ValueError(f'Component count {k} outside 0..{self.nComponents}')
        coefficients = np.asarray(coefficients, dtype=float)
        return self.mean + coefficients[..., :k] @ self.components[:k]

    def reconstructSample(self, index: int, nComponents: int | None = None) -> np.ndarray:
        '''Reconstruct a population sample from its stored coefficients.'''
        return self.reconstruct(self.coefficients[index], nComponents)

    #--------------------------------------------------------------------#
    # -- Persistence -- #
    #--------------------------------------------------------------------#
    def toArrays(self) -> dict[str, np.ndarray]:
        '''Arrays keyed by '<channel>_<field>' for numpy.savez.'''
        return {
            f'{self.channel}_mean': self.mean,
            f'{self.channel}_components': self.components,
            f'{self.channel}_eigenvalues': self.eigenvalues,
            f'{self.channel}_explained': self.explained,
            f'{self.channel}_coefficients': self.coefficients,
        }

    @classmethod
    def fromArrays(cls, arrays, channel: str) -> PrincipalComponentBasis:
        '''Rebuild a basis stored with toArrays().'''
        return cls(
            channel=channel,
            mean=np.asarray(arrays[f'{channel}_mean']),
            components=np.asarray(arrays[f'{channel}_components']),
            eigenvalues=np.asarray(arrays[f'{channel}_eigenvalues']),
            explained=np.asarray(arrays[f'{channel}_explained']),
            coefficients=np.asarray(arrays[f'{channel}_coefficients']),
        )

    def printSummary(self, nShown: int = 10) -> None:
        '''Print explained variance of the leading components.'''
        cumulative = self.cumulativeExplained()
        print('=' * 58)
        print(f'  PCA BASIS: {self.channel.upper()}')
        print('=' * 58)
        print(f'  Samples: {self.nSamples}   Points: {self.nPoints}   Rank: {self.nComponents}')
        print(f'  Components for {const.explainedVarianceThreshold:.0f}%: {self.selectComponentCount()}')
        print('-' * 58)
        print(f'  {"PC":>4s}  {"Explained [%]":>14s}  {"Cumulative [%]":>15s}')
        for k in range(min(nShown, self.nComponents)):
            print(f'  {k + 1:4d}  {self.explained[k]:14.3f}  {cumulative[k]:15.3f}')
        print('=' * 58)


def buildBasis(matrix: np.ndarray, channel: str = 'exterior') -> PrincipalComponentBasis:
    '''
    Principal component basis of a sample matrix.

    Parameters:
    -----------
    matrix : np.ndarray
        (nSamples, N) rows of one channel
    channel : str
        Channel label stored with the basis

    Returns:
    --------
    PrincipalComponentBasis : Rank min(nSamples - 1, N) basis
    '''
    matrix = np.asarray(matrix, dtype=float)
    if matrix.ndim != 2:
        raise ValueError(f'Sample matrix must be 2D, got shape {matrix.shape}')

    nSamples, nPoints = matrix.shape
    if nSamples < 2:
        raise ValueError('At least two samples are needed to build a basis')
    if not np.all(np.isfinite(matrix)):
        raise ValueError(f'Sample matrix for {channel} contains NaN or infinite values')

    mean = matrix.mean(axis=0)
    centered = matrix - mean

    _, singular, vt = np.linalg.svd(centered, full_matrices=False)

    rank = min(nSamples - 1, nPoints)
    components = vt[:rank]
    eigenvalues = singular[:rank]**2 / (nSamples - 1)

    # Deterministic sign: largest-magnitude entry of each component positive
    largest = np.argmax(np.abs(components), axis=1)
    signs = np.sign(components[np.arange(rank), largest])
    signs[signs == 0.0] = 1.0
    components = components * signs[:, None]

    total = float(np.sum(eigenvalues))
    explained = 100.0 * eigenvalues / total if total > 0.0 else np.zeros(rank)

    return PrincipalComponentBasis(
        channel=channel,
        mean=mean,
        components=components,
        eigenvalues=eigenvalues,
        explained=explained,
        coefficients=centered @ components.T,
    )
