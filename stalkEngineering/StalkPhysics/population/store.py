# -- Population Store -- #

'''
Registered cross-section population keyed by (slice position, stalk index).

Rows are stored in contiguous per-slice blocks. The index maps each slice
to its block start and each stalk to its offset within the block; pairs
that were never stored resolve to MISSING_ROW instead of being searched
for. Per-channel principal component bases are built from the stored rows
and persisted alongside them.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import numpy as np

from stalkEngineering.StalkPhysics.errors import EmptyPopulationError, MissingSampleError
from stalkEngineering.StalkPhysics.geometry.boundary import BoundaryCurve, uniformTheta
from stalkEngineering.StalkPhysics.geometry.ellipse import EllipseFit
from stalkEngineering.StalkPhysics.geometry.parameters import ShapeParameters
from stalkEngineering.StalkPhysics.pca.basis import PrincipalComponentBasis, buildBasis

# Row index of a (slice, stalk) pair that is not in the store
MISSING_ROW: int = -1

# Residual channels (ellipse minus true radius) and exterior coordinate channels
CHANNELS: tuple[str, ...] = ('exterior', 'interior', 'x', 'y')


#--------------------------------------------------------------------#
# -- Sample Record -- #
#--------------------------------------------------------------------#

@dataclass
class CrossSectionSample:
    '''One registered stalk slice.'''
    slicePosition: float
    stalkIndex: int
    exterior: BoundaryCurve
    interior: BoundaryCurve
    exteriorEllipse: EllipseFit
    interiorEllipse: EllipseFit
    rindThickness: float                        # Average rind thickness [mm]
    params: ShapeParameters | None = None       # Generating shape (synthetic samples)

    @property
    def key(self) -> tuple[float, int]:
        '''Compound (slice, stalk) key.'''
        return (self.slicePosition, self.stalkIndex)

    def channel(self, name: str) -> np.ndarray:
        '''
        Row of this sample for a basis channel.

        Parameters:
        -----------
        name : str
            'exterior' or 'interior' (ellipse minus radius), 'x' or 'y' (exterior coordinates)

        Returns:
        --------
        np.ndarray : (N,) channel values
        '''
        if name == 'exterior':
            return self.exteriorEllipse.radius(self.exterior.theta) - self.exterior.radius
        if name == 'interior':
            return self.interiorEllipse.radius(self.interior.theta) - self.interior.radius
        if name == 'x':
            return self.exterior.x
        if name == 'y':
            return self.exterior.y
        raise ValueError(f'Unknown channel: {name}. Options: {", ".join(CHANNELS)}')


#--------------------------------------------------------------------#
# -- Store -- #
#--------------------------------------------------------------------#

class PopulationStore:
    '''
    Compound-key repository of registered samples and their bases.
    '''

    def __init__(
        self,
        samples: list[CrossSectionSample],
        bases: dict[str, PrincipalComponentBasis] | None = None,
        buildProblems: list[tuple[float, int]] | None = None,
    ) -> None:
        '''
        Parameters:
        -----------
        samples : list[CrossSectionSample]
            Samples in any order; rows are regrouped into per-slice blocks
        bases : dict[str, PrincipalComponentBasis] | None
            Precomputed bases whose coefficient rows follow the block order
        buildProblems : list[tuple[float, int]] | None
            (slice, stalk) pairs that failed while the population was built
        '''
        sliceOrder: list[float] = []
        bySlice: dict[float, list[CrossSectionSample]] = {}
        for sample in samples:
            if sample.slicePosition not in bySlice:
                sliceOrder.append(sample.slicePosition)
                bySlice[sample.slicePosition] = []
            bySlice[sample.slicePosition].append(sample)

        self._rows: list[CrossSectionSample] = []
        self._blocks: dict[float, tuple[int, dict[int, int]]] = {}

        for slicePosition in sliceOrder:
            start = len(self._rows)
            offsets: dict[int, int] = {}
            for sample in sorted(bySlice[slicePosition], key=lambda s: s.stalkIndex):
                if sample.stalkIndex in offsets:
                    raise ValueError(f'Duplicate sample for slice {slicePosition}, stalk {sample.stalkIndex}')
                offsets[sample.stalkIndex] = len(self._rows) - start
                self._rows.append(sample)
            self._blocks[slicePosition] = (start, offsets)

        if self._rows:
            nPoints = {sample.exterior.nPoints for sample in self._rows} | {sample.interior.nPoints for sample in self._rows}
            if len(nPoints) != 1:
                raise ValueError(f'Samples use different angular sample counts: {sorted(nPoints)}')

        self.bases: dict[str, PrincipalComponentBasis] = dict(bases) if bases else {}
        self.buildProblems: list[tuple[float, int]] = list(buildProblems) if buildProblems else []

    #--------------------------------------------------------------------#
    # -- Index -- #
    #--------------------------------------------------------------------#
    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[CrossSectionSample]:
        return iter(self._rows)

    @property
    def theta(self) -> np.ndarray:
        '''Shared angular sampling of every stored boundary.'''
        if not self._rows:
            raise ValueError('Empty population store')
        return self._rows[0].exterior.theta

    @property
    def slicePositions(self) -> list[float]:
        '''Slice positions in block order.'''
        return list(self._blocks)

    def stalkIndices(self, slicePosition: float) -> list[int]:
        '''Stalk indices stored for a slice, ascending.'''
        if slicePosition not in self._blocks:
            return []
        return list(self._blocks[slicePosition][1])

    def rowIndex(self, slicePosition: float, stalkIndex: int) -> int:
        '''
        Row of a (slice, stalk) pair.

        Returns:
        --------
        int : Row index, or MISSING_ROW if the pair is not stored
        '''
        block = self._blocks.get(slicePosition)
        if block is None:
            return MISSING_ROW
        start, offsets = block
        offset = offsets.get(stalkIndex)
        return MISSING_ROW if offset is None else start + offset

    def has(self, slicePosition: float, stalkIndex: int) -> bool:
        '''True when the pair is stored.'''
        return self.rowIndex(slicePosition, stalkIndex) != MISSING_ROW

    def get(self, slicePosition: float, stalkIndex: int) -> CrossSectionSample:
        '''Sample for a pair; raises MissingSampleError if absent.'''
        row = self.rowIndex(slicePosition, stalkIndex)
        if row == MISSING_ROW:
            raise MissingSampleError(slicePosition, stalkIndex)
        return self._rows[row]

    def row(self, index: int) -> CrossSectionSample:
        '''Sample at a row index.'''
        return self._rows[index]

    #--------------------------------------------------------------------#
    # -- Bases -- #
    #--------------------------------------------------------------------#
    def channelMatrix(self, channel: str) -> np.ndarray:
        '''(nRows, N) matrix of one channel in row order.'''
        return np.vstack([sample.channel(channel) for sample in self._rows])

    def buildBases(self, channels: tuple[str, ...] = CHANNELS) -> dict[str, PrincipalComponentBasis]:
        '''
        Build and keep one basis per channel over all stored rows.

        Parameters:
        -----------
        channels : tuple[str, ...]
            Channels to build

        Returns:
        --------
        dict : Channel name -> basis
        '''
        for channel in channels:
            self.bases[channel] = buildBasis(self.channelMatrix(channel), channel)
        return self.bases

    def basis(self, channel: str) -> PrincipalComponentBasis:
        '''Basis of a channel; raises KeyError if it was never built.'''
        if channel not in self.bases:
            raise KeyError(f'No basis for channel {channel!r}; call buildBases() first')
        return self.bases[channel]

    def requireBases(self, channels: tuple[str, ...] = ('exterior', 'interior')) -> None:
        '''
        Check the store can be studied: samples present and channel bases built.

        Parameters:
        -----------
        channels : tuple[str, ...]
            Channels whose bases must exist

        Raises:
        -------
        EmptyPopulationError : No samples, or a basis is missing, with the build problems attached
        '''
        if len(self) == 0:
            raise EmptyPopulationError('Population store has no samples', self.buildProblems)
        missing = [channel for channel in channels if channel not in self.bases]
        if missing:
            raise EmptyPopulationError(
                f'No basis for channel(s) {", ".join(missing)} over {len(self)} samples',
                self.buildProblems,
            )

    def coefficients(self, slicePosition: float, stalkIndex: int, channel: str) -> np.ndarray:
        '''Stored basis coefficients of a pair for one channel.'''
        row = self.rowIndex(slicePosition, stalkIndex)
        if row == MISSING_ROW:
            raise MissingSampleError(slicePosition, stalkIndex)
        return self.basis(channel).coefficients[row]

    #--------------------------------------------------------------------#
    # -- Persistence -- #
    #--------------------------------------------------------------------#
    def save(self, filePath: str) -> None:
        '''
        Save samples, bases, and build problems to a compressed .npz file.

        Parameters:
        -----------
        filePath : str
            Output file path
        '''
        paramsMatrix = np.full((len(self._rows), len(ShapeParameters.fieldNames())), np.nan)
        for row, sample in enumerate(self._rows):
            if sample.params is not None:
                paramsMatrix[row] = sample.params.toVector()

        arrays: dict[str, np.ndarray] = {
            'slicePositions': np.array([s.slicePosition for s in self._rows], dtype=float),
            'stalkIndices': np.array([s.stalkIndex for s in self._rows], dtype=int),
            'exteriorRadius': np.vstack([s.exterior.radius for s in self._rows]),
            'interiorRadius': np.vstack([s.interior.radius for s in self._rows]),
            'exteriorEllipse': np.array([[s.exteriorEllipse.majorDiameter, s.exteriorEllipse.minorDiameter, s.exteriorEllipse.rmsResidual] for s in self._rows]),
            'interiorEllipse': np.array([[s.interiorEllipse.majorDiameter, s.interiorEllipse.minorDiameter, s.interiorEllipse.rmsResidual] for s in self._rows]),
            'rindThickness': np.array([s.rindThickness for s in self._rows], dtype=float),
            'shapeParameters': paramsMatrix,
            'buildProblems': np.array(self.buildProblems, dtype=float).reshape(-1, 2),
            'channels': np.array(list(self.bases), dtype=str),
        }
        for basis in self.bases.values():
            arrays.update(basis.toArrays())

        np.savez_compressed(filePath, **arrays)

    @classmethod
    def load(cls, filePath: str) -> PopulationStore:
        '''
        Load a store written by save().

        Parameters:
        -----------
        filePath : str
            Path to the .npz file

        Returns:
        --------
        PopulationStore : Store with rows in the saved block order
        '''
        with np.load(filePath, allow_pickle=False) as data:
            exteriorRadius = data['exteriorRadius']
            theta = uniformTheta(exteriorRadius.shape[1])

            samples = []
            for row in range(exteriorRadius.shape[0]):
                paramsRow = data['shapeParameters'][row]
                exteriorFit = data['exteriorEllipse'][row]
                interiorFit = data['interiorEllipse'][row]
                samples.append(CrossSectionSample(
                    slicePosition=float(data['slicePositions'][row]),
                    stalkIndex=int(data['stalkIndices'][row]),
                    exterior=BoundaryCurve(theta=theta, radius=exteriorRadius[row]),
                    interior=BoundaryCurve(theta=theta, radius=data['interiorRadius'][row]),
                    exteriorEllipse=EllipseFit(*(float(v) for v in exteriorFit)),
                    interiorEllipse=EllipseFit(*(float(v) for v in interiorFit)),
                    rindThickness=float(data['rindThickness'][row]),
                    params=None if np.any(np.isnan(paramsRow)) else ShapeParameters.fromVector(paramsRow),
                ))

            bases = {str(channel): PrincipalComponentBasis.fromArrays(data, str(channel)) for channel in data['channels']}
            problems = [(float(s), int(k)) for s, k in data['buildProblems']]

        return cls(samples, bases=bases, buildProblems=problems)

    def printSummary(self) -> None:
        '''Print population size per slice and available bases.'''
        print('=' * 58)
        print('  POPULATION STORE SUMMARY')
        print('=' * 58)
        print(f'  Samples:          {len(self)}')
        print(f'  Slices:           {len(self._blocks)}')
        print(f'  Angular samples:  {len(self.theta) if self._rows else 0}')
        print(f'  Bases:            {", ".join(self.bases) if self.bases else "none"}')
        print(f'  Build problems:   {len(self.buildProblems)}')
        print('-' * 58)
        for slicePosition, (start, offsets) in self._blocks.items():
            print(f'  Slice {slicePosition:6g}: rows {start}-{start + len(offsets) - 1} ({len(offsets)} stalks)')
        print('=' * 58)
