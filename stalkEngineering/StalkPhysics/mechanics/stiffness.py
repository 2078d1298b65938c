# -- Stiffness Error Aggregation -- #

'''
Percent error of approximate section boundaries in a composite torsional
stiffness proxy, reduced to percentile summaries over a population.

    S = E_ratio * J_rind + J_pith
    error = 100 * (S_approx - S_true) / S_true

Percentiles are computed per slice position over every processed stalk,
then averaged across slice positions. Sample i of n sorted errors sits at
percentile 100 * (i - 0.5) / n with linear interpolation between samples
(numpy method 'hazen'). Missing pairs and per-sample
geometry failures are recorded as problems and left out of every
percentile.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from tqdm import tqdm

from stalkEngineering.StalkPhysics import constants as const
from stalkEngineering.StalkPhysics.errors import StalkPhysicsError
from stalkEngineering.StalkPhysics.mechanics.polarInertia import computeMoments
from stalkEngineering.StalkPhysics.mechanics.protocols import MomentResult
from stalkEngineering.StalkPhysics.population.store import PopulationStore
from stalkEngineering.StalkPhysics.reconstruction.reconstructor import EllipseResidualReconstructor


def percentError(approximate: float, true: float) -> float:
    '''Signed percent error of an approximation [%].'''
    return 100.0 * (approximate - true) / true


#--------------------------------------------------------------------#
# -- Result Data Classes -- #
#--------------------------------------------------------------------#

@dataclass(frozen=True)
class SampleErrors:
    '''Moments and stiffness errors of one sample at every approximation level.'''
    slicePosition: float
    stalkIndex: int
    trueMoments: MomentResult
    approximations: tuple[MomentResult, ...]    # Levels 0..K
    errors: np.ndarray                          # Percent stiffness error per level


@dataclass(frozen=True)
class ErrorPercentileSummary:
    '''
    Percentiles of signed percent stiffness error.

    table[k, p] is percentile p at level k, averaged across slices.
    '''
    percentiles: tuple[float, ...]
    table: np.ndarray                                   # (levels, nPercentiles)
    perSlice: dict[float, np.ndarray]                   # Slice -> (levels, nPercentiles)
    sampleCounts: dict[float, int]                      # Slice -> processed samples
    meanAbsoluteError: np.ndarray                       # (levels,) over every processed sample
    medianAbsoluteError: np.ndarray                     # (levels,) per-slice median of |error|, averaged
    modulusRatio: float
    problems: tuple[tuple[float, int], ...] = field(default_factory=tuple)

    @property
    def nLevels(self) -> int:
        '''Approximation levels 0..K.'''
        return self.table.shape[0]

    def column(self, percentile: float) -> np.ndarray:
        '''Table column for one percentile.'''
        return self.table[:, self.percentiles.index(percentile)]

    @property
    def median(self) -> np.ndarray:
        '''Median percent error per level.'''
        return self.column(50.0)

    def toDict(self) -> dict:
        '''Convert to dictionary for JSON serialization.'''
        return {
            'modulusRatio': self.modulusRatio,
            'percentiles': list(self.percentiles),
            'table': self.table.tolist(),
            'perSlice': {str(s): t.tolist() for s, t in self.perSlice.items()},
            'sampleCounts': {str(s): n for s, n in self.sampleCounts.items()},
            'meanAbsoluteError': self.meanAbsoluteError.tolist(),
            'medianAbsoluteError': self.medianAbsoluteError.tolist(),
            'problems': [list(p) for p in self.problems],
        }

    def printTable(self) -> None:
        '''Print the percentile table and the problem pairs.'''
        width = 24 + 10 * len(self.percentiles)
        print('=' * width)
        print(f'  STIFFNESS ERROR PERCENTILES [%]  (E_ratio = {self.modulusRatio:g})')
        print('=' * width)
        header = ''.join(f'{f"P{p:g}":>10s}' for p in self.percentiles)
        print(f'  {"Level":<12s}{header}{"|err| P50":>10s}')
        print('-' * width)
        for level, row in enumerate(self.table):
            label = 'ellipse' if level == 0 else f'+{level} PC'
            print(f'  {label:<12s}' + ''.join(f'{value:10.3f}' for value in row)
                  + f'{self.medianAbsoluteError[level]:10.4f}')
        print('-' * width)
        print(f'  Samples processed: {sum(self.sampleCounts.values())} across {len(self.sampleCounts)} slices')
        if self.problems:
            print(f'  Problem pairs ({len(self.problems)}):')
            for slicePosition, stalkIndex in self.problems:
                print(f'    slice {slicePosition:g}, stalk {stalkIndex}')
        print('=' * width)


#--------------------------------------------------------------------#
# -- Per-Sample Evaluation -- #
#--------------------------------------------------------------------#

def evaluateSample(
    reconstructor: EllipseResidualReconstructor,
    slicePosition: float,
    stalkIndex: int,
    nComponents: int,
    modulusRatio: float = const.defaultModulusRatio,
    dr: float = const.defaultRadialStep,
) -> SampleErrors:
    '''
    Stiffness errors of one stored sample at levels 0..nComponents.

    Depends only on read-only inputs, so samples can be evaluated in any order.

    Parameters:
    -----------
    reconstructor : EllipseResidualReconstructor
        Reconstructor bound to the population store
    slicePosition, stalkIndex : float, int
        Sample key
    nComponents : int
        Highest level K
    modulusRatio : float
        Rind-to-pith modulus ratio
    dr : float
        Radial ring thickness [mm]

    Returns:
    --------
    SampleErrors : True moments, approximate moments, and percent errors
    '''
    sample = reconstructor.store.get(slicePosition, stalkIndex)
    trueMoments = computeMoments(sample.interior, sample.exterior, dr, label='true')
    trueStiffness = trueMoments.stiffness(modulusRatio)

    approximations = []
    for reconstruction in reconstructor.levels(slicePosition, stalkIndex, nComponents):
        approximations.append(computeMoments(
            reconstruction.interior,
            reconstruction.exterior,
            dr,
            label=reconstruction.label,
            level=reconstruction.level,
        ))

    errors = np.array([percentError(m.stiffness(modulusRatio), trueStiffness) for m in approximations])
    return SampleErrors(
        slicePosition=slicePosition,
        stalkIndex=stalkIndex,
        trueMoments=trueMoments,
        approximations=tuple(approximations),
        errors=errors,
    )


#--------------------------------------------------------------------#
# -- Population Study -- #
#--------------------------------------------------------------------#

class StiffnessStudy:
    '''
    Torsional stiffness error study over a population store.
    '''

    def __init__(
        self,
        store: PopulationStore,
        nComponents: int = 3,
        modulusRatio: float = const.defaultModulusRatio,
        dr: float = const.defaultRadialStep,
        interiorPolicy: str = 'pca',
        percentiles: tuple[float, ...] = const.errorPercentiles,
        showProgress: bool = True,
    ) -> None:
        '''
        Parameters:
        -----------
        store : PopulationStore
            Registered population with bases built
        nComponents : int
            Highest approximation level K
        modulusRatio : float
            Rind-to-pith modulus ratio E_ratio
        dr : float
            Radial ring thickness [mm]
        interiorPolicy : str
            'pca' or 'normalized' interior reconstruction
        percentiles : tuple[float, ...]
            Percentiles reported per level
        showProgress : bool
            Show a tqdm progress bar per slice
        '''
        self.reconstructor = EllipseResidualReconstructor(store, interiorPolicy)
        if not 0 <= nComponents <= self.reconstructor.maxComponents:
            raise ValueError(f'nComponents must be in 0..{self.reconstructor.maxComponents}, got {nComponents}')

        self.store = store
        self.nComponents = nComponents
        self.modulusRatio = modulusRatio
        self.dr = dr
        self.percentiles = tuple(float(p) for p in percentiles)
        self.showProgress = showProgress

        self.problems: list[tuple[float, int]] = []
        self.results: list[SampleErrors] = []

    def _recordProblem(self, slicePosition: float, stalkIndex: int, reason: str) -> None:
        self.problems.append((slicePosition, stalkIndex))
        tqdm.write(f'  Warning: slice {slicePosition:g}, stalk {stalkIndex} skipped ({reason})')

    def run(
        self,
        slicePositions: list[float] | None = None,
        stalkIndices: list[int] | None = None,
    ) -> ErrorPercentileSummary:
        '''
        Evaluate every requested (slice, stalk) pair and reduce to percentiles.

        Parameters:
        -----------
        slicePositions : list[float] | None
            Slices to process (all stored slices when None)
        stalkIndices : list[int] | None
            Stalks requested at every slice (the stored stalks of each slice when None)

        Returns:
        --------
        ErrorPercentileSummary : Slice-averaged percentile table
        '''
        self.problems = []
        self.results = []

        slices = self.store.slicePositions if slicePositions is None else list(slicePositions)
        perSlice: dict[float, np.ndarray] = {}
        perSliceMedianMagnitude: list[np.ndarray] = []
        sampleCounts: dict[float, int] = {}

        for slicePosition in slices:
            requested = self.store.stalkIndices(slicePosition) if stalkIndices is None else list(stalkIndices)
            sliceErrors = []

            for stalkIndex in tqdm(requested, desc=f'Slice {slicePosition:g}', disable=not self.showProgress):
                if not self.store.has(slicePosition, stalkIndex):
                    inRange = 1 <= stalkIndex <= const.stalkCount
                    reason = 'missing from population store' if inRange else f'outside stalk range 1-{const.stalkCount}'
                    self._recordProblem(slicePosition, stalkIndex, reason)
                    continue
                try:
                    result = evaluateSample(
                        self.reconstructor, slicePosition, stalkIndex, self.nComponents, self.modulusRatio, self.dr,
                    )
                except StalkPhysicsError as exc:
                    self._recordProblem(slicePosition, stalkIndex, str(exc))
                    continue

                self.results.append(result)
                sliceErrors.append(result.errors)

            if not sliceErrors:
                tqdm.write(f'  Warning: slice {slicePosition:g} has no processed samples')
                continue

            errors = np.vstack(sliceErrors)
            perSlice[slicePosition] = np.percentile(errors, self.percentiles, axis=0, method=const.percentileMethod).T
            perSliceMedianMagnitude.append(np.percentile(np.abs(errors), 50.0, axis=0, method=const.percentileMethod))
            sampleCounts[slicePosition] = errors.shape[0]

        if not perSlice:
            raise StalkPhysicsError('No samples could be processed')

        allErrors = np.vstack([result.errors for result in self.results])
        return ErrorPercentileSummary(
            percentiles=self.percentiles,
            table=np.mean(np.stack(list(perSlice.values())), axis=0),
            perSlice=perSlice,
            sampleCounts=sampleCounts,
            meanAbsoluteError=np.mean(np.abs(allErrors), axis=0),
            medianAbsoluteError=np.mean(np.stack(perSliceMedianMagnitude), axis=0),
            modulusRatio=self.modulusRatio,
            problems=tuple(self.problems),
        )
