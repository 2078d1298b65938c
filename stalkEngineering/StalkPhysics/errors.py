# -- StalkPhysics Exceptions -- #

'''
Exception types raised by the cross-section analysis pipeline.

Per-sample failures in a population study are caught as StalkPhysicsError,
recorded as problem (slice, stalk) pairs, and excluded from aggregation.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations


class StalkPhysicsError(Exception):
    '''Base class for all cross-section analysis errors.'''


class DegenerateGeometryError(StalkPhysicsError, ValueError):
    '''Boundary or parameters that cannot describe a valid cross-section.'''


class InconsistentMomentError(StalkPhysicsError, ValueError):
    '''Rind moment computed as negative (pith boundary outside exterior).'''


class RegistrationError(StalkPhysicsError, ValueError):
    '''Curve could not be resampled about its centroid.'''


class MissingSampleError(StalkPhysicsError, KeyError):
    '''Requested (slice, stalk) pair is not present in the population store.'''

    def __init__(self, slicePosition: float, stalkIndex: int) -> None:
        super().__init__(f'No sample for slice {slicePosition}, stalk {stalkIndex}')
        self.slicePosition = slicePosition
        self.stalkIndex = stalkIndex


class EmptyPopulationError(StalkPhysicsError):
    '''Population store has no samples or no residual bases to study.'''

    def __init__(self, message: str, buildProblems: list[tuple[float, int]] | None = None) -> None:
        self.buildProblems = list(buildProblems) if buildProblems else []
        if self.buildProblems:
            shown = ', '.join(f'({s:g}, {k})' for s, k in self.buildProblems[:5])
            more = f' and {len(self.buildProblems) - 5} more' if len(self.buildProblems) > 5 else ''
            message = f'{message}; {len(self.buildProblems)} pairs failed to build: {shown}{more}'
        super().__init__(message)
