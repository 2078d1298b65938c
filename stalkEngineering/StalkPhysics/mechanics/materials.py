# -- Material Property Sampler -- #

'''
Transverse rind and pith moduli for sensitivity cases.

Random moduli follow a normal distribution truncated to the 95%
confidence interval of the reference material study; the named methods
pin one or both moduli to an interval end or the mean.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy.stats import truncnorm

from stalkEngineering.StalkPhysics import constants as const


@dataclass(frozen=True)
class MaterialProperties:
    '''Rind and pith transverse moduli for one case.'''
    rindModulus: float
    pithModulus: float

    @property
    def modulusRatio(self) -> float:
        '''Rind-to-pith modulus ratio.'''
        return self.rindModulus / self.pithModulus

    def scaled(self, rindFactor: float = 1.0, pithFactor: float = 1.0) -> MaterialProperties:
        '''Copy with each modulus multiplied by a factor.'''
        return MaterialProperties(self.rindModulus * rindFactor, self.pithModulus * pithFactor)

    def toDict(self) -> dict:
        '''Convert to dictionary for JSON serialization.'''
        return {'rindModulus': self.rindModulus, 'pithModulus': self.pithModulus}


class MaterialSampler:
    '''
    Draws material properties by named method.

    Methods:
    - 'random'  : truncated normal for both moduli
    - 'min'     : both at the lower interval bound
    - 'max'     : both at the upper interval bound
    - 'minpith' / 'maxpith' : pith at an interval bound, rind at the mean
    - 'minrind' / 'maxrind' : rind at an interval bound, pith at the mean
    - 'avg'     : both at the mean
    '''

    methods = ('random', 'min', 'max', 'minpith', 'maxpith', 'minrind', 'maxrind', 'avg')

    def __init__(self, seed: int | None = None) -> None:
        '''
        Parameters:
        -----------
        seed : int | None
            Seed for the random method
        '''
        self._rng = np.random.default_rng(seed)

    def _truncatedNormal(self, mean: float, std: float, interval: tuple[float, float]) -> float:
        lower = (interval[0] - mean) / std
        upper = (interval[1] - mean) / std
        return float(truncnorm.rvs(lower, upper, loc=mean, scale=std, random_state=self._rng))

    def sample(self, method: str = 'random') -> MaterialProperties:
        '''
        Material properties for one case.

        Parameters:
        -----------
        method : str
            One of MaterialSampler.methods

        Returns:
        --------
        MaterialProperties : Rind and pith moduli
        '''
        rindMean, pithMean = const.rindModulusMean, const.pithModulusMean
        rindLow, rindHigh = const.rindModulusInterval
        pithLow, pithHigh = const.pithModulusInterval

        if method == 'random':
            return MaterialProperties(
                rindModulus=self._truncatedNormal(rindMean, const.rindModulusStd, const.rindModulusInterval),
                pithModulus=self._truncatedNormal(pithMean, const.pithModulusStd, const.pithModulusInterval),
            )

        fixed = {
            'min': (rindLow, pithLow),
            'max': (rindHigh, pithHigh),
            'minpith': (rindMean, pithLow),
            'maxpith': (rindMean, pithHigh),
            'minrind': (rindLow, pithMean),
            'maxrind': (rindHigh, pithMean),
            'avg': (rindMean, pithMean),
        }
        if method not in fixed:
            raise ValueError(f'Unknown material method: {method}. Options: {", ".join(self.methods)}')

        rind, pith = fixed[method]
        return MaterialProperties(rindModulus=rind, pithModulus=pith)
