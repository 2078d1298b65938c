# -- Section Mechanics Protocols -- #

'''
Boundary protocol and result dataclasses for section moment calculations.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import numpy as np


class RadialBoundary(Protocol):
    '''Closed boundary sampled as radius at uniform angles about the origin.'''

    theta: np.ndarray
    radius: np.ndarray


@dataclass(frozen=True)
class MomentResult:
    '''
    Polar moments of one pith/exterior boundary pair.

    Parameters:
    -----------
    pithMoment : float
        Polar moment of the region inside the interior boundary [mm^4]
    totalMoment : float
        Polar moment of the region inside the exterior boundary [mm^4]
    label : str
        Approximation that produced the boundaries ('true', 'ellipse', 'pc3', ...)
    level : int
        Approximation level K (-1 for the true shape)
    '''

    pithMoment: float
    totalMoment: float
    label: str = 'true'
    level: int = -1

    @property
    def rindMoment(self) -> float:
        '''Rind moment, total minus pith [mm^4].'''
        return self.totalMoment - self.pithMoment

    def stiffness(self, modulusRatio: float) -> float:
        '''
        Composite torsional stiffness proxy E_ratio * J_rind + J_pith.

        Parameters:
        -----------
        modulusRatio : float
            Rind-to-pith modulus ratio

        Returns:
        --------
        float : Stiffness proxy in pith-modulus units [mm^4]
        '''
        return modulusRatio * self.rindMoment + self.pithMoment

    def toDict(self) -> dict:
        '''Convert to dictionary for JSON serialization.'''
        return {
            'label': self.label,
            'level': self.level,
            'pithMoment': self.pithMoment,
            'rindMoment': self.rindMoment,
            'totalMoment': self.totalMoment,
        }
