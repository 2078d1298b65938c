# -- Sensitivity Case Exporter -- #

'''
Packages section cases as data for a downstream transverse-compression
solver: closed exterior and interior point lists in a consistent length
unit, the exterior reference points nearest 90 and 270 degrees, and the
rind and pith moduli. Cases are written as JSON, one file per case.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import json
import os
from dataclasses import dataclass

import numpy as np

from stalkEngineering.StalkPhysics import constants as const
from stalkEngineering.StalkPhysics.geometry.boundary import BoundaryCurve
from stalkEngineering.StalkPhysics.mechanics.materials import MaterialProperties
from stalkEngineering.StalkPhysics.population.store import PopulationStore
from stalkEngineering.StalkPhysics.reconstruction.reconstructor import baseCase, caseBoundaries, sensitivityCases


def jobName(group: str, stalkIndex: int, caseNumber: int) -> str:
    '''Solver job name for one case.'''
    return f'Group_{group}_Sensitivity_{stalkIndex}_{caseNumber}'


@dataclass
class CaseRecord:
    '''Solver input for one (group, stalk, case).'''
    group: str
    stalkIndex: int
    caseNumber: int
    description: str
    exterior: np.ndarray                # (N + 1, 2) closed, scaled
    interior: np.ndarray                # (N + 1, 2) closed, scaled
    referencePoints: np.ndarray         # (2, 2) exterior points nearest 90 and 270 deg, scaled
    materials: MaterialProperties
    unitScale: float

    @property
    def jobName(self) -> str:
        '''Solver job name.'''
        return jobName(self.group, self.stalkIndex, self.caseNumber)

    def toDict(self) -> dict:
        '''Convert to dictionary for JSON serialization.'''
        return {
            'jobName': self.jobName,
            'group': self.group,
            'stalk': self.stalkIndex,
            'case': self.caseNumber,
            'description': self.description,
            'unitScale': self.unitScale,
            'rindModulus': self.materials.rindModulus,
            'pithModulus': self.materials.pithModulus,
            'referencePoints': {
                'deg90': self.referencePoints[0].tolist(),
                'deg270': self.referencePoints[1].tolist(),
            },
            'exterior': self.exterior.tolist(),
            'interior': self.interior.tolist(),
        }


class CaseExporter:
    '''
    Builds and writes downstream case records.
    '''

    def __init__(self, unitScale: float = const.exportUnitScale, outputDir: str = 'sensitivityCases') -> None:
        '''
        Parameters:
        -----------
        unitScale : float
            Factor applied to every coordinate (millimeters to micrometers by default)
        outputDir : str
            Directory for writeCases()
        '''
        self.unitScale = unitScale
        self.outputDir = outputDir

    def buildCase(
        self,
        exterior: BoundaryCurve,
        interior: BoundaryCurve,
        materials: MaterialProperties,
        group: str,
        stalkIndex: int,
        caseNumber: int = 0,
        description: str = 'base',
    ) -> CaseRecord:
        '''
        Convert one pair of polar boundaries into a case record.

        Parameters:
        -----------
        exterior, interior : BoundaryCurve
            Section boundaries [mm]
        materials : MaterialProperties
            Rind and pith moduli
        group : str
            Group label used in the job name
        stalkIndex : int
            Stalk identifier
        caseNumber : int
            Case number
        description : str
            What the case perturbs

        Returns:
        --------
        CaseRecord : Scaled, closed point lists and reference points
        '''
        point90, point270 = exterior.referencePoints()
        return CaseRecord(
            group=str(group),
            stalkIndex=int(stalkIndex),
            caseNumber=int(caseNumber),
            description=description,
            exterior=self.unitScale * exterior.closedXY(),
            interior=self.unitScale * interior.closedXY(),
            referencePoints=self.unitScale * np.array([point90, point270]),
            materials=materials,
            unitScale=self.unitScale,
        )

    def buildSensitivityCases(
        self,
        store: PopulationStore,
        slicePosition: float,
        stalkIndex: int,
        nComponents: int,
        percentChange: float,
        materials: MaterialProperties,
        group: str = '1',
    ) -> list[CaseRecord]:
        '''
        Base case and every one-parameter perturbation of a stored sample.

        Parameters:
        -----------
        store : PopulationStore
            Population with an 'exterior' basis
        slicePosition, stalkIndex : float, int
            Sample key
        nComponents : int
            Exterior components in the base case
        percentChange : float
            Perturbation size [%]
        materials : MaterialProperties
            Base moduli
        group : str
            Group label

        Returns:
        --------
        list[CaseRecord] : 6 + nComponents records in case order
        '''
        base = baseCase(store, slicePosition, stalkIndex, nComponents, materials)
        basis = store.basis('exterior')

        records = []
        for case in sensitivityCases(base, percentChange):
            boundaries = caseBoundaries(case, basis, store.theta)
            records.append(self.buildCase(
                boundaries.exterior,
                boundaries.interior,
                case.materials,
                group,
                stalkIndex,
                case.caseNumber,
                case.description,
            ))
        return records

    def writeCases(self, records: list[CaseRecord], outputDir: str | None = None) -> list[str]:
        '''
        Write one JSON file per case.

        Parameters:
        -----------
        records : list[CaseRecord]
            Cases to write
        outputDir : str | None
            Target directory (the exporter's default when None)

        Returns:
        --------
        list[str] : Written file paths
        '''
        outputDir = outputDir if outputDir is not None else self.outputDir
        os.makedirs(outputDir, exist_ok=True)

        paths = []
        for record in records:
            path = os.path.join(outputDir, f'{record.jobName}.json')
            with open(path, 'w') as f:
                json.dump(record.toDict(), f, indent=2)
            paths.append(path)

        print(f'Wrote {len(paths)} case files to {outputDir}')
        return paths
