# -- Synthetic Population Builder -- #

'''
Builds a registered population store from synthesized sections.

For every (slice, stalk) pair: draw a shape and a rind thickness,
synthesize exterior and interior boundaries, register the exterior and
carry the interior through the same transform, fit both ellipses, and
measure the average rind thickness. Bases are built once over the whole
population.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import numpy as np
from scipy.spatial import cKDTree
from tqdm import tqdm

from stalkEngineering.StalkPhysics import constants as const
from stalkEngineering.StalkPhysics.errors import StalkPhysicsError
from stalkEngineering.StalkPhysics.geometry.boundary import BoundaryCurve, uniformTheta
from stalkEngineering.StalkPhysics.geometry.ellipse import fitEllipse
from stalkEngineering.StalkPhysics.geometry.parameters import ShapeParameters
from stalkEngineering.StalkPhysics.geometry.synthesizer import BoundarySynthesizer, SynthesisRanges
from stalkEngineering.StalkPhysics.population.store import CrossSectionSample, PopulationStore
from stalkEngineering.StalkPhysics.registration.registrar import ShapeRegistrar


def averageRindThickness(exterior: BoundaryCurve, interior: BoundaryCurve, refinement: int = 10) -> float:
    '''
    Mean distance from each exterior point to the nearest point of the interior.

    Parameters:
    -----------
    exterior : BoundaryCurve
        Exterior boundary
    interior : BoundaryCurve
        Interior boundary
    refinement : int
        Interior densification factor for the nearest-point query

    Returns:
    --------
    float : Average rind thickness [mm]
    '''
    denseTheta = uniformTheta(interior.nPoints * refinement)
    denseRadius = np.interp(denseTheta, interior.theta, interior.radius, period=2.0 * np.pi)
    tree = cKDTree(np.column_stack([denseRadius * np.cos(denseTheta), denseRadius * np.sin(denseTheta)]))

    distances, _ = tree.query(np.column_stack([exterior.x, exterior.y]))
    return float(np.mean(distances))


class PopulationBuilder:
    '''
    Synthesizes and registers a population of stalk sections.
    '''

    def __init__(
        self,
        nPoints: int = const.defaultSampleCount,
        ranges: SynthesisRanges | None = None,
        noiseAmplitude: float = 0.0,
        normalizeScale: bool = False,
    ) -> None:
        '''
        Parameters:
        -----------
        nPoints : int
            Angular samples per boundary
        ranges : SynthesisRanges | None
            Random shape ranges (defaults when None)
        noiseAmplitude : float
            Synthesis noise relative to the half diameters
        normalizeScale : bool
            Register to unit equivalent radius instead of keeping millimeters
        '''
        self.ranges = ranges if ranges is not None else SynthesisRanges()
        self.synthesizer = BoundarySynthesizer(nPoints, noiseAmplitude=noiseAmplitude)
        self.registrar = ShapeRegistrar(nPoints, normalizeScale=normalizeScale)

    def buildSample(
        self,
        slicePosition: float,
        stalkIndex: int,
        params: ShapeParameters,
        rindThickness: float,
        rng: np.random.Generator | None = None,
    ) -> CrossSectionSample:
        '''
        Synthesize and register one section.

        Parameters:
        -----------
        slicePosition, stalkIndex : float, int
            Sample key
        params : ShapeParameters
            Exterior shape
        rindThickness : float
            Interior offset [mm]
        rng : np.random.Generator | None
            Noise source

        Returns:
        --------
        CrossSectionSample : Registered sample with ellipse fits
        '''
        exteriorRaw = self.synthesizer.synthesize(params, rng)
        interiorRaw = self.synthesizer.synthesizeInterior(exteriorRaw, rindThickness)

        registration = self.registrar.register(exteriorRaw.x, exteriorRaw.y)
        exterior = registration.curve.requirePositive('registered exterior')
        interior = self.registrar.applyTransform(registration.transform, interiorRaw.x, interiorRaw.y)
        interior = interior.requirePositive('registered interior')

        return CrossSectionSample(
            slicePosition=slicePosition,
            stalkIndex=stalkIndex,
            exterior=exterior,
            interior=interior,
            exteriorEllipse=fitEllipse(exterior.theta, exterior.radius),
            interiorEllipse=fitEllipse(interior.theta, interior.radius),
            rindThickness=averageRindThickness(exterior, interior),
            params=exteriorRaw.params,
        )

    def synthesize(
        self,
        slicePositions: tuple[float, ...] | list[float] = (0.0,),
        stalksPerSlice: int = 50,
        seed: int | None = None,
        buildBases: bool = True,
        showProgress: bool = False,
    ) -> PopulationStore:
        '''
        Build a store with stalks 1..stalksPerSlice at every slice position.

        Parameters:
        -----------
        slicePositions : tuple | list
            Slice positions relative to the node [mm]
        stalksPerSlice : int
            Stalks per slice
        seed : int | None
            Seed for shape, rind, and noise draws
        buildBases : bool
            Build the per-channel bases after all samples are registered
        showProgress : bool
            Show a tqdm progress bar

        Returns:
        --------
        PopulationStore : Registered population
        '''
        rng = np.random.default_rng(seed)
        samples: list[CrossSectionSample] = []
        problems: list[tuple[float, int]] = []

        keys = [(float(s), k) for s in slicePositions for k in range(1, stalksPerSlice + 1)]
        for slicePosition, stalkIndex in tqdm(keys, desc='Building population', disable=not showProgress):
            params = self.ranges.sampleParameters(rng)
            rindThickness = self.ranges.sampleRindThickness(rng)
            try:
                samples.append(self.buildSample(slicePosition, stalkIndex, params, rindThickness, rng))
            except StalkPhysicsError as exc:
                problems.append((slicePosition, stalkIndex))
                tqdm.write(f'  Warning: slice {slicePosition:g}, stalk {stalkIndex} not built ({exc})')

        store = PopulationStore(samples, buildProblems=problems)
        if buildBases and len(store) >= 2:
            store.buildBases()
        return store
