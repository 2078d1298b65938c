# -- Ellipse + Residual Reconstructor -- #

'''
Approximate section boundaries at increasing levels of detail.

With residual = ellipse - true radius and its population mean m:

    r_0(theta) = ellipse(theta)
    r_K(theta) = ellipse(theta) - (m(theta) + sum_{k=1..K} c_k * phi_k(theta)),  K >= 1

Step 0 -> 1 therefore adds the mean residual together with the first
component; every later step adds exactly one component. Keeping m makes
the full-rank level reproduce the registered boundary.

The interior (pith) boundary is reconstructed either from its own
ellipse and residual basis ('pca') or as an inward normal offset of the
reconstructed exterior by the sample's average rind thickness
('normalized').

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

from dataclasses import dataclass, replace

import numpy as np

from stalkEngineering.StalkPhysics.errors import DegenerateGeometryError
from stalkEngineering.StalkPhysics.geometry.boundary import BoundaryCurve
from stalkEngineering.StalkPhysics.geometry.ellipse import ellipseRadius
from stalkEngineering.StalkPhysics.mechanics.materials import MaterialProperties
from stalkEngineering.StalkPhysics.pca.basis import PrincipalComponentBasis
from stalkEngineering.StalkPhysics.population.store import PopulationStore
from stalkEngineering.StalkPhysics.registration.registrar import resampleRadius
from stalkEngineering.utilsSE import parallelOffset

interiorPolicies: tuple[str, ...] = ('pca', 'normalized')


#--------------------------------------------------------------------#
# -- Boundary Reconstruction -- #
#--------------------------------------------------------------------#

def reconstructRadius(
    theta: np.ndarray,
    majorDiameter: float,
    minorDiameter: float,
    basis: PrincipalComponentBasis,
    coefficients: np.ndarray,
    nComponents: int,
) -> np.ndarray:
    '''
    Ellipse radius minus the residual reconstructed from nComponents components.

    Parameters:
    -----------
    theta : np.ndarray
        Uniform angles [rad]
    majorDiameter, minorDiameter : float
        Fitted ellipse diameters [mm]
    basis : PrincipalComponentBasis
        Residual (ellipse minus true radius) basis
    coefficients : np.ndarray
        Sample coefficients on the basis
    nComponents : int
        Level K; 0 returns the ellipse alone

    Returns:
    --------
    np.ndarray : Reconstructed radius [mm]
    '''
    ellipse = ellipseRadius(theta, majorDiameter, minorDiameter)
    if nComponents == 0:
        return ellipse
    return ellipse - basis.reconstruct(coefficients, nComponents)


def normalizedInterior(exterior: BoundaryCurve, rindThickness: float) -> BoundaryCurve:
    '''
    Interior boundary as the exterior offset inward along the local normal.

    Parameters:
    -----------
    exterior : BoundaryCurve
        Counter-clockwise exterior boundary
    rindThickness : float
        Offset distance [mm]

    Returns:
    --------
    BoundaryCurve : Offset curve resampled at the exterior's angles
    '''
    if rindThickness <= 0.0:
        raise DegenerateGeometryError(f'Rind thickness must be positive, got {rindThickness}')
    xInner, yInner = parallelOffset(exterior.x, exterior.y, rindThickness)
    return BoundaryCurve(theta=exterior.theta, radius=resampleRadius(xInner, yInner, exterior.theta))


@dataclass(frozen=True)
class Reconstruction:
    '''Approximate exterior and interior boundaries at one level.'''
    level: int
    exterior: BoundaryCurve
    interior: BoundaryCurve

    @property
    def label(self) -> str:
        '''Approximation label ('ellipse' or 'pcK').'''
        return 'ellipse' if self.level == 0 else f'pc{self.level}'


class EllipseResidualReconstructor:
    '''
    Reconstructs stored samples from their ellipse fits and residual bases.
    '''

    def __init__(self, store: PopulationStore, interiorPolicy: str = 'pca') -> None:
        '''
        Parameters:
        -----------
        store : PopulationStore
            Population with 'exterior' (and for 'pca', 'interior') bases built
        interiorPolicy : str
            'pca' or 'normalized'
        '''
        if interiorPolicy not in interiorPolicies:
            raise ValueError(f'Unknown interior policy: {interiorPolicy}. Options: {", ".join(interiorPolicies)}')
        store.requireBases(('exterior', 'interior') if interiorPolicy == 'pca' else ('exterior',))
        self.store = store
        self.interiorPolicy = interiorPolicy

    @property
    def maxComponents(self) -> int:
        '''Largest level available for every boundary the policy uses.'''
        counts = [self.store.basis('exterior').nComponents]
        if self.interiorPolicy == 'pca':
            counts.append(self.store.basis('interior').nComponents)
        return min(counts)

    def reconstruct(self, slicePosition: float, stalkIndex: int, nComponents: int) -> Reconstruction:
        '''
        Reconstruct one stored sample at level K.

        Parameters:
        -----------
        slicePosition : float
            Slice position of the sample
        stalkIndex : int
            Stalk index of the sample
        nComponents : int
            Level K

        Returns:
        --------
        Reconstruction : Approximate boundaries
        '''
        sample = self.store.get(slicePosition, stalkIndex)
        theta = sample.exterior.theta

        exteriorFit = sample.exteriorEllipse
        exterior = BoundaryCurve(theta=theta, radius=reconstructRadius(
            theta,
            exteriorFit.majorDiameter,
            exteriorFit.minorDiameter,
            self.store.basis('exterior'),
            self.store.coefficients(slicePosition, stalkIndex, 'exterior'),
            nComponents,
        )).requirePositive('reconstructed exterior')

        if self.interiorPolicy == 'normalized':
            interior = normalizedInterior(exterior, sample.rindThickness)
        else:
            interiorFit = sample.interiorEllipse
            interior = BoundaryCurve(theta=theta, radius=reconstructRadius(
                theta,
                interiorFit.majorDiameter,
                interiorFit.minorDiameter,
                self.store.basis('interior'),
                self.store.coefficients(slicePosition, stalkIndex, 'interior'),
                nComponents,
            ))

        return Reconstruction(level=nComponents, exterior=exterior, interior=interior.requirePositive('reconstructed interior'))

    def levels(self, slicePosition: float, stalkIndex: int, maxComponents: int) -> list[Reconstruction]:
        '''Reconstructions at every level 0..maxComponents, in order.'''
        if maxComponents > self.maxComponents:
            raise ValueError(f'Requested {maxComponents} components, basis rank is {self.maxComponents}')
        return [self.reconstruct(slicePosition, stalkIndex, k) for k in range(maxComponents + 1)]


#--------------------------------------------------------------------#
# -- Sensitivity Cases -- #
#--------------------------------------------------------------------#

@dataclass(frozen=True)
class SectionCase:
    '''
    Parametric section: ellipse + K exterior components, normalized interior,
    and material moduli.
    '''
    majorDiameter: float
    minorDiameter: float
    coefficients: np.ndarray          # Exterior residual coefficients, length K
    rindThickness: float
    materials: MaterialProperties
    caseNumber: int = 0
    description: str = 'base'

    @property
    def nComponents(self) -> int:
        '''Number of exterior components K.'''
        return len(self.coefficients)


def baseCase(store: PopulationStore, slicePosition: float, stalkIndex: int, nComponents: int, materials: MaterialProperties) -> SectionCase:
    '''
    Unperturbed case built from a stored sample.

    Parameters:
    -----------
    store : PopulationStore
        Population with an 'exterior' basis
    slicePosition, stalkIndex : float, int
        Sample key
    nComponents : int
        Exterior components kept
    materials : MaterialProperties
        Moduli for the case

    Returns:
    --------
    SectionCase : Case 0
    '''
    sample = store.get(slicePosition, stalkIndex)
    coefficients = np.array(store.coefficients(slicePosition, stalkIndex, 'exterior')[:nComponents], dtype=float)
    return SectionCase(
        majorDiameter=sample.exteriorEllipse.majorDiameter,
        minorDiameter=sample.exteriorEllipse.minorDiameter,
        coefficients=coefficients,
        rindThickness=sample.rindThickness,
        materials=materials,
    )


def perturbCase(case: SectionCase, target: str | int, multiplier: float, caseNumber: int = 0) -> SectionCase:
    '''
    One-parameter perturbation of a case; everything else stays at the base value.

    Parameters:
    -----------
    case : SectionCase
        Base case
    target : str | int
        'majorDiameter', 'minorDiameter', 'rindThickness', 'rindModulus',
        'pithModulus', or a 1-based component index
    multiplier : float
        Factor applied to the target
    caseNumber : int
        Case number of the perturbed case

    Returns:
    --------
    SectionCase : Perturbed copy
    '''
    if isinstance(target, (int, np.integer)):
        return perturbComponent(case, int(target), multiplier, caseNumber)

    if target in ('majorDiameter', 'minorDiameter', 'rindThickness'):
        changes = {target: getattr(case, target) * multiplier}
    elif target == 'rindModulus':
        changes = {'materials': case.materials.scaled(rindFactor=multiplier)}
    elif target == 'pithModulus':
        changes = {'materials': case.materials.scaled(pithFactor=multiplier)}
    else:
        raise ValueError(f'Unknown perturbation target: {target}')

    return replace(case, caseNumber=caseNumber, description=f'{target} x {multiplier:g}', **changes)


def perturbComponent(case: SectionCase, componentIndex: int, multiplier: float, caseNumber: int = 0) -> SectionCase:
    '''
    Scale the coefficient of exterior component j (1-based).

    Parameters:
    -----------
    case : SectionCase
        Base case
    componentIndex : int
        Component j in 1..K
    multiplier : float
        Factor applied to coefficient j
    caseNumber : int
        Case number of the perturbed case

    Returns:
    --------
    SectionCase : Copy with only coefficient j changed
    '''
    if not 1 <= componentIndex <= case.nComponents:
        raise ValueError(f'Component index {componentIndex} outside 1..{case.nComponents}')
    coefficients = np.array(case.coefficients, dtype=float)
    coefficients[componentIndex - 1] *= multiplier
    return replace(case, coefficients=coefficients, caseNumber=caseNumber, description=f'PC{componentIndex} x {multiplier:g}')


def sensitivityCases(case: SectionCase, percentChange: float) -> list[SectionCase]:
    '''
    Base case followed by one perturbation per parameter.

    Case numbering: 0 base, 1 major diameter, 2 minor diameter, 3 rind
    thickness, 4 rind modulus, 5 pith modulus, 5 + j component j.

    Parameters:
    -----------
    case : SectionCase
        Base case
    percentChange : float
        Perturbation size [%]

    Returns:
    --------
    list[SectionCase] : 6 + K cases
    '''
    multiplier = 1.0 + percentChange / 100.0
    targets: list[str | int] = ['majorDiameter', 'minorDiameter', 'rindThickness', 'rindModulus', 'pithModulus']
    targets.extend(range(1, case.nComponents + 1))

    cases = [replace(case, caseNumber=0, description='base')]
    for caseNumber, target in enumerate(targets, start=1):
        cases.append(perturbCase(case, target, multiplier, caseNumber))
    return cases


def caseBoundaries(case: SectionCase, exteriorBasis: PrincipalComponentBasis, theta: np.ndarray) -> Reconstruction:
    '''
    Exterior and normalized interior boundaries of a case.

    Parameters:
    -----------
    case : SectionCase
        Section definition
    exteriorBasis : PrincipalComponentBasis
        Exterior residual basis the coefficients refer to
    theta : np.ndarray
        Uniform angles of the basis [rad]

    Returns:
    --------
    Reconstruction : Boundaries at level K
    '''
    exterior = BoundaryCurve(theta=theta, radius=reconstructRadius(
        theta, case.majorDiameter, case.minorDiameter, exteriorBasis, case.coefficients, case.nComponents,
    )).requirePositive('case exterior')
    interior = normalizedInterior(exterior, case.rindThickness).requirePositive('case interior')
    return Reconstruction(level=case.nComponents, exterior=exterior, interior=interior)
