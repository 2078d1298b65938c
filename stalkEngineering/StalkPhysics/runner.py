# -- StalkPhysics Analysis Runner -- #

'''
Command-line entry point for stalk cross-section shape analyses.

Builds (or loads) a registered population, reports its principal
component bases, runs the torsional stiffness error study, and optionally
exports sensitivity cases or fits the shape model to a digitized section.

Usage:
    python -m stalkEngineering.StalkPhysics.runner                      # 50 stalks, 3 PCs, E_ratio 20
    python -m stalkEngineering.StalkPhysics.runner --stalks 100 --slices -10 0 10
    python -m stalkEngineering.StalkPhysics.runner --interior normalized --e-ratio 40
    python -m stalkEngineering.StalkPhysics.runner --export-cases cases/ --percent-change 10
    python -m stalkEngineering.StalkPhysics.runner --fit section.csv

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import argparse

import numpy as np

from stalkEngineering.StalkPhysics import constants as const
from stalkEngineering.StalkPhysics.errors import EmptyPopulationError
from stalkEngineering.StalkPhysics.export.caseExporter import CaseExporter
from stalkEngineering.StalkPhysics.geometry.parameters import ParameterBounds
from stalkEngineering.StalkPhysics.mechanics.materials import MaterialSampler
from stalkEngineering.StalkPhysics.mechanics.stiffness import ErrorPercentileSummary, StiffnessStudy
from stalkEngineering.StalkPhysics.optimization.curveFitter import CurveFitter
from stalkEngineering.StalkPhysics.population.builder import PopulationBuilder
from stalkEngineering.StalkPhysics.population.store import PopulationStore
from stalkEngineering.StalkPhysics.reconstruction.reconstructor import EllipseResidualReconstructor
from stalkEngineering.StalkPhysics.visualization.stalkPlots import (
    plotErrorPercentiles,
    plotExplainedVariance,
    plotReconstructionLevels,
)


def buildParser() -> argparse.ArgumentParser:
    '''Build the CLI argument parser.'''
    parser = argparse.ArgumentParser(
        description='StalkPhysics -- Stalk cross-section shape and stiffness analysis',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        '--stalks', type=int, default=50,
        help='Synthetic stalks per slice (default: 50)',
    )
    parser.add_argument(
        '--slices', type=float, nargs='+', default=[0.0],
        help='Slice positions relative to the node in mm (default: 0)',
    )
    parser.add_argument(
        '--components', type=int, default=3,
        help='Highest number of principal components added to the ellipse (default: 3)',
    )
    parser.add_argument(
        '--e-ratio', type=float, default=const.defaultModulusRatio,
        help=f'Rind-to-pith modulus ratio (default: {const.defaultModulusRatio:g})',
    )
    parser.add_argument(
        '--seed', type=int, default=7,
        help='Random seed for the synthetic population (default: 7)',
    )
    parser.add_argument(
        '--points', type=int, default=const.defaultSampleCount,
        help=f'Angular samples per boundary (default: {const.defaultSampleCount})',
    )
    parser.add_argument(
        '--dr', type=float, default=const.defaultRadialStep,
        help=f'Radial integration step in mm (default: {const.defaultRadialStep})',
    )
    parser.add_argument(
        '--interior', type=str, default='pca', choices=['pca', 'normalized'],
        help='Interior reconstruction policy (default: pca)',
    )
    parser.add_argument(
        '--all-slices', action='store_true',
        help='Use every standard slice position around the node (overrides --slices)',
    )
    parser.add_argument(
        '--noise', type=float, nargs='?', default=0.0, const=const.defaultNoiseAmplitude,
        help=f'Synthesis noise relative to the half diameters (default: 0; flag alone: {const.defaultNoiseAmplitude:g})',
    )
    parser.add_argument(
        '--load-store', type=str, default=None,
        help='Load a saved population store (.npz) instead of synthesizing',
    )
    parser.add_argument(
        '--save-store', type=str, default=None,
        help='Save the population store (.npz)',
    )
    parser.add_argument(
        '--export-cases', type=str, default=None,
        help='Directory for sensitivity case JSON files (first stored sample)',
    )
    parser.add_argument(
        '--percent-change', type=float, default=10.0,
        help='Sensitivity perturbation size in percent (default: 10)',
    )
    parser.add_argument(
        '--materials', type=str, default='avg', choices=list(MaterialSampler.methods),
        help='Material property method for exported cases (default: avg)',
    )
    parser.add_argument(
        '--fit', type=str, default=None,
        help='Fit the shape model to a digitized section (CSV of x, y per row) and exit',
    )
    parser.add_argument(
        '--no-dashboard', action='store_true',
        help='Skip plot generation (console output only)',
    )

    return parser


def loadStore(args: argparse.Namespace) -> PopulationStore:
    '''Load or synthesize the population store from args.'''
    if args.load_store:
        print(f'Loading population store: {args.load_store}')
        return PopulationStore.load(args.load_store)

    builder = PopulationBuilder(nPoints=args.points, noiseAmplitude=args.noise)
    return builder.synthesize(
        slicePositions=const.defaultSlicePositions if args.all_slices else args.slices,
        stalksPerSlice=args.stalks,
        seed=args.seed,
        showProgress=True,
    )


def runFit(csvPath: str) -> None:
    '''Fit the shape model to a digitized section and print the result.'''
    points = np.loadtxt(csvPath, delimiter=',')
    fitter = CurveFitter(ParameterBounds.realStalk())
    result = fitter.fitMultiStart(points[:, 0], points[:, 1], nStarts=5, seed=0)
    result.printSummary()
    result.params.printSummary()


def runStudy(
    store: PopulationStore,
    nComponents: int = 3,
    modulusRatio: float = const.defaultModulusRatio,
    dr: float = const.defaultRadialStep,
    interiorPolicy: str = 'pca',
    showDashboard: bool = True,
) -> ErrorPercentileSummary:
    '''
    Run the stiffness error study on a population.

    Parameters:
    -----------
    store : PopulationStore
        Registered population with bases built
    nComponents : int
        Highest approximation level
    modulusRatio : float
        Rind-to-pith modulus ratio
    dr : float
        Radial integration step [mm]
    interiorPolicy : str
        'pca' or 'normalized'
    showDashboard : bool
        Whether to generate and show the plots

    Returns:
    --------
    ErrorPercentileSummary : Percentile table
    '''
    print()
    print('=' * 62)
    print('  STALKPHYSICS ANALYSIS')
    print('=' * 62)
    print()

    store.printSummary()
    print()
    store.requireBases()
    for channel in ('exterior', 'interior'):
        store.basis(channel).printSummary()
        print()

    study = StiffnessStudy(
        store,
        nComponents=nComponents,
        modulusRatio=modulusRatio,
        dr=dr,
        interiorPolicy=interiorPolicy,
    )
    summary = study.run()
    print()
    summary.printTable()

    if showDashboard:
        print('  Generating plots...')
        sample = store.row(0)
        reconstructor = EllipseResidualReconstructor(store, interiorPolicy)
        plotReconstructionLevels(sample, reconstructor.levels(sample.slicePosition, sample.stalkIndex, nComponents)).show()
        plotExplainedVariance(store.basis('exterior')).show()
        plotErrorPercentiles(summary).show()
    else:
        print('  Plot generation skipped (--no-dashboard).')

    return summary


def main() -> None:
    '''CLI entry point.'''
    parser = buildParser()
    args = parser.parse_args()

    if args.fit:
        runFit(args.fit)
        return

    store = loadStore(args)
    if args.save_store:
        store.save(args.save_store)
        print(f'Saved population store: {args.save_store}')

    try:
        runStudy(
            store,
            nComponents=args.components,
            modulusRatio=args.e_ratio,
            dr=args.dr,
            interiorPolicy=args.interior,
            showDashboard=not args.no_dashboard,
        )
    except EmptyPopulationError as exc:
        parser.exit(1, f'Error: {exc}\n')

    if args.export_cases:
        sample = store.row(0)
        materials = MaterialSampler(seed=args.seed).sample(args.materials)
        exporter = CaseExporter(outputDir=args.export_cases)
        records = exporter.buildSensitivityCases(
            store,
            sample.slicePosition,
            sample.stalkIndex,
            args.components,
            args.percent_change,
            materials,
        )
        exporter.writeCases(records)

    print()
    print('=' * 62)
    print('  Analysis complete.')
    print('=' * 62)


if __name__ == '__main__':
    main()
