# -- Parametric Curve Fitter -- #

'''
Fits the synthesizer's shape model to a real (digitized) section boundary.

The objective is the RMS distance between model and real points matched
by angular index. SLSQP handles the box bounds and the inequality
constraint majorDiameter - minorDiameter >= 0; the variables are scaled by
a tenth of their bound ranges for conditioning.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from scipy.optimize import minimize

from stalkEngineering.StalkPhysics.geometry.boundary import uniformTheta
from stalkEngineering.StalkPhysics.geometry.parameters import ShapeParameters, ParameterBounds
from stalkEngineering.StalkPhysics.geometry.synthesizer import shapeModel
from stalkEngineering.utilsSE import stripClosingPoint


######################################################################
# -- Fit Result -- #
######################################################################

@dataclass
class FitResult:
    '''Result of a curve fit.'''
    success: bool
    params: ShapeParameters
    finalRms: float
    initialRms: float
    iterations: int
    functionEvaluations: int
    status: int
    message: str
    history: list[float] = field(default_factory=list)     # RMS after each iteration

    def toDict(self) -> dict:
        '''Convert to dictionary for JSON serialization.'''
        return {
            'success': self.success,
            'params': self.params.toDict(),
            'finalRms': self.finalRms,
            'initialRms': self.initialRms,
            'iterations': self.iterations,
            'functionEvaluations': self.functionEvaluations,
            'status': self.status,
            'message': self.message,
            'history': list(self.history),
        }

    def printSummary(self) -> None:
        '''Print fit diagnostics.'''
        print('=' * 58)
        print('  CURVE FIT RESULT')
        print('=' * 58)
        print(f'  Success:          {self.success}')
        print(f'  Message:          {self.message}')
        print(f'  Iterations:       {self.iterations}')
        print(f'  Evaluations:      {self.functionEvaluations}')
        print(f'  Initial RMS:      {self.initialRms:.6g}')
        print(f'  Final RMS:        {self.finalRms:.6g}')
        print('=' * 58)


######################################################################
# -- Curve Fitter -- #
######################################################################

class CurveFitter:
    '''
    Constrained least-distance fit of ShapeParameters to a boundary.

    Usage:
        fitter = CurveFitter(ParameterBounds.realStalk())
        result = fitter.fit(xReal, yReal, ShapeParameters.realStalkGuess())
    '''

    def __init__(
        self,
        bounds: ParameterBounds | None = None,
        maxIterations: int = 500,
        tolerance: float = 1e-12,
    ) -> None:
        '''
        Parameters:
        -----------
        bounds : ParameterBounds | None
            Box bounds (real-stalk preset when None)
        maxIterations : int
            SLSQP iteration limit, the only early exit
        tolerance : float
            SLSQP objective tolerance
        '''
        self.bounds = bounds if bounds is not None else ParameterBounds.realStalk()
        self.maxIterations = maxIterations
        self.tolerance = tolerance

        # Scale variables to ~10 units across their bound ranges
        span = self.bounds.upper - self.bounds.lower
        self._scales = np.where(span > 0.0, span / 10.0, 1.0)

    @staticmethod
    def rmsDistance(params: ShapeParameters, xReal: np.ndarray, yReal: np.ndarray) -> float:
        '''
        RMS point distance between the model and a boundary, matched by angular index.

        Parameters:
        -----------
        params : ShapeParameters
            Model parameters
        xReal, yReal : np.ndarray
            Boundary points at theta_i = 2*pi*i/N

        Returns:
        --------
        float : sqrt(sum(dx^2 + dy^2) / N)
        '''
        xModel, yModel = shapeModel(params, uniformTheta(len(xReal)))
        return float(np.sqrt(np.mean((xModel - xReal)**2 + (yModel - yReal)**2)))

    def fit(
        self,
        xReal: np.ndarray,
        yReal: np.ndarray,
        initialGuess: ShapeParameters | None = None,
    ) -> FitResult:
        '''
        Fit the shape model to a boundary.

        Parameters:
        -----------
        xReal, yReal : np.ndarray
            Boundary points ordered by angle index (a repeated closing point is dropped)
        initialGuess : ShapeParameters | None
            Starting point (real-stalk guess when None); clamped into the bounds

        Returns:
        --------
        FitResult : Best parameters and optimizer diagnostics
        '''
        xReal, yReal = stripClosingPoint(xReal, yReal)
        theta = uniformTheta(len(xReal))
        guess = initialGuess if initialGuess is not None else ShapeParameters.realStalkGuess()
        guess = guess.clampedTo(self.bounds)

        def meanSquare(xScaled: np.ndarray) -> float:
            xModel, yModel = shapeModel(ShapeParameters.fromVector(xScaled * self._scales), theta)
            return float(np.mean((xModel - xReal)**2 + (yModel - yReal)**2))

        history: list[float] = []

        def recordIteration(xScaled: np.ndarray) -> None:
            history.append(float(np.sqrt(meanSquare(xScaled))))

        constraints = [{
            'type': 'ineq',
            'fun': lambda xScaled: xScaled[0] * self._scales[0] - xScaled[1] * self._scales[1],
        }]
        scaledBounds = list(zip(self.bounds.lower / self._scales, self.bounds.upper / self._scales))

        x0 = guess.toVector() / self._scales
        initialRms = float(np.sqrt(meanSquare(x0)))

        result = minimize(
            meanSquare,
            x0,
            method='SLSQP',
            bounds=scaledBounds,
            constraints=constraints,
            callback=recordIteration,
            options={'maxiter': self.maxIterations, 'ftol': self.tolerance},
        )

        # Guard against bound round-off from the scaling before rebuilding parameters
        vector = np.clip(result.x * self._scales, self.bounds.lower, self.bounds.upper)
        vector[1] = min(vector[1], vector[0])
        params = ShapeParameters.fromVector(vector)

        return FitResult(
            success=bool(result.success),
            params=params,
            finalRms=self.rmsDistance(params, xReal, yReal),
            initialRms=initialRms,
            iterations=int(result.nit),
            functionEvaluations=int(result.nfev),
            status=int(result.status),
            message=str(result.message),
            history=history,
        )

    def fitMultiStart(
        self,
        xReal: np.ndarray,
        yReal: np.ndarray,
        nStarts: int = 5,
        seed: int | None = None,
        initialGuess: ShapeParameters | None = None,
    ) -> FitResult:
        '''
        Repeat the fit from the initial guess and from random starts inside
        the bounds; keep the lowest final RMS.

        Parameters:
        -----------
        xReal, yReal : np.ndarray
            Boundary points
        nStarts : int
            Total starts including the initial guess
        seed : int | None
            Seed for the random starts
        initialGuess : ShapeParameters | None
            First start (real-stalk guess when None)

        Returns:
        --------
        FitResult : Best fit over all starts
        '''
        rng = np.random.default_rng(seed)
        best = self.fit(xReal, yReal, initialGuess)

        for _ in range(nStarts - 1):
            start = ShapeParameters.fromVector(rng.uniform(self.bounds.lower, self.bounds.upper))
            if start.minorDiameter > start.majorDiameter:
                start.majorDiameter, start.minorDiameter = start.minorDiameter, start.majorDiameter
            candidate = self.fit(xReal, yReal, start)
            if candidate.finalRms < best.finalRms:
                best = candidate

        return best
