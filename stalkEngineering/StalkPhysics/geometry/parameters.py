# -- Stalk Shape Parameters Dataclass -- #

'''
Parametric cross-section shape definition shared by the boundary
synthesizer and the optimization-based curve fitter.

The parameter vector order is fixed; the fitter works on the flat vector
and converts back through fromVector().

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import json
import math
from dataclasses import dataclass, asdict, fields, replace

import numpy as np


@dataclass
class ShapeParameters:
    '''
    Parameters defining a synthetic stalk cross-section.
    Lengths in millimeters, angles in radians.

    Field order matches the optimization vector used by CurveFitter.
    '''

    #--------------------------------------------------------------------#
    # -- Primary Dimensions -- #
    #--------------------------------------------------------------------#
    # Diameter along the notch axis [mm]
    majorDiameter: float = 22.0

    # Diameter across the notch axis [mm]
    minorDiameter: float = 18.0

    #--------------------------------------------------------------------#
    # -- Notch -- #
    #--------------------------------------------------------------------#
    # Peak inward displacement of the notch [mm]
    notchDepth: float = 1.0

    # Notch width control (profile is depth / cosh^2((10/width)*dTheta))
    notchWidth: float = 4.0

    # Angular location of the notch center [rad]
    notchLocation: float = math.pi

    #--------------------------------------------------------------------#
    # -- Placement -- #
    #--------------------------------------------------------------------#
    # Rigid rotation of the whole section [rad]
    rotation: float = 0.0

    # Translation of the whole section [mm]
    xShift: float = 0.0
    yShift: float = 0.0

    #--------------------------------------------------------------------#
    # -- Asymmetry -- #
    #--------------------------------------------------------------------#
    # amplitude * sin(theta - phase), added to x and y separately
    xAsymAmplitude: float = 0.0
    xAsymPhase: float = 0.0
    yAsymAmplitude: float = 0.0
    yAsymPhase: float = 0.0

    #--------------------------------------------------------------------#
    # -- Computed Properties -- #
    #--------------------------------------------------------------------#
    @property
    def semiMajor(self) -> float:
        '''Half the major diameter [mm].'''
        return self.majorDiameter / 2.0

    @property
    def semiMinor(self) -> float:
        '''Half the minor diameter [mm].'''
        return self.minorDiameter / 2.0

    @property
    def aspectRatio(self) -> float:
        '''Major over minor diameter.'''
        return self.majorDiameter / self.minorDiameter

    @property
    def notchRotation(self) -> float:
        '''Rotation applied to the notch displacement so it points inward at notchLocation [rad].'''
        return self.notchLocation - math.pi

    #--------------------------------------------------------------------#
    # -- Vector Conversion -- #
    #--------------------------------------------------------------------#
    @classmethod
    def fieldNames(cls) -> list[str]:
        '''Names of the parameters in vector order.'''
        return [f.name for f in fields(cls)]

    def toVector(self) -> np.ndarray:
        '''Flat parameter vector in field order.'''
        return np.array([getattr(self, name) for name in self.fieldNames()], dtype=float)

    @classmethod
    def fromVector(cls, vector: np.ndarray | list) -> ShapeParameters:
        '''
        Build parameters from a flat vector in field order.

        Parameters:
        -----------
        vector : np.ndarray | list
            Twelve values ordered as fieldNames()

        Returns:
        --------
        ShapeParameters : Parameters with the given values
        '''
        names = cls.fieldNames()
        if len(vector) != len(names):
            raise ValueError(f'Expected {len(names)} parameters, got {len(vector)}')
        return cls(**{name: float(value) for name, value in zip(names, vector)})

    def clampedTo(self, bounds: ParameterBounds) -> ShapeParameters:
        '''
        Clamp every field into the bounds and enforce minor <= major.

        Parameters:
        -----------
        bounds : ParameterBounds
            Lower and upper limits

        Returns:
        --------
        ShapeParameters : New, clamped parameters
        '''
        clamped = ShapeParameters.fromVector(np.clip(self.toVector(), bounds.lower, bounds.upper))
        if clamped.minorDiameter > clamped.majorDiameter:
            clamped = replace(clamped, minorDiameter=clamped.majorDiameter)
        return clamped

    #--------------------------------------------------------------------#
    # -- Factory Presets -- #
    #--------------------------------------------------------------------#
    @classmethod
    def typicalStalk(cls) -> ShapeParameters:
        '''
        Mid-range maize internode section (22 mm x 18 mm) with a moderate notch.
        '''
        return cls()

    @classmethod
    def realStalkGuess(cls) -> ShapeParameters:
        '''
        Starting point used when fitting digitized real sections
        (image units, roughly ten per millimeter).
        '''
        return cls(
            majorDiameter=200.0,
            minorDiameter=150.0,
            notchDepth=15.0,
            notchWidth=1.0,
            notchLocation=math.pi,
        )

    #--------------------------------------------------------------------#
    # -- JSON I/O -- #
    #--------------------------------------------------------------------#
    def toJson(self, filePath: str) -> None:
        '''
        Export parameters to a JSON file.

        Parameters:
        -----------
        filePath : str
            Output file path
        '''
        data = {
            'dimensions': {
                'majorDiameterMm': self.majorDiameter,
                'minorDiameterMm': self.minorDiameter,
            },
            'notch': {
                'depthMm': self.notchDepth,
                'width': self.notchWidth,
                'locationRad': self.notchLocation,
            },
            'placement': {
                'rotationRad': self.rotation,
                'xShiftMm': self.xShift,
                'yShiftMm': self.yShift,
            },
            'asymmetry': {
                'xAmplitudeMm': self.xAsymAmplitude,
                'xPhaseRad': self.xAsymPhase,
                'yAmplitudeMm': self.yAsymAmplitude,
                'yPhaseRad': self.yAsymPhase,
            },
        }
        with open(filePath, 'w') as f:
            json.dump(data, f, indent=4)

    @classmethod
    def fromJson(cls, filePath: str) -> ShapeParameters:
        '''
        Load parameters from a JSON file.

        Parameters:
        -----------
        filePath : str
            Path to JSON parameter file

        Returns:
        --------
        ShapeParameters : Loaded parameters
        '''
        with open(filePath, 'r') as f:
            data = json.load(f)

        dims = data.get('dimensions', {})
        notch = data.get('notch', {})
        placement = data.get('placement', {})
        asym = data.get('asymmetry', {})

        return cls(
            majorDiameter=dims.get('majorDiameterMm', 22.0),
            minorDiameter=dims.get('minorDiameterMm', 18.0),
            notchDepth=notch.get('depthMm', 1.0),
            notchWidth=notch.get('width', 4.0),
            notchLocation=notch.get('locationRad', math.pi),
            rotation=placement.get('rotationRad', 0.0),
            xShift=placement.get('xShiftMm', 0.0),
            yShift=placement.get('yShiftMm', 0.0),
            xAsymAmplitude=asym.get('xAmplitudeMm', 0.0),
            xAsymPhase=asym.get('xPhaseRad', 0.0),
            yAsymAmplitude=asym.get('yAmplitudeMm', 0.0),
            yAsymPhase=asym.get('yPhaseRad', 0.0),
        )

    def toDict(self) -> dict:
        '''Convert to dictionary for JSON serialization.'''
        return asdict(self)

    #--------------------------------------------------------------------#
    # -- Display -- #
    #--------------------------------------------------------------------#
    def printSummary(self) -> None:
        '''Print shape parameters to console in a formatted table.'''
        print('=' * 58)
        print('  STALK SHAPE PARAMETERS SUMMARY')
        print('=' * 58)
        print(f'  Major Diameter:    {self.majorDiameter:8.3f} mm')
        print(f'  Minor Diameter:    {self.minorDiameter:8.3f} mm')
        print(f'  Aspect Ratio:      {self.aspectRatio:8.3f}')
        print('-' * 58)
        print(f'  Notch Depth:       {self.notchDepth:8.3f} mm')
        print(f'  Notch Width:       {self.notchWidth:8.3f}')
        print(f'  Notch Location:    {math.degrees(self.notchLocation):8.2f} deg')
        print('-' * 58)
        print(f'  Rotation:          {math.degrees(self.rotation):8.2f} deg')
        print(f'  Shift (x, y):      {self.xShift:8.3f}, {self.yShift:.3f} mm')
        print('-' * 58)
        print(f'  X Asymmetry:       {self.xAsymAmplitude:8.3f} mm @ {math.degrees(self.xAsymPhase):.1f} deg')
        print(f'  Y Asymmetry:       {self.yAsymAmplitude:8.3f} mm @ {math.degrees(self.yAsymPhase):.1f} deg')
        print('=' * 58)


######################################################################
# -- Parameter Bounds -- #
######################################################################

@dataclass
class ParameterBounds:
    '''
    Box bounds on the shape parameter vector (same order as ShapeParameters).
    '''

    lower: np.ndarray
    upper: np.ndarray

    def __post_init__(self) -> None:
        self.lower = np.asarray(self.lower, dtype=float)
        self.upper = np.asarray(self.upper, dtype=float)
        if np.any(self.lower > self.upper):
            raise ValueError('Lower bound exceeds upper bound')

    def contains(self, params: ShapeParameters, tolerance: float = 1e-9) -> bool:
        '''True when every parameter lies within the bounds.'''
        vector = params.toVector()
        return bool(np.all(vector >= self.lower - tolerance) and np.all(vector <= self.upper + tolerance))

    @classmethod
    def synthetic(cls) -> ParameterBounds:
        '''
        Millimeter-scale bounds covering synthetic maize sections.
        '''
        #        dmaj  dmin  depth  width  loc           rot            xs     ys     xaA   xaS       yaA   yaS
        lower = [5.0,  5.0,  0.0,   0.05,  math.pi / 2, -3 * math.pi / 2, -50.0, -50.0, -2.0, -math.pi, -2.0, -math.pi]
        upper = [40.0, 40.0, 5.0,   10.0,  3 * math.pi / 2, 3 * math.pi / 2, 50.0, 50.0, 2.0, math.pi, 2.0, math.pi]
        return cls(lower=np.array(lower), upper=np.array(upper))

    @classmethod
    def realStalk(cls) -> ParameterBounds:
        '''
        Bounds used when fitting digitized real sections (image units).
        '''
        #        dmaj   dmin   depth  width  loc           rot              xs      ys      xaA   xaS       yaA   yaS
        lower = [100.0, 100.0, 10.0,  0.05,  math.pi / 2, -3 * math.pi / 2, -300.0, -300.0, -1.0, -math.pi, -1.0, -math.pi]
        upper = [300.0, 300.0, 30.0,  5.0,   3 * math.pi / 2, 3 * math.pi / 2, 300.0, 300.0, 1.0, math.pi, 1.0, math.pi]
        return cls(lower=np.array(lower), upper=np.array(upper))
