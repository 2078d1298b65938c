# -- General Utilities for Stalk Engineering -- #

'''
General-purpose curve manipulation and planar geometry utility functions
for closed cross-section boundaries.

Sean Bowman [10/19/2026]
'''

# Global imports
import numpy as np

#--------------------------------------------------------------------#
# -- Curve Manipulation Tools -- #
#--------------------------------------------------------------------#

def parallelOffset(xCurve: np.ndarray | list, yCurve: np.ndarray | list, offsetDistance: float | np.ndarray, closed: bool = True) -> tuple[np.ndarray, np.ndarray]:

    '''

    This function takes in the X and Y coordinates of a curve and creates a curve that is
    an equal distance to that curve in the curve normal direction. This acts like a curve offset
    in a traditional CAD software. The equations that drive this process are given as:

    x_parallel = x + (-offset_distance)*dy / sqrt(dx^2 + dy^2)
    y_parallel = y - (-offset_distance)*dx / sqrt(dx^2 + dy^2)

    For a counter-clockwise curve a positive offset moves the curve inward. Closed curves
    use a periodic central difference so the seam has no one-sided derivative.

    '''

    xCurve = np.asarray(xCurve, dtype=float)
    yCurve = np.asarray(yCurve, dtype=float)

    # If the user has a constant offset distance, make it into an array
    if np.isscalar(offsetDistance):
        offsetDistance = offsetDistance * np.ones(len(xCurve))

    # Do numerical derivative for passed in curve
    if closed:
        deltaX = 0.5 * (np.roll(xCurve, -1) - np.roll(xCurve, 1))
        deltaY = 0.5 * (np.roll(yCurve, -1) - np.roll(yCurve, 1))
    else:
        deltaX = np.gradient(xCurve)
        deltaY = np.gradient(yCurve)

    norm = np.sqrt(deltaX**2 + deltaY**2)

    # Calculate points of parallel offset curve
    xCurveParalleloffset = xCurve + -offsetDistance * deltaY / norm
    yCurveParalleloffset = yCurve - -offsetDistance * deltaX / norm

    return xCurveParalleloffset, yCurveParalleloffset

def rotate2D(xData: np.ndarray | list, yData: np.ndarray | list, angle: float) -> tuple[np.ndarray, np.ndarray]:

    '''

    Rotate planar points counter-clockwise about the origin by 'angle' radians.

    '''

    xData = np.asarray(xData, dtype=float)
    yData = np.asarray(yData, dtype=float)

    cosAngle = np.cos(angle)
    sinAngle = np.sin(angle)

    xRotated = cosAngle * xData - sinAngle * yData
    yRotated = sinAngle * xData + cosAngle * yData

    return xRotated, yRotated

def closeCurve(xData: np.ndarray | list, yData: np.ndarray | list) -> np.ndarray:

    '''

    Stack X and Y into an (N + 1, 2) array with the first point repeated at the end.

    '''

    points = np.column_stack([np.asarray(xData, dtype=float), np.asarray(yData, dtype=float)])

    return np.vstack([points, points[:1]])

def stripClosingPoint(xData: np.ndarray | list, yData: np.ndarray | list, tolerance: float = 1e-12) -> tuple[np.ndarray, np.ndarray]:

    '''

    Drop a repeated closing point so a curve has exactly one sample per angle.

    '''

    xData = np.asarray(xData, dtype=float)
    yData = np.asarray(yData, dtype=float)

    scale = max(float(np.max(np.abs(xData))), float(np.max(np.abs(yData))), 1.0)
    if len(xData) > 1 and np.hypot(xData[-1] - xData[0], yData[-1] - yData[0]) <= tolerance * scale:
        return xData[:-1], yData[:-1]

    return xData, yData

#--------------------------------------------------------------------#
# -- Polygon Properties -- #
#--------------------------------------------------------------------#

def polygonArea(xData: np.ndarray, yData: np.ndarray) -> float:

    '''

    Signed shoelace area of a closed polygon (positive for counter-clockwise ordering).
    The closing edge is implied.

    '''

    cross = xData * np.roll(yData, -1) - np.roll(xData, -1) * yData

    return 0.5 * float(np.sum(cross))

def polygonCentroid(xData: np.ndarray, yData: np.ndarray) -> tuple[float, float]:

    '''

    Area centroid of a closed polygon. Independent of vertex density, unlike the mean of the points.

    '''

    xNext = np.roll(xData, -1)
    yNext = np.roll(yData, -1)
    cross = xData * yNext - xNext * yData
    area = 0.5 * np.sum(cross)

    xCentroid = np.sum((xData + xNext) * cross) / (6.0 * area)
    yCentroid = np.sum((yData + yNext) * cross) / (6.0 * area)

    return float(xCentroid), float(yCentroid)

