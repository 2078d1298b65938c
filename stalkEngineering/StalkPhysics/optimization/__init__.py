# -- Optimization Subpackage -- #

'''
Constrained fitting of the parametric shape model to real section boundaries.
'''

from stalkEngineering.StalkPhysics.optimization.curveFitter import CurveFitter, FitResult
