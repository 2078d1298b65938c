# -- Visualization Subpackage -- #

'''
Plotly figures for stalk section analysis.
'''

from stalkEngineering.StalkPhysics.visualization.stalkPlots import (
    plotErrorPercentiles,
    plotExplainedVariance,
    plotReconstructionLevels,
)
