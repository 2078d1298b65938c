# -- Population Subpackage -- #

'''
Compound-key population store of registered sections and the synthetic
population builder.
'''

from stalkEngineering.StalkPhysics.population.store import (
    CHANNELS,
    MISSING_ROW,
    CrossSectionSample,
    PopulationStore,
)
from stalkEngineering.StalkPhysics.population.builder import PopulationBuilder, averageRindThickness
