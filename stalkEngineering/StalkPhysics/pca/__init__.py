# -- PCA Subpackage -- #

'''
Principal component bases of registered section populations.
'''

from stalkEngineering.StalkPhysics.pca.basis import (
    PrincipalComponentBasis,
    buildBasis,
    selectComponentCount,
    extractAngularWindow,
)
