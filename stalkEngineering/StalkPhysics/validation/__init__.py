# -- Validation Subpackage -- #

'''
Pytest suite for the StalkPhysics pipeline.
'''
