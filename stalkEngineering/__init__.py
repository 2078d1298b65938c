# -- Stalk Engineering Package -- #

'''
Master package for the stalk cross-section engineering toolkit.

Domain-specific sub-packages:
    - StalkPhysics: Parametric cross-section synthesis, shape registration,
      principal component shape models, and stiffness error analysis

Shared tools:
    - utilsSE: Curve offsetting, rotation, and closed-curve helpers

Sean Bowman [10/19/2026]
'''
