# -- Visualization Theme -- #

'''
Centralized dark-mode theme for all StalkPhysics Plotly visualizations.

Change colors or template here to restyle every plot at once.

Sean Bowman [10/19/2026]
'''

# Plotly template
TEMPLATE = 'plotly_dark'

# Primary color palette (visible on dark backgrounds)
BLUE = '#42A5F5'
RED = '#EF5350'
GREEN = '#66BB6A'
ORANGE = '#FFA726'
PURPLE = '#AB47BC'
BROWN = '#A1887F'
CYAN = '#26C6DA'

# Neutrals
WHITE = '#E0E0E0'
REFERENCE_LINE = '#888888'

# True section boundaries
TRUE_SHAPE = WHITE

# Approximation levels 0..K (ellipse first)
LEVEL_COLORS = [RED, ORANGE, GREEN, BLUE, PURPLE, BROWN, CYAN]
