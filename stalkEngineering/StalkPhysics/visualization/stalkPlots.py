# -- Stalk Section Visualizations -- #

'''
Plotly-based interactive plots for section reconstructions, principal
component bases, and stiffness error summaries.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import numpy as np
import plotly.graph_objects as go

from stalkEngineering.StalkPhysics import constants as const
from stalkEngineering.StalkPhysics.geometry.boundary import BoundaryCurve
from stalkEngineering.StalkPhysics.mechanics.stiffness import ErrorPercentileSummary
from stalkEngineering.StalkPhysics.pca.basis import PrincipalComponentBasis
from stalkEngineering.StalkPhysics.population.store import CrossSectionSample
from stalkEngineering.StalkPhysics.reconstruction.reconstructor import Reconstruction
from stalkEngineering.StalkPhysics.visualization import theme


def _closedTrace(curve: BoundaryCurve, name: str, color: str, dash: str = 'solid', showlegend: bool = True) -> go.Scatter:
    points = curve.closedXY()
    return go.Scatter(
        x=points[:, 0], y=points[:, 1], mode='lines',
        name=name, line=dict(color=color, width=1.5, dash=dash),
        showlegend=showlegend,
    )


def plotReconstructionLevels(sample: CrossSectionSample, reconstructions: list[Reconstruction]) -> go.Figure:
    '''
    True section overlaid with its reconstruction at each level.

    Parameters:
    -----------
    sample : CrossSectionSample
        Registered sample
    reconstructions : list[Reconstruction]
        Reconstructions in level order

    Returns:
    --------
    go.Figure : Plotly figure
    '''
    fig = go.Figure()

    fig.add_trace(_closedTrace(sample.exterior, 'True', theme.TRUE_SHAPE))
    fig.add_trace(_closedTrace(sample.interior, 'True', theme.TRUE_SHAPE, showlegend=False))

    for reconstruction in reconstructions:
        color = theme.LEVEL_COLORS[reconstruction.level % len(theme.LEVEL_COLORS)]
        fig.add_trace(_closedTrace(reconstruction.exterior, reconstruction.label, color, dash='dash'))
        fig.add_trace(_closedTrace(reconstruction.interior, reconstruction.label, color, dash='dash', showlegend=False))

    fig.update_layout(
        title=f'Slice {sample.slicePosition:g}, Stalk {sample.stalkIndex}: Reconstruction Levels',
        xaxis_title='x (mm)',
        yaxis_title='y (mm)',
        yaxis=dict(scaleanchor='x', scaleratio=1),
        template=theme.TEMPLATE,
        height=550,
    )

    return fig


def plotExplainedVariance(basis: PrincipalComponentBasis, nShown: int = 20) -> go.Figure:
    '''
    Explained variance per component with the cumulative curve.

    Parameters:
    -----------
    basis : PrincipalComponentBasis
        Basis to summarize
    nShown : int
        Leading components shown

    Returns:
    --------
    go.Figure : Plotly figure
    '''
    nShown = min(nShown, basis.nComponents)
    index = np.arange(1, nShown + 1)

    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=index, y=basis.explained[:nShown],
        name='Explained', marker_color=theme.BLUE,
    ))
    fig.add_trace(go.Scatter(
        x=index, y=basis.cumulativeExplained()[:nShown], mode='lines+markers',
        name='Cumulative', line=dict(color=theme.ORANGE, width=2),
    ))
    fig.add_hline(
        y=const.explainedVarianceThreshold,
        line=dict(color=theme.REFERENCE_LINE, dash='dash', width=1),
    )

    fig.update_layout(
        title=f'Explained Variance: {basis.channel} (K = {basis.selectComponentCount()})',
        xaxis_title='Principal component',
        yaxis_title='Explained variance (%)',
        template=theme.TEMPLATE,
        height=400,
    )

    return fig


def plotErrorPercentiles(summary: ErrorPercentileSummary) -> go.Figure:
    '''
    Box plot of stiffness error per level: box from the 25th to 75th
    percentile, whiskers at the 5th and 95th.

    Parameters:
    -----------
    summary : ErrorPercentileSummary
        Slice-averaged percentiles (5, 25, 50, 75, 95)

    Returns:
    --------
    go.Figure : Plotly figure
    '''
    labels = ['Ellipse'] + [f'+{k} PC' for k in range(1, summary.nLevels)]

    fig = go.Figure()
    fig.add_trace(go.Box(
        x=labels,
        lowerfence=summary.column(5.0),
        q1=summary.column(25.0),
        median=summary.column(50.0),
        q3=summary.column(75.0),
        upperfence=summary.column(95.0),
        marker_color=theme.BLUE,
        name='Stiffness error',
    ))
    fig.add_hline(y=0.0, line=dict(color=theme.REFERENCE_LINE, dash='dot', width=1))

    fig.update_layout(
        title=f'Torsional Stiffness Error (E_ratio = {summary.modulusRatio:g})',
        xaxis_title='Approximation',
        yaxis_title='Percent error (%)',
        template=theme.TEMPLATE,
        height=450,
    )

    return fig
