"""
Status chart controller.

Holds the Chart.js configuration for the return-status doughnut.  Calling
:meth:`StatusChart.update` throws the previous configuration away and builds
a new one from the dataset, so the page always draws a single fresh chart.
"""

import json
from typing import Optional

from .views import ChartDataset

RETURNED_COLOUR = 'rgba(75, 192, 192, {alpha})'
OUTSTANDING_COLOUR = 'rgba(255, 99, 132, {alpha})'


class StatusChart:
    title = 'Vehicle Return Status Overview'

    def __init__(self, chart_type: str = 'doughnut'):
        self.chart_type = chart_type
        self._config: Optional[dict] = None
        self.revision = 0

    @property
    def config(self) -> Optional[dict]:
        return self._config

    def dispose(self) -> None:
        self._config = None

    def update(self, dataset: ChartDataset) -> dict:
        self.dispose()
        self._config = {
            'type': self.chart_type,
            'data': {
                'labels': list(dataset.labels),
                'datasets': [{
                    'label': 'Rental Status',
                    'data': list(dataset.values),
                    'backgroundColor': [RETURNED_COLOUR.format(alpha=0.7),
                                        OUTSTANDING_COLOUR.format(alpha=0.7)],
                    'borderColor': [RETURNED_COLOUR.format(alpha=1),
                                    OUTSTANDING_COLOUR.format(alpha=1)],
                    'borderWidth': 1,
                }],
            },
            'options': {
                'responsive': True,
                'maintainAspectRatio': True,
                'plugins': {
                    'legend': {'position': 'top'},
                    'title': {'display': True, 'text': self.title},
                },
            },
        }
        self.revision += 1
        return self._config

    def to_json(self) -> str:
        return json.dumps(self._config)
