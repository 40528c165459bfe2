"""
plaincost_pipeline.sources — raw data source adapters.

  BEARegionalSource — BEA Regional API, Regional Price Parities (MARPP / SARPP)
"""

from plaincost_pipeline.sources.base import BaseSource
from plaincost_pipeline.sources.bea import BEARegionalSource

__all__ = ["BaseSource", "BEARegionalSource"]
