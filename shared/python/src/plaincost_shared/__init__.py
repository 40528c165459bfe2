"""
plaincost_shared — shared utilities, models, and configuration for plaincost.

Usage:
    from plaincost_shared.config import Settings, settings
    from plaincost_shared.db import connect_store, get_deployed_connection
    from plaincost_shared.models.rpp import Msa, StateInfo
    from plaincost_shared.geo import clean_msa_name, extract_state_abbr, slugify
    from plaincost_shared.constants import STATE_NAMES, FIPS_TO_ABBR
"""

__version__ = "0.1.0"
