"""
plaincost_api — read-only FastAPI surface over the deployed RPP store.

Start with:
    uvicorn plaincost_api.app:app --port 8000
"""

__version__ = "0.1.0"
