"""
Dashboard Module
JSON web API for submitting URLs and viewing results, blocklist and stats
"""

from .app import create_app, run_dashboard
from .runner import PipelineRunner

__all__ = ["PipelineRunner", "create_app", "run_dashboard"]
