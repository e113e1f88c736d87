"""
Tier list state engine: item resolution, URL state codec and tier reconciliation.
"""

__version__ = "0.1.0"
