"""Data fetching, metric calculation and NetScore aggregation.

Import from the submodules (``pkgscore.analyzers.pipeline`` and so on);
the npm adapter depends on the fetcher, so nothing is re-exported here.
"""
