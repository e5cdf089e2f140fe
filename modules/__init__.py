"""GeoShard Search Modules

This package contains the search modules built on the GeoShard framework core.
"""
