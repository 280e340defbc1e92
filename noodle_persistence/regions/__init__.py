"""
Key/value regions with continuous-query style listeners.
"""

from .region import LocalRegion, MongoRegion, Region, RegionEvent, RegionOperation

__all__ = ["LocalRegion", "MongoRegion", "Region", "RegionEvent", "RegionOperation"]
