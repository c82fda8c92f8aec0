"""propertyops: property-management operations platform (workflow rule engine)."""

__version__ = "1.0.0"
