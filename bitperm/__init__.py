"""Role/permission bitmask engine for user and role masks"""

__version__ = "0.1.0"
