"""
Haven: resource-consistency core for a hostel operations dashboard.
"""

__version__ = "0.1.0"
