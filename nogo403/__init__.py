"""nogo403 - probe 401/403 endpoints with mutated requests"""

__version__ = "0.2.0"
