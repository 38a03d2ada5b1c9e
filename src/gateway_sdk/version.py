"""Version information for the Gateway Python SDK"""

__version__ = "0.1.0"
