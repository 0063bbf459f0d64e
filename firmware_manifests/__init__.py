"""
Build Z-Wave firmware update manifests from vendor changelog spreadsheets.
"""

__version__ = "1.0.0"
