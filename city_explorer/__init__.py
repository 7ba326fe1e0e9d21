"""
City Explorer API: locations, forecasts and meetups cached in front of external providers.
"""
__version__ = "1.0.0"
