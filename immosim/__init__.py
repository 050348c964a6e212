"""
Immo Simulator: real estate investment calculators.
"""

__version__ = "0.1.0"
