"""
SP3-Orbit: SP3 orbit file conversion

Reads orbits, clocks and position covariances from SP3 files and turns them
into per-satellite time series in a consistent reference frame, with optional
terrestrial-to-celestial rotation and center-of-mass correction.
"""

__version__ = "1.0.0"
__author__ = "SP3-Orbit Team"

from sp3orbit.core.config import Settings
from sp3orbit.products.converter import ConversionResult, convert_sp3

__all__ = ["ConversionResult", "Settings", "convert_sp3", "__version__"]
