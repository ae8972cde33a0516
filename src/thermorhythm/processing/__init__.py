"""This is the processing submodule.

This module contains the functionality necessary to derive the analyses from the
cleaned temperature readings. This includes smoothing and calendar decoration,
hourly trimean extrema, 30-minute binning, and the spectral and autocorrelation
estimators.
"""
