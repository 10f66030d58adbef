"""
Shared utilities for the flight search application.
"""
