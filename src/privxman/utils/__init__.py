"""Utility modules for privxman."""
