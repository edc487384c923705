"""
Shared utilities: console/logging setup and node rendering helpers.
"""
