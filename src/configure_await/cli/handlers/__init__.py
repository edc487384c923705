"""
Command handlers for the CLI.
"""
