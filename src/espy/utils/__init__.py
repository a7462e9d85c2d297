"""
Utilities: rich console logging and node inspection helpers.
"""
