"""
Command-line interface for kousei.
"""
