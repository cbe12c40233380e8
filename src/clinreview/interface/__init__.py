"""
Interface layer: command line.
"""
