"""
Application layer: review database use cases.
"""
