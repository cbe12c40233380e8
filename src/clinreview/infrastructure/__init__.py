"""
Infrastructure layer: SQLite storage, configuration files, logging, Excel export.
"""
