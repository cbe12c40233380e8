"""
Excel export package.
"""

from clinreview.infrastructure.excel.review_export import export_review_workbook

__all__ = ["export_review_workbook"]
