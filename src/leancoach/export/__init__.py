"""
A3 Export

Print layout, HTML rendering and PDF conversion for A3 documents.
"""
from .layout import A3_GRID, GridRegion, RegionView, prepare_regions, truncate_to_budget
from .html import A3HtmlRenderer
from .pdf import PdfRenderer, ExportError, ExportTimeoutError

__all__ = [
    'A3_GRID',
    'GridRegion',
    'RegionView',
    'prepare_regions',
    'truncate_to_budget',
    'A3HtmlRenderer',
    'PdfRenderer',
    'ExportError',
    'ExportTimeoutError',
]
