# praxpdf/processors/__init__.py
"""
PDF processors for PraxPDF.

PyMuPDF-backed modules are lazy-loaded for faster startup.
Use explicit imports like:
    from praxpdf.processors.pdf_merger import PdfMerger
"""

# Fast imports - pure geometry and the field registry
from .field_registry import KNOWN_FIELD_NAMES, KNOWN_FIELDS
from .pdf_geometry import canvas_size, plan_layout, seam_trims, visible_rect

# Lazy-loaded processors via __getattr__
_LAZY_IMPORTS = {
    'PdfMerger': 'pdf_merger',
    'merge_pdf': 'pdf_merger',
    'extract_fields': 'pdf_fields',
    'apply_fields': 'pdf_fields',
    'save_fields': 'pdf_fields',
    'collect_unknown_field_names': 'pdf_fields',
    'collect_metrics': 'pdf_fields',
    'write_document_atomically': 'pdf_writer',
    'is_pdf': 'pdf_common',
    'open_pdf': 'pdf_common',
}

# Submodules that can be accessed via __getattr__ (for patching support)
_SUBMODULES = {'pdf_merger', 'pdf_fields', 'pdf_writer', 'pdf_common', 'pdf_geometry', 'field_registry'}


def __getattr__(name: str):
    """Lazy-load heavy processor modules on first access."""
    import importlib
    # Support accessing submodules directly (for unittest.mock.patch)
    if name in _SUBMODULES:
        return importlib.import_module(f'.{name}', __package__)
    if name in _LAZY_IMPORTS:
        module_name = _LAZY_IMPORTS[name]
        module = importlib.import_module(f'.{module_name}', __package__)
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'KNOWN_FIELD_NAMES',
    'KNOWN_FIELDS',
    'canvas_size',
    'plan_layout',
    'seam_trims',
    'visible_rect',
    'PdfMerger',
    'merge_pdf',
    'extract_fields',
    'apply_fields',
    'save_fields',
    'collect_unknown_field_names',
    'collect_metrics',
    'write_document_atomically',
    'is_pdf',
    'open_pdf',
]
