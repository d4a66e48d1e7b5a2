# praxpdf/services/__init__.py
"""
Service layer for PraxPDF.

The document service is lazy-loaded because it pulls in PyMuPDF.
Use explicit imports like:
    from praxpdf.services.document_service import PdfFormService
"""

# Fast imports - exception types
from .exceptions import (
    PdfDocumentError,
    PdfOpenError,
    PdfSerializationError,
    PdfReplaceError,
    PdfRestoreError,
    FieldRetargetError,
)

# Lazy-loaded services via __getattr__
_LAZY_IMPORTS = {
    'PdfFormService': 'document_service',
}

# Submodules that can be accessed via __getattr__ (for patching support)
_SUBMODULES = {'document_service', 'exceptions'}


def __getattr__(name: str):
    """Lazy-load heavy service modules on first access."""
    import importlib
    if name in _SUBMODULES:
        return importlib.import_module(f'.{name}', __package__)
    if name in _LAZY_IMPORTS:
        module_name = _LAZY_IMPORTS[name]
        module = importlib.import_module(f'.{module_name}', __package__)
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'PdfDocumentError',
    'PdfOpenError',
    'PdfSerializationError',
    'PdfReplaceError',
    'PdfRestoreError',
    'FieldRetargetError',
    'PdfFormService',
]
