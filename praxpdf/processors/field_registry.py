# praxpdf/processors/field_registry.py
"""
Recognized form field names.

Field names are matched case-sensitively. Anything else found in a document
is reported as unknown so the caller can warn the user.
"""

# Display order used by the entry table
KNOWN_FIELD_NAMES: tuple[str, ...] = (
    "PcardHolderName",
    "DocumentNumber",
    "Date",
    "Amount",
    "Vendor",
    "GLAccount",
    "CostObject",
    "Description",
)

KNOWN_FIELDS: frozenset[str] = frozenset(KNOWN_FIELD_NAMES)

