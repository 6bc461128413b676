"""
Get Rich OS Core Metadata
-------------------------
Houses global metadata for versioning. Each surface (API, UI footer)
reads this metadata for a synchronized version context.
"""

__project__ = "Get Rich OS"
__version__ = "1.0.0"
__tagline__ = "Personal business and life operating system"

CORE_METADATA = {
    "project": __project__,
    "version": __version__,
    "tagline": __tagline__,
    "description": (
        "Get Rich OS records invoices, ledger transactions and projects in "
        "Supabase, derives revenue / earnings / VAT figures and asks Gemini "
        "for short business insights."
    ),
}


def get_metadata() -> dict:
    """Return current system metadata as a dict."""
    return CORE_METADATA
