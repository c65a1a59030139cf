"""
Biomine Utility Library.

Modules:
--------
logging_setup
    Logging configuration utilities.
ids
    GO ID extraction, ontology prefixes and flanking distance labels.
notifications
    Email notification on job failure.
"""

from biomine.utils.logging_setup import setup_logging
from biomine.utils.ids import (
    extract_goids,
    format_distance,
    ontology_prefix,
)
from biomine.utils.notifications import send_email, send_error_email

__all__ = [
    # logging_setup
    "setup_logging",
    # ids
    "extract_goids",
    "format_distance",
    "ontology_prefix",
    # notifications
    "send_email",
    "send_error_email",
]
