"""
ID formatting utilities.

This module provides functions for formatting and parsing the
identifiers used by the postprocessing jobs (GO IDs in gene
descriptions, ontology term prefixes, flanking region distances).
"""

import re
from typing import Optional

# A GO identifier is "GO:" followed by exactly seven digits
GOID_PATTERN = re.compile(r"GO:(\d{7})(?!\d)")

# Namespace prefix of an ontology term identifier, e.g. "TO" in "TO:0000387"
ONTOLOGY_PREFIX_PATTERN = re.compile(r"^([A-Za-z][A-Za-z0-9_]*):")


def extract_goids(text: Optional[str]) -> list[str]:
    """
    Extract GO identifiers from free text.

    Identifiers are returned in order of first appearance with
    duplicates removed.

    Args:
        text: Text to scan, e.g. a gene description

    Returns:
        List of "GO:nnnnnnn" identifiers

    Example:
        >>> extract_goids("kinase; GO:0016301 (kinase activity), GO:0005524")
        ["GO:0016301", "GO:0005524"]
    """
    if not text:
        return []

    seen: dict[str, None] = {}
    for match in GOID_PATTERN.finditer(text):
        seen.setdefault(f"GO:{match.group(1)}", None)
    return list(seen)


def ontology_prefix(identifier: Optional[str]) -> Optional[str]:
    """
    Get the namespace prefix of an ontology term identifier.

    Example:
        >>> ontology_prefix("PO:0009005")
        "PO"
        >>> ontology_prefix("no-prefix") is None
        True
    """
    if not identifier:
        return None
    match = ONTOLOGY_PREFIX_PATTERN.match(identifier.strip())
    return match.group(1).upper() if match else None


def format_distance(distance_kb: float) -> str:
    """
    Format a flanking distance given in kilobases.

    The value is always rendered as a float so region identifiers
    stay stable: 0.5 -> "0.5kb", 1 -> "1.0kb".
    """
    return f"{float(distance_kb)}kb"
