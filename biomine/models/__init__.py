from __future__ import annotations

from .models import (
    Base,
    BioEntity,
    Chromosome,
    Gene,
    GeneFlankingRegion,
    GOAnnotation,
    GOTerm,
    Location,
    OntologyAnnotation,
    OntologyTerm,
    Organism,
    POAnnotation,
    POTerm,
    SequenceFeature,
    TOAnnotation,
    TOTerm,
    ontology_term_parent,
)

__all__ = [
    "Base",
    "Organism",
    "BioEntity",
    "SequenceFeature",
    "Chromosome",
    "Gene",
    "GeneFlankingRegion",
    "Location",
    "OntologyTerm",
    "GOTerm",
    "POTerm",
    "TOTerm",
    "ontology_term_parent",
    "OntologyAnnotation",
    "GOAnnotation",
    "POAnnotation",
    "TOAnnotation",
]
