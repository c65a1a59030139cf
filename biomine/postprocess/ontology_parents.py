"""
For existing ontology annotations, create additional annotations with
the parents of the annotated terms.

This allows one to specify only the deepest ontology term for, say, a
QTL, and still query the warehouse for higher-level terms. One run
climbs one level of the stored parent set; nothing is deleted, so
repeated runs are safe and stop adding rows once saturated.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, aliased

from biomine.models.models import (
    BioEntity,
    GOAnnotation,
    OntologyAnnotation,
    OntologyTerm,
    POAnnotation,
    TOAnnotation,
)
from biomine.postprocess.base import PostProcessor, PostProcessResult
from biomine.utils.ids import ontology_prefix

logger = logging.getLogger(__name__)

# Term identifier prefix -> annotation class created for it
ANNOTATION_CLASSES: dict[str, type[OntologyAnnotation]] = {
    "GO": GOAnnotation,
    "PO": POAnnotation,
    "TO": TOAnnotation,
}


def annotation_class_for(identifier: Optional[str]) -> Optional[type[OntologyAnnotation]]:
    """Return the annotation class for a term identifier, or None if unsupported."""
    return ANNOTATION_CLASSES.get(ontology_prefix(identifier))


class OntologyParentPropagator(PostProcessor):
    """Annotate subjects with the parents of their annotated terms."""

    name = "ontology-parent-annotations"

    def __init__(self, db: Session, prefixes: Optional[Iterable[str]] = None):
        super().__init__(db)
        self.prefixes = [p.rstrip(":").upper() for p in prefixes or [] if p.strip()]
        for prefix in self.prefixes:
            if prefix not in ANNOTATION_CLASSES:
                raise ValueError(
                    f"Unsupported ontology prefix '{prefix}', "
                    f"expected one of {', '.join(ANNOTATION_CLASSES)}"
                )

    def run(self) -> PostProcessResult:
        result = PostProcessResult(self.name)
        unsupported = 0

        with self.transaction("storing parent annotations"):
            logger.info("Querying OntologyAnnotation records and associated terms and parents...")
            existing = self.fetch_existing_pairs()
            parent_pairs = self.collect_parent_pairs()
            logger.info(
                f"Found {len(existing)} existing annotations and "
                f"{len(parent_pairs)} subject/parent pairs."
            )

            logger.info("Storing new parent OntologyAnnotation records...")
            for subject, parent in parent_pairs:
                key = (subject.bio_entity_no, parent.ontology_term_no)
                if key in existing:
                    result.skipped += 1
                    continue

                annotation_class = annotation_class_for(parent.identifier)
                if annotation_class is None:
                    logger.error(f"Unsupported OntologyTerm {parent.identifier}")
                    unsupported += 1
                    continue

                self.db.add(annotation_class(subject=subject, ontology_term=parent))
                existing.add(key)
                result.created += 1

        result.details["unsupported"] = unsupported
        logger.info(result.summary())
        return result

    def fetch_existing_pairs(self) -> set[tuple[int, int]]:
        """(subject, term) ids of every stored annotation."""
        rows = self.db.query(
            OntologyAnnotation.subject_no,
            OntologyAnnotation.ontology_term_no,
        ).all()
        return {(subject_no, term_no) for subject_no, term_no in rows}

    def collect_parent_pairs(self) -> list[tuple[BioEntity, OntologyTerm]]:
        """
        Pair each annotation's subject with every parent of its term.

        Pairs are deduplicated and kept in first-seen order.
        """
        parent = aliased(OntologyTerm)
        query = (
            self.db.query(OntologyAnnotation, parent)
            .join(OntologyAnnotation.ontology_term)
            .join(OntologyTerm.parents.of_type(parent))
            .order_by(
                OntologyAnnotation.ontology_annotation_no,
                parent.ontology_term_no,
            )
        )
        if self.prefixes:
            query = query.filter(
                or_(*(OntologyTerm.identifier.like(f"{prefix}:%") for prefix in self.prefixes))
            )

        pairs: dict[tuple[int, int], tuple[BioEntity, OntologyTerm]] = {}
        for annotation, parent_term in query.all():
            subject = annotation.subject
            key = (subject.bio_entity_no, parent_term.ontology_term_no)
            pairs.setdefault(key, (subject, parent_term))
        return list(pairs.values())
