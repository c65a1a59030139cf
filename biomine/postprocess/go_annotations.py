"""
Create GOAnnotation records for genes by parsing the GO term
identifiers embedded in their descriptions.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from biomine.models.models import GOAnnotation, GOTerm, Gene
from biomine.postprocess.base import PostProcessor, PostProcessResult
from biomine.utils.ids import extract_goids

logger = logging.getLogger(__name__)


class GOAnnotationMiner(PostProcessor):
    """Replace all GO annotations with those mined from gene descriptions."""

    name = "go-annotations"

    def __init__(self, db: Session, batch_size: int = 1000):
        super().__init__(db)
        self.batch_size = batch_size
        # identifier -> term, None for identifiers known to be missing
        self._terms: dict[str, Optional[GOTerm]] = {}

    def run(self) -> PostProcessResult:
        result = PostProcessResult(self.name)
        result.deleted = self.delete_all(GOAnnotation)

        genes_annotated = 0
        with self.transaction("storing GO annotations"):
            genes = self.db.query(Gene).order_by(Gene.primary_identifier).all()
            logger.info(f"Retrieved {len(genes)} Gene objects for GO annotation.")

            for count, gene in enumerate(genes, start=1):
                created, unresolved = self.annotate_gene(gene)
                result.created += created
                result.skipped += unresolved
                if created:
                    genes_annotated += 1

                if count % self.batch_size == 0:
                    self.db.flush()
                    logger.info(f"Parsed descriptions of {count} genes.")

        result.details["genes"] = len(genes)
        result.details["genes_annotated"] = genes_annotated
        logger.info(result.summary())
        return result

    def annotate_gene(self, gene: Gene) -> tuple[int, int]:
        """
        Add one GOAnnotation per GO identifier found in the gene description.

        Returns:
            (annotations created, identifiers that did not resolve to a term)
        """
        created = 0
        unresolved = 0
        for identifier in extract_goids(gene.description):
            term = self.get_go_term(identifier)
            if term is None:
                logger.warning(f"GO term not found for [{identifier}]")
                unresolved += 1
                continue
            self.db.add(GOAnnotation(subject=gene, ontology_term=term))
            created += 1
        return created, unresolved

    def get_go_term(self, identifier: str) -> Optional[GOTerm]:
        """Look up a GO term by identifier, caching hits and misses."""
        if identifier not in self._terms:
            self._terms[identifier] = (
                self.db.query(GOTerm).filter(GOTerm.identifier == identifier).first()
            )
        return self._terms[identifier]
