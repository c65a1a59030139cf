"""
Postprocessing jobs run after the warehouse has been loaded.

Modules:
- base: PostProcessor base class, PostProcessResult, PostProcessError
- flanking_regions: gene flanking region features
- go_annotations: GO annotations mined from gene descriptions
- ontology_parents: annotations propagated to parent ontology terms
"""

from biomine.postprocess.base import PostProcessError, PostProcessResult, PostProcessor
from biomine.postprocess.flanking_regions import FlankingRegionBuilder, compute_flanking_interval
from biomine.postprocess.go_annotations import GOAnnotationMiner
from biomine.postprocess.ontology_parents import (
    ANNOTATION_CLASSES,
    OntologyParentPropagator,
    annotation_class_for,
)

__all__ = [
    "PostProcessError",
    "PostProcessResult",
    "PostProcessor",
    "FlankingRegionBuilder",
    "compute_flanking_interval",
    "GOAnnotationMiner",
    "ANNOTATION_CLASSES",
    "OntologyParentPropagator",
    "annotation_class_for",
]
