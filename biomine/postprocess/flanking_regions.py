"""
Create features representing flanking regions of configurable size
either side of gene features, for use in overlap queries.

For every gene located on a chromosome, one GeneFlankingRegion (with its
own chromosome Location) is stored per combination of distance,
direction and include-gene flag. Existing regions are deleted first.
"""
from __future__ import annotations

import logging
import math
from typing import Iterable, Optional, Sequence

from sqlalchemy.orm import Session, aliased

from biomine.core.settings import VALID_DIRECTIONS
from biomine.models.models import Chromosome, Gene, GeneFlankingRegion, Location
from biomine.postprocess.base import PostProcessor, PostProcessResult
from biomine.utils.ids import format_distance

logger = logging.getLogger(__name__)

MINUS_STRAND = "-1"


def compute_flanking_interval(
    gene_start: int,
    gene_end: int,
    strand: Optional[str],
    chromosome_length: int,
    distance_kb: float,
    direction: str,
    include_gene: bool = False,
) -> Optional[tuple[int, int]]:
    """
    Compute the coordinates of one flanking region.

    Upstream is 5' of the gene: lower coordinates on the plus strand,
    higher coordinates on the minus strand. A strand other than "-1"
    (including a missing one) is treated as plus.

    Args:
        gene_start: Gene start coordinate (1-based)
        gene_end: Gene end coordinate (1-based, inclusive)
        strand: "1", "-1", "0" or None
        chromosome_length: Length of the chromosome the gene lies on
        distance_kb: Region size in kilobases
        direction: "upstream" or "downstream"
        include_gene: Whether the region also spans the gene body

    Returns:
        (start, end) clamped to the chromosome, or None when the gene
        touches a chromosome end and so has no flanking region

    Raises:
        ValueError: On an unknown direction or a non-positive distance
    """
    if direction not in VALID_DIRECTIONS:
        raise ValueError(f"Unknown flanking direction: {direction}")
    if distance_kb <= 0:
        raise ValueError(f"Flanking distance must be positive, got {distance_kb}")

    if gene_start <= 1 or gene_end >= chromosome_length:
        return None

    # round half up
    flank = int(math.floor(distance_kb * 1000 + 0.5))

    lower_side = (direction == "upstream") != (strand == MINUS_STRAND)
    if lower_side:
        start = gene_start - flank
        end = gene_end if include_gene else gene_start - 1
    else:
        start = gene_start if include_gene else gene_end + 1
        end = gene_end + flank

    return max(start, 1), min(end, chromosome_length)


class FlankingRegionBuilder(PostProcessor):
    """Rebuild GeneFlankingRegion features for every located gene."""

    name = "gene-flanking-regions"

    def __init__(
        self,
        db: Session,
        distances: Sequence[float] = (0.5,),
        directions: Sequence[str] = VALID_DIRECTIONS,
        include_genes: Sequence[bool] = (False,),
        batch_size: int = 1000,
    ):
        super().__init__(db)
        for label, values in (
            ("distances", distances),
            ("directions", directions),
            ("include_genes", include_genes),
        ):
            if not values:
                raise ValueError(f"At least one value is required for {label}")
        for direction in directions:
            if direction not in VALID_DIRECTIONS:
                raise ValueError(f"Unknown flanking direction: {direction}")
        for distance in distances:
            if distance <= 0:
                raise ValueError(f"Flanking distance must be positive, got {distance}")

        # One region per distinct combination; first-seen order kept
        self.distances = list(dict.fromkeys(distances))
        self.directions = list(dict.fromkeys(directions))
        self.include_genes = list(dict.fromkeys(include_genes))
        self.batch_size = batch_size

        self._chromosomes: dict[int, Chromosome] = {}
        self._unsized_chromosomes: set[int] = set()

    def run(self) -> PostProcessResult:
        result = PostProcessResult(self.name)
        result.deleted = self.delete_all(GeneFlankingRegion)

        with self.transaction("storing gene flanking regions"):
            rows = self.fetch_gene_locations()
            logger.info(f"Retrieved {len(rows)} gene locations on chromosomes.")

            for count, (chromosome_no, gene, location) in enumerate(rows, start=1):
                chromosome = self.get_chromosome(chromosome_no)
                regions = self.create_flanking_regions(chromosome, gene, location)
                if regions:
                    result.created += len(regions)
                else:
                    result.skipped += 1

                if count % self.batch_size == 0:
                    self.db.flush()
                    logger.info(f"Created flanking regions for {count} genes.")

        result.details["genes"] = len(rows)
        result.details["chromosomes_without_length"] = len(self._unsized_chromosomes)
        logger.info(result.summary())
        return result

    def fetch_gene_locations(self) -> list[tuple[int, Gene, Location]]:
        """Fetch (chromosome id, gene, location) for every gene located on a chromosome."""
        chromosome = aliased(Chromosome)
        return (
            self.db.query(Location.located_on_no, Gene, Location)
            .select_from(Location)
            .join(Gene, Location.feature_no == Gene.bio_entity_no)
            .join(chromosome, Location.located_on_no == chromosome.bio_entity_no)
            .order_by(Location.located_on_no, Location.start_coord)
            .all()
        )

    def get_chromosome(self, chromosome_no: int) -> Chromosome:
        chromosome = self._chromosomes.get(chromosome_no)
        if chromosome is None:
            chromosome = self.db.get(Chromosome, chromosome_no)
            self._chromosomes[chromosome_no] = chromosome
        return chromosome

    def create_flanking_regions(
        self,
        chromosome: Chromosome,
        gene: Gene,
        location: Location,
    ) -> list[GeneFlankingRegion]:
        """
        Create and add the flanking regions of one gene.

        Returns:
            The regions added to the session (empty if the chromosome
            has no length or the gene touches a chromosome end)
        """
        if chromosome.length is None:
            if chromosome.bio_entity_no not in self._unsized_chromosomes:
                self._unsized_chromosomes.add(chromosome.bio_entity_no)
                logger.warning(
                    "Attempted to create GeneFlankingRegions on a chromosome "
                    f"without a length: {chromosome.primary_identifier}"
                )
            return []

        regions = []
        for distance, direction, include_gene in self._combinations():
            interval = compute_flanking_interval(
                location.start_coord,
                location.stop_coord,
                location.strand,
                chromosome.length,
                distance,
                direction,
                include_gene,
            )
            if interval is None:
                continue

            start, end = interval
            distance_label = format_distance(distance)
            region = GeneFlankingRegion(
                primary_identifier=f"{gene.primary_identifier} {distance_label} {direction}",
                distance=distance_label,
                direction=direction,
                include_gene=include_gene,
                gene=gene,
                chromosome=chromosome,
                organism_no=gene.organism_no,
                length=end - start + 1,
            )
            region.locations.append(
                Location(
                    located_on=chromosome,
                    start_coord=start,
                    stop_coord=end,
                    strand=location.strand,
                )
            )
            self.db.add(region)
            regions.append(region)

        return regions

    def _combinations(self) -> Iterable[tuple[float, str, bool]]:
        for distance in self.distances:
            for direction in self.directions:
                for include_gene in self.include_genes:
                    yield distance, direction, include_gene
