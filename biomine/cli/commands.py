"""
Command line entry point for the postprocessing jobs.

Usage:
    biomine init-db
    biomine flanking-regions --distance 0.5 --distance 1.0
    biomine go-annotations
    biomine ontology-parents --prefix TO
    biomine --debug all
"""
from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Optional, Sequence

from biomine.core.settings import VALID_DIRECTIONS, Settings, get_settings
from biomine.db.engine import SessionLocal, create_schema, init_engine
from biomine.postprocess import (
    ANNOTATION_CLASSES,
    FlankingRegionBuilder,
    GOAnnotationMiner,
    OntologyParentPropagator,
    PostProcessor,
    PostProcessResult,
)
from biomine.utils.logging_setup import setup_logging
from biomine.utils.notifications import send_error_email

logger = logging.getLogger(__name__)

INCLUDE_GENE_CHOICES = {
    "no": [False],
    "yes": [True],
    "both": [False, True],
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Warehouse postprocessing jobs",
        prog="biomine",
    )
    parser.add_argument(
        "--database-url",
        help="SQLAlchemy database URL (default: DATABASE_URL)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write the log to this file",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    flanking_options = argparse.ArgumentParser(add_help=False)
    flanking_options.add_argument(
        "--distance",
        dest="distances",
        type=float,
        action="append",
        help="Flanking region size in kb; repeatable (default: FLANKING_DISTANCES)",
    )
    flanking_options.add_argument(
        "--direction",
        dest="directions",
        choices=VALID_DIRECTIONS,
        action="append",
        help="Region direction; repeatable (default: FLANKING_DIRECTIONS)",
    )
    flanking_options.add_argument(
        "--include-gene",
        choices=sorted(INCLUDE_GENE_CHOICES),
        help="Whether regions also span the gene body (default: FLANKING_INCLUDE_GENE)",
    )

    prefix_options = argparse.ArgumentParser(add_help=False)
    prefix_options.add_argument(
        "--prefix",
        dest="prefixes",
        choices=sorted(ANNOTATION_CLASSES),
        action="append",
        help="Only propagate annotations to terms with this prefix; repeatable",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    subparsers.add_parser("init-db", help="Create the warehouse tables")
    subparsers.add_parser(
        "flanking-regions",
        parents=[flanking_options],
        help="Rebuild gene flanking region features",
    )
    subparsers.add_parser(
        "go-annotations",
        help="Rebuild GO annotations from gene descriptions",
    )
    subparsers.add_parser(
        "ontology-parents",
        parents=[prefix_options],
        help="Annotate subjects with parents of their annotated terms",
    )
    subparsers.add_parser(
        "all",
        parents=[flanking_options, prefix_options],
        help="Run flanking-regions, go-annotations and ontology-parents in order",
    )
    return parser


def build_jobs(args: argparse.Namespace, settings: Settings, session) -> list[PostProcessor]:
    """Instantiate the jobs a command runs, in execution order."""
    jobs: list[PostProcessor] = []

    if args.command in ("flanking-regions", "all"):
        include_genes = (
            INCLUDE_GENE_CHOICES[args.include_gene]
            if args.include_gene
            else settings.flanking_include_gene
        )
        jobs.append(
            FlankingRegionBuilder(
                session,
                distances=args.distances or settings.flanking_distances,
                directions=args.directions or settings.flanking_directions,
                include_genes=include_genes,
                batch_size=settings.batch_size,
            )
        )

    if args.command in ("go-annotations", "all"):
        jobs.append(GOAnnotationMiner(session, batch_size=settings.batch_size))

    if args.command in ("ontology-parents", "all"):
        jobs.append(
            OntologyParentPropagator(
                session,
                prefixes=args.prefixes or settings.ontology_parent_prefixes,
            )
        )

    return jobs


def run_jobs(jobs: Sequence[PostProcessor]) -> list[PostProcessResult]:
    results = []
    for job in jobs:
        logger.info(f"Starting {job.name}...")
        results.append(job.run())
    return results


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    settings = None
    try:
        settings = get_settings()
        level = logging.DEBUG if args.debug else getattr(logging, settings.log_level.upper(), logging.INFO)
        setup_logging(
            "biomine",
            level=level,
            log_file=args.log_file,
            log_dir=Path(settings.log_dir) if settings.log_dir else None,
        )

        engine = init_engine(database_url=args.database_url)

        if args.command == "init-db":
            create_schema(engine)
            return 0

        with SessionLocal() as session:
            results = run_jobs(build_jobs(args, settings, session))

        for result in results:
            logger.info(f"Summary: {result.summary()}")
        return 0

    except Exception as e:
        error_msg = f"Error running {args.command}: {e}"
        logger.error(error_msg)
        # Settings may have failed to load
        curator_email = settings.curator_email if settings else os.getenv("CURATOR_EMAIL")
        send_error_email(f"Error running {args.command}", error_msg, curator_email)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
