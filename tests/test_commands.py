"""
Tests for the biomine command line.

Tests cover:
- Argument parsing and job construction from arguments and settings
- End-to-end runs against a SQLite file database
- Failure exit status and error notification
"""
import logging

import pytest
from unittest.mock import patch

from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from biomine.cli.commands import build_jobs, build_parser, main
from biomine.core.settings import Settings, _cached_settings
from biomine.models.models import (
    Chromosome,
    Gene,
    GeneFlankingRegion,
    GOAnnotation,
    GOTerm,
    Location,
    TOAnnotation,
    TOTerm,
)
from biomine.postprocess import (
    FlankingRegionBuilder,
    GOAnnotationMiner,
    OntologyParentPropagator,
)


@pytest.fixture
def cli_env(monkeypatch):
    """Run the CLI with settings taken only from its arguments."""
    for name in ("DATABASE_URL", "DB_SCHEMA", "LOG_DIR", "CURATOR_EMAIL"):
        monkeypatch.delenv(name, raising=False)
    _cached_settings.cache_clear()
    yield monkeypatch
    _cached_settings.cache_clear()
    biomine_logger = logging.getLogger("biomine")
    for handler in list(biomine_logger.handlers):
        biomine_logger.removeHandler(handler)
        handler.close()
    biomine_logger.setLevel(logging.NOTSET)


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'warehouse.db'}"


class TestBuildJobs:
    """Tests for job construction."""

    def test_flanking_arguments_override_settings(self, mock_db_session):
        """Command line flanking options take precedence over settings."""
        args = build_parser().parse_args([
            "flanking-regions",
            "--distance", "1.0",
            "--distance", "2.5",
            "--direction", "upstream",
            "--include-gene", "both",
        ])
        settings = Settings(_env_file=None, flanking_distances=[0.5])

        (job,) = build_jobs(args, settings, mock_db_session)

        assert isinstance(job, FlankingRegionBuilder)
        assert job.distances == [1.0, 2.5]
        assert job.directions == ["upstream"]
        assert job.include_genes == [False, True]

    def test_flanking_defaults_from_settings(self, mock_db_session):
        args = build_parser().parse_args(["flanking-regions"])
        settings = Settings(
            _env_file=None,
            flanking_distances=[5.0],
            flanking_include_gene=[True],
            batch_size=50,
        )

        (job,) = build_jobs(args, settings, mock_db_session)

        assert job.distances == [5.0]
        assert job.directions == ["upstream", "downstream"]
        assert job.include_genes == [True]
        assert job.batch_size == 50

    def test_ontology_prefixes(self, mock_db_session):
        args = build_parser().parse_args(["ontology-parents", "--prefix", "TO"])

        (job,) = build_jobs(args, Settings(_env_file=None), mock_db_session)

        assert isinstance(job, OntologyParentPropagator)
        assert job.prefixes == ["TO"]

    def test_all_runs_jobs_in_order(self, mock_db_session):
        args = build_parser().parse_args(["all"])

        jobs = build_jobs(args, Settings(_env_file=None), mock_db_session)

        assert [type(job) for job in jobs] == [
            FlankingRegionBuilder,
            GOAnnotationMiner,
            OntologyParentPropagator,
        ]

    def test_invalid_prefix_rejected_by_parser(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["ontology-parents", "--prefix", "SO"])


class TestMain:
    """End-to-end tests for main()."""

    def test_no_command(self, cli_env, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_init_db_creates_tables(self, cli_env, database_url):
        assert main(["--database-url", database_url, "init-db"]) == 0

        engine = create_engine(database_url)
        with Session(engine) as session:
            assert session.query(GOAnnotation).count() == 0
        engine.dispose()

    def test_all_jobs(self, cli_env, database_url):
        """init-db followed by all populates every derived table."""
        assert main(["--database-url", database_url, "init-db"]) == 0

        engine = create_engine(database_url)
        with Session(engine) as session:
            chromosome = Chromosome(primary_identifier="Chr01", length=50000)
            gene = Gene(
                primary_identifier="Glyma.01G000100",
                description="GO:0005515 (protein binding)",
            )
            gene.locations.append(
                Location(located_on=chromosome, start_coord=10000, stop_coord=12000, strand="1")
            )
            binding = GOTerm(identifier="GO:0005488", name="binding")
            GOTerm(identifier="GO:0005515", name="protein binding", parents=[binding])
            trait = TOTerm(identifier="TO:0000387", name="plant trait")
            height = TOTerm(identifier="TO:0000207", name="plant height", parents=[trait])
            session.add_all([chromosome, gene, binding, height])
            session.add(TOAnnotation(subject=gene, ontology_term=height))
            session.commit()

        assert main(["--database-url", database_url, "all"]) == 0

        with Session(engine) as session:
            assert session.query(GeneFlankingRegion).count() == 2
            go_ids = {a.ontology_term.identifier for a in session.query(GOAnnotation).all()}
            assert go_ids == {"GO:0005515", "GO:0005488"}
            to_ids = {a.ontology_term.identifier for a in session.query(TOAnnotation).all()}
            assert to_ids == {"TO:0000207", "TO:0000387"}
        engine.dispose()

    def test_missing_database_url(self, cli_env):
        """Without a database URL the command fails."""
        with patch("biomine.cli.commands.send_error_email") as mock_email:
            assert main(["go-annotations"]) == 1
        mock_email.assert_called_once()

    def test_invalid_settings_reported(self, cli_env, database_url):
        """Invalid settings exit 1 and notify the curator from the environment."""
        cli_env.setenv("FLANKING_DIRECTIONS", '["left"]')
        cli_env.setenv("CURATOR_EMAIL", "curator@example.org")

        with patch("biomine.cli.commands.send_error_email") as mock_email:
            assert main(["--database-url", database_url, "go-annotations"]) == 1

        subject, message, recipient = mock_email.call_args.args
        assert subject == "Error running go-annotations"
        assert "left" in message
        assert recipient == "curator@example.org"

    def test_job_failure_sends_error_email(self, cli_env, database_url):
        """A job failing on a database without tables exits 1 and notifies."""
        cli_env.setenv("CURATOR_EMAIL", "curator@example.org")

        with patch("biomine.cli.commands.send_error_email") as mock_email:
            assert main(["--database-url", database_url, "go-annotations"]) == 1

        subject, message, recipient = mock_email.call_args.args
        assert subject == "Error running go-annotations"
        assert "go-annotations" in message
        assert recipient == "curator@example.org"
