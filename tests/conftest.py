"""
Pytest fixtures for biomine tests.

Provides an in-memory SQLite warehouse with the schema created per
test, builders for sample data, and a mock session for failure paths.
"""
import pytest
from unittest.mock import MagicMock

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from biomine.models.models import (
    Base,
    Chromosome,
    Gene,
    GOTerm,
    Location,
    Organism,
)


@pytest.fixture
def engine():
    """In-memory SQLite engine with foreign keys enforced."""
    engine = create_engine("sqlite://")

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    """Database session bound to the in-memory warehouse."""
    Session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    with Session() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """Create a mock database session for testing."""
    session = MagicMock()
    session.execute = MagicMock()
    session.commit = MagicMock()
    session.rollback = MagicMock()
    session.close = MagicMock()
    return session


@pytest.fixture
def organism(db):
    """Sample organism."""
    org = Organism(taxon_id="3847", name="Glycine max")
    db.add(org)
    db.commit()
    return org


@pytest.fixture
def add_chromosome(db, organism):
    """Factory adding a chromosome."""
    def _add(identifier: str, length: int | None = 10000) -> Chromosome:
        chromosome = Chromosome(
            primary_identifier=identifier,
            length=length,
            organism_no=organism.organism_no,
        )
        db.add(chromosome)
        db.commit()
        return chromosome
    return _add


@pytest.fixture
def add_gene(db, organism):
    """Factory adding a gene, optionally located on a chromosome."""
    def _add(
        identifier: str,
        chromosome: Chromosome | None = None,
        start: int = 1000,
        end: int = 2000,
        strand: str | None = "1",
        description: str | None = None,
    ) -> Gene:
        gene = Gene(
            primary_identifier=identifier,
            description=description,
            organism_no=organism.organism_no,
            length=end - start + 1,
        )
        if chromosome is not None:
            gene.locations.append(
                Location(
                    located_on=chromosome,
                    start_coord=start,
                    stop_coord=end,
                    strand=strand,
                )
            )
        db.add(gene)
        db.commit()
        return gene
    return _add


@pytest.fixture
def add_term(db):
    """Factory adding an ontology term with optional parents."""
    def _add(term_class=GOTerm, identifier: str = "GO:0008150", name: str = None, parents=()):
        term = term_class(identifier=identifier, name=name or identifier)
        term.parents.extend(parents)
        db.add(term)
        db.commit()
        return term
    return _add


@pytest.fixture
def add_annotation(db):
    """Factory adding an ontology annotation."""
    def _add(annotation_class, subject, term):
        annotation = annotation_class(subject=subject, ontology_term=term)
        db.add(annotation)
        db.commit()
        return annotation
    return _add
