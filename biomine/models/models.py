from typing import Optional

from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, String, Table, Text, VARCHAR
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class Organism(Base):
    __tablename__ = 'organism'
    __table_args__ = (
        Index('organism_taxon_id_i', 'taxon_id'),
        {'comment': 'Contains information about organisms contained in the database.'}
    )

    organism_no: Mapped[int] = mapped_column(Integer, primary_key=True, comment='Assigned unique identifier for an organism.')
    taxon_id: Mapped[Optional[str]] = mapped_column(VARCHAR(40), comment='The NCBI taxon_id for this organism.')
    name: Mapped[Optional[str]] = mapped_column(VARCHAR(240), comment='Full name of the organism.')

    bio_entity: Mapped[list['BioEntity']] = relationship('BioEntity', back_populates='organism')


class BioEntity(Base):
    __tablename__ = 'bio_entity'
    __table_args__ = (
        Index('bio_entity_class_i', 'entity_class'),
        Index('bio_entity_identifier_i', 'primary_identifier'),
        Index('bio_entity_organism_fk_i', 'organism_no'),
        {'comment': 'Genes, chromosomes, flanking regions and other annotatable entities. '
                'Single table; entity_class holds the concrete class name.'}
    )

    bio_entity_no: Mapped[int] = mapped_column(Integer, primary_key=True, comment='Assigned unique identifier for a bio entity.')
    entity_class: Mapped[str] = mapped_column(VARCHAR(40), nullable=False, comment='Concrete class of the entity (Gene, Chromosome, GeneFlankingRegion).')
    primary_identifier: Mapped[Optional[str]] = mapped_column(VARCHAR(255), comment='Primary identifier of the entity.')
    organism_no: Mapped[Optional[int]] = mapped_column(ForeignKey('organism.organism_no'), comment='FK to the ORGANISM table.')

    organism: Mapped[Optional['Organism']] = relationship('Organism', back_populates='bio_entity')
    ontology_annotations: Mapped[list['OntologyAnnotation']] = relationship('OntologyAnnotation', back_populates='subject')

    __mapper_args__ = {
        'polymorphic_on': 'entity_class',
        'polymorphic_identity': 'BioEntity',
    }

    def __repr__(self) -> str:
        return f"<{self.entity_class} {self.primary_identifier}>"


class SequenceFeature(BioEntity):
    length: Mapped[Optional[int]] = mapped_column(Integer, comment='Length of the feature in base pairs.')

    locations: Mapped[list['Location']] = relationship(
        'Location',
        foreign_keys='Location.feature_no',
        back_populates='feature',
        cascade='all, delete-orphan',
    )

    __mapper_args__ = {'polymorphic_identity': 'SequenceFeature'}


class Chromosome(SequenceFeature):
    __mapper_args__ = {'polymorphic_identity': 'Chromosome'}


class Gene(SequenceFeature):
    description: Mapped[Optional[str]] = mapped_column(Text, comment='Free text description of the gene, may carry GO identifiers.')

    __mapper_args__ = {'polymorphic_identity': 'Gene'}


class GeneFlankingRegion(SequenceFeature):
    distance: Mapped[Optional[str]] = mapped_column(VARCHAR(20), comment='Size of the region, e.g. 0.5kb.')
    direction: Mapped[Optional[str]] = mapped_column(VARCHAR(20), comment='upstream or downstream of the gene.')
    include_gene: Mapped[Optional[bool]] = mapped_column(Boolean, comment='Whether the region also spans the gene body.')
    gene_no: Mapped[Optional[int]] = mapped_column(ForeignKey('bio_entity.bio_entity_no'), comment='The gene this region flanks.')
    chromosome_no: Mapped[Optional[int]] = mapped_column(ForeignKey('bio_entity.bio_entity_no'), comment='The chromosome the region lies on.')

    gene: Mapped[Optional['Gene']] = relationship(
        'Gene',
        foreign_keys='GeneFlankingRegion.gene_no',
        remote_side='BioEntity.bio_entity_no',
    )
    chromosome: Mapped[Optional['Chromosome']] = relationship(
        'Chromosome',
        foreign_keys='GeneFlankingRegion.chromosome_no',
        remote_side='BioEntity.bio_entity_no',
    )

    __mapper_args__ = {'polymorphic_identity': 'GeneFlankingRegion'}


class Location(Base):
    __tablename__ = 'location'
    __table_args__ = (
        Index('location_feature_fk_i', 'feature_no'),
        Index('location_located_on_fk_i', 'located_on_no', 'start_coord'),
        {'comment': 'Coordinates of a sequence feature on another feature, usually a chromosome.'}
    )

    location_no: Mapped[int] = mapped_column(Integer, primary_key=True, comment='Assigned unique identifier for a location.')
    feature_no: Mapped[int] = mapped_column(ForeignKey('bio_entity.bio_entity_no'), nullable=False, comment='The located feature.')
    located_on_no: Mapped[int] = mapped_column(ForeignKey('bio_entity.bio_entity_no'), nullable=False, comment='The feature the coordinates refer to.')
    start_coord: Mapped[int] = mapped_column(Integer, nullable=False, comment='1-based start coordinate, inclusive.')
    stop_coord: Mapped[int] = mapped_column(Integer, nullable=False, comment='1-based stop coordinate, inclusive.')
    strand: Mapped[Optional[str]] = mapped_column(VARCHAR(2), comment='1, -1 or 0.')

    feature: Mapped['SequenceFeature'] = relationship('SequenceFeature', foreign_keys=[feature_no], back_populates='locations')
    located_on: Mapped['SequenceFeature'] = relationship('SequenceFeature', foreign_keys=[located_on_no])


ontology_term_parent = Table(
    'ontology_term_parent',
    Base.metadata,
    Column('ontology_term_no', ForeignKey('ontology_term.ontology_term_no'), primary_key=True),
    Column('parent_term_no', ForeignKey('ontology_term.ontology_term_no'), primary_key=True),
    comment='Contains the structure of the ontologies, the child:parent relationships between the terms.',
)


class OntologyTerm(Base):
    __tablename__ = 'ontology_term'
    __table_args__ = (
        Index('ontology_term_identifier_uk', 'identifier', unique=True),
        Index('ontology_term_class_i', 'term_class'),
        {'comment': 'Contains terms of the loaded ontologies (GO, PO, TO).'}
    )

    ontology_term_no: Mapped[int] = mapped_column(Integer, primary_key=True, comment='Assigned unique identifier for an ontology term.')
    term_class: Mapped[str] = mapped_column(VARCHAR(40), nullable=False, comment='Concrete class of the term (GOTerm, POTerm, TOTerm).')
    identifier: Mapped[str] = mapped_column(VARCHAR(40), nullable=False, comment='Term identifier, e.g. GO:0008150.')
    name: Mapped[Optional[str]] = mapped_column(VARCHAR(240), comment='Term name.')
    namespace: Mapped[Optional[str]] = mapped_column(VARCHAR(80), comment='Ontology namespace, e.g. biological_process.')
    description: Mapped[Optional[str]] = mapped_column(Text, comment='Definition for the term.')
    obsolete: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    parents: Mapped[list['OntologyTerm']] = relationship(
        'OntologyTerm',
        secondary=ontology_term_parent,
        primaryjoin=ontology_term_no == ontology_term_parent.c.ontology_term_no,
        secondaryjoin=ontology_term_no == ontology_term_parent.c.parent_term_no,
        back_populates='children',
    )
    children: Mapped[list['OntologyTerm']] = relationship(
        'OntologyTerm',
        secondary=ontology_term_parent,
        primaryjoin=ontology_term_no == ontology_term_parent.c.parent_term_no,
        secondaryjoin=ontology_term_no == ontology_term_parent.c.ontology_term_no,
        back_populates='parents',
    )
    ontology_annotations: Mapped[list['OntologyAnnotation']] = relationship('OntologyAnnotation', back_populates='ontology_term')

    __mapper_args__ = {
        'polymorphic_on': 'term_class',
        'polymorphic_identity': 'OntologyTerm',
    }

    def __repr__(self) -> str:
        return f"<{self.term_class} {self.identifier}>"


class GOTerm(OntologyTerm):
    __mapper_args__ = {'polymorphic_identity': 'GOTerm'}


class POTerm(OntologyTerm):
    __mapper_args__ = {'polymorphic_identity': 'POTerm'}


class TOTerm(OntologyTerm):
    __mapper_args__ = {'polymorphic_identity': 'TOTerm'}


class OntologyAnnotation(Base):
    __tablename__ = 'ontology_annotation'
    __table_args__ = (
        Index('ontology_annotation_subject_fk_i', 'subject_no'),
        Index('ontology_annotation_term_fk_i', 'ontology_term_no'),
        Index('ontology_annotation_class_i', 'annotation_class'),
        {'comment': 'Linking table between bio entities and ontology terms.'}
    )

    ontology_annotation_no: Mapped[int] = mapped_column(Integer, primary_key=True, comment='Assigned unique identifier for an annotation.')
    annotation_class: Mapped[str] = mapped_column(VARCHAR(40), nullable=False, comment='Concrete class of the annotation (GOAnnotation, POAnnotation, TOAnnotation).')
    subject_no: Mapped[int] = mapped_column(ForeignKey('bio_entity.bio_entity_no'), nullable=False, comment='The annotated entity.')
    ontology_term_no: Mapped[int] = mapped_column(ForeignKey('ontology_term.ontology_term_no'), nullable=False, comment='The annotating term.')
    qualifier: Mapped[Optional[str]] = mapped_column(String(40), comment='Annotation qualifier, e.g. NOT.')

    subject: Mapped['BioEntity'] = relationship('BioEntity', back_populates='ontology_annotations')
    ontology_term: Mapped['OntologyTerm'] = relationship('OntologyTerm', back_populates='ontology_annotations')

    __mapper_args__ = {
        'polymorphic_on': 'annotation_class',
        'polymorphic_identity': 'OntologyAnnotation',
    }


class GOAnnotation(OntologyAnnotation):
    __mapper_args__ = {'polymorphic_identity': 'GOAnnotation'}


class POAnnotation(OntologyAnnotation):
    __mapper_args__ = {'polymorphic_identity': 'POAnnotation'}


class TOAnnotation(OntologyAnnotation):
    __mapper_args__ = {'polymorphic_identity': 'TOAnnotation'}
