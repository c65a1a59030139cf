"""
Biomine Database Package

This package provides database connection and session management
using SQLAlchemy.

Modules:
- engine: Database engine configuration and SessionLocal factory

Usage:
    from biomine.db.engine import SessionLocal, init_engine

    init_engine()
    with SessionLocal() as session:
        # perform database operations
        pass

Environment Variables:
    DATABASE_URL: SQLAlchemy database connection URL
    DB_SCHEMA: Database schema name (optional)
"""
