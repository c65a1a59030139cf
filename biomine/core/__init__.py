"""
Biomine Core Package

This package contains configuration shared by the postprocessing
jobs and the command line.

Modules:
- settings: pydantic-settings configuration loaded from the
  environment and an optional .env file

Environment Variables:
    DATABASE_URL: SQLAlchemy database connection URL
    DB_SCHEMA: Database schema name (optional)
    BATCH_SIZE: Progress logging / flush interval
"""
