"""
biomine Tests

Test Organization:
- test_flanking_regions.py, test_go_annotations.py, test_ontology_parents.py:
  postprocessing jobs against an in-memory SQLite warehouse
- test_commands.py: command line parsing and end-to-end runs
- test_settings.py, test_engine.py, test_ids.py, test_notifications.py:
  configuration, database setup and utilities
"""
