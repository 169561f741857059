"""
db/ - Database Layer
====================
Handles the PostgreSQL connection pool, the HR schema (tables, sequences,
audit triggers) and the translation of database errors into domain errors.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
