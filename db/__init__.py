"""
db/ - Database Layer
====================
Storage backends (PostgreSQL, SQLite), typed query parameters, the unit of
work that scopes connections and transactions, and schema initialization.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
