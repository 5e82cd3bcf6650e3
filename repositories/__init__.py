"""
repositories/ - Data Access Layer
==================================
The order repository encapsulates all SQL for the order aggregate.
It receives raw rows from the database and returns domain model objects.
"""
