"""
models/ - Domain Layer
======================
Plain dataclasses describing orders and the entities they reference.
Produced by the repositories on read and consumed by them on write.
"""
