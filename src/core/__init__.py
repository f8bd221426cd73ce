"""
Core domain models, monetary primitives, and contracts.

This module contains the foundational building blocks that are independent
of external systems (storage, auth, UI, etc.).
"""
