# Services package init
"""
Notebook API - Services Layer
=============================

What:  Business logic between routes (HTTP) and the store.

Service Inventory:
    - NotebookService: maps each endpoint onto one notebook document
      round-trip (validate ids, read or rewrite, refresh lastAccess)
"""
