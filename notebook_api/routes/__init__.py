# Routes package init
"""
Notebook API - Routes Package
=============================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - notebooks.py: notebook CRUD, sparse patch, lastAccess, notebook-wide Data
    - notes.py:     notes addressed by (notebook id, note id) and their Data
    - health.py:    GET /health

Routes stay thin: extract path params and bodies, call NotebookService,
return the response model. Business rules live in the service.
"""
