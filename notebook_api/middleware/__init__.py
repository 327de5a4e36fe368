# Middleware package init
"""
Notebook API - Middleware Package
=================================

Middleware Chain (request direction):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Request ID runs first so every access log line and every error body
    carries the correlation id. CORS answers preflight OPTIONS requests
    before they reach the router.
"""
