# Middleware package init
"""
RootNote Backend — Middleware Package
=====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    The request ID is set before the logging middleware reads it, and is
    added to the response headers on the way out.
"""
