# Middleware package init
"""
SmartNotesX Backend — Middleware Package
==========================================

Middleware Chain (outermost first):
    Request → [Rate Limit] → [Request ID] → [Access Log] → [GZip] → [CORS] → Route

    Rate limiting rejects before anything else runs; the request id is set
    before the access log line is written, so every line carries it.
"""
