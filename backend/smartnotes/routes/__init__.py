# Routes package init
"""
SmartNotesX Backend — API Routes Package
==========================================

Route Inventory:
    - auth.py:       /api/auth/*        register, login, profile
    - notes.py:      /api/notes/*       browse, upload, update, delete
    - jobs.py:       /api/jobs/*        postings and applications
    - bookmarks.py:  /api/bookmarks/*   saved notes
    - admin.py:      /api/admin/*       dashboard and moderation
    - files.py:      /api/files/*       locally stored files
    - health.py:     /, /health

Routes stay thin: extract parameters, call a service, wrap the result in the
response envelope.
"""
