# Routes package init
"""
Posts API: API Routes Package
=============================

Route Inventory:
    - posts.py:   /posts, /posts/{id}   (CRUD over the posts resource)
    - health.py:  GET /health           (service health check)

Routes are THIN: they extract request data, call PostService and pick the
status code. Business rules live in services and validation.
"""
