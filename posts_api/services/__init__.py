# Services package init
"""
Posts API: Services Layer
=========================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).

Service Inventory:
    - PostService: list / create / get / update / delete over the posts table
"""
