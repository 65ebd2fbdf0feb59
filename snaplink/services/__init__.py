"""
Services module for business logic separation.

This module contains service classes that encapsulate business logic,
keeping it separate from API endpoints and database models:
- code_generator: random URL-safe short codes
- link_store: persistence of links (uniqueness, atomic clicks)
- url_service: shortening and destination edits
- redirect_service: resolving codes and counting clicks
- ownership: who may mutate a link
- auth_service / qr_service: accounts and QR images
"""
