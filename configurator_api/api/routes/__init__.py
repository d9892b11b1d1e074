"""
API route modules.

This package contains subrouters for:
- Catalog: categories with options, modules, parts
- BOM: generation and report export

Routers are included from configurator_api.api.main (under the /api/v1 prefix).
"""
