"""
Domain services: BOM consolidation engine, catalog views and report rendering.
"""
