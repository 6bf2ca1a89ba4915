"""Service layer — resolution cache, coercion engine, and helper installation.

Services may import from domain, infrastructure, plugins, and config.
"""
