"""Domain layer — names, naming conventions, and conversion directives.

This layer depends only on stdlib.
It must never import from services, infrastructure, plugins, or config.
"""
