"""Service layer: mask controller and mask operations returning ServiceResult.

Services may import from domain, engine, plugins and infrastructure layers.
They must never import from commands or output.
"""
