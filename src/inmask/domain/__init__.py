"""Domain layer: mask definitions, character classes, edit intents.

This layer depends only on stdlib.
It must never import from engine, services, infrastructure, commands, or config.
"""
