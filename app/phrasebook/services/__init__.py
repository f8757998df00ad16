"""
Dependency injection services.

Provides singleton provider functions for the message engine.
"""

from phrasebook.services.providers import (
    get_binding_scanner,
    get_message_resolver,
    get_problem_renderer,
    get_settings,
)

__all__ = [
    "get_settings",
    "get_message_resolver",
    "get_binding_scanner",
    "get_problem_renderer",
]
