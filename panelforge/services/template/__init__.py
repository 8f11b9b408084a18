"""
Template generation services.

Turns an analyzed compose document into the pieces of a platform template:
input schema, generator source and conversion notes.
"""

from .emitter import GeneratorEmitter
from .interpolation import EnvInterpolator, SecretBinding, build_secret_bindings
from .review_notes import ReviewNotesEmitter
from .schema import SchemaDescription, SchemaField, SchemaSynthesizer

__all__ = [
    "GeneratorEmitter",
    "EnvInterpolator",
    "SecretBinding",
    "build_secret_bindings",
    "ReviewNotesEmitter",
    "SchemaDescription",
    "SchemaField",
    "SchemaSynthesizer",
]
