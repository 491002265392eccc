"""
Schema Spine - Declarative attribute schemas with shared deferred defaults.

- schemaspine.core: kinds, option specs, schemas, derivation, resolution,
  and the attribute catalog built on them
"""

__version__ = "0.1.0"

from schemaspine.core import *  # noqa
