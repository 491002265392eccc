"""
Clock and identifier generators used as deferred defaults (stdlib-only).

``utc_now`` backs the create/update timestamp attributes and
``generate_uuid`` backs the UUID primary key. Both are zero-argument so they
can sit in a ``Deferred0`` default; sharing between fields depends on using
these exact function objects.

Tags:
    timestamps, uuid, utc, datetime, schema-spine, stdlib-only

Doc-Types:
    - API Reference
"""

import uuid
from datetime import UTC, datetime


def utc_now() -> datetime:
    """Get current UTC datetime (microsecond precision)."""
    return datetime.now(UTC)


def generate_uuid() -> str:
    """Generate a random (version 4) UUID in canonical string form."""
    return str(uuid.uuid4())
