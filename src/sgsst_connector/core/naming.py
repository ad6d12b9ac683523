"""
Label to field-key normalisation.

Field keys are derived from display labels by lowercasing and replacing every
character outside ``[a-z0-9]`` with an underscore. Keys only contain
``[a-z0-9_]`` and normalising a key again leaves it unchanged. Distinct labels
may collide
(``"Año"`` and ``"A o"`` both become ``"a_o"``); callers must not rely on
uniqueness.
"""

from __future__ import annotations

import re

_DISALLOWED = re.compile(r"[^a-z0-9]")


def normalize_identifier(label: str) -> str:
    """Return the field key for ``label``."""

    return _DISALLOWED.sub("_", label.lower())


__all__ = ["normalize_identifier"]
