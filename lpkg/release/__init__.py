"""Release packaging: versions, source archives, per-target dispatch."""

from __future__ import annotations
