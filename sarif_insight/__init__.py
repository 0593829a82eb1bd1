"""sarif_insight

Core package namespace for SARIF ingestion.

Why this exists
---------------
The engine (:mod:`ingest`) and the command line front end (:mod:`cli`) both
need to agree on what a parsed report *is*. This package owns that agreement:

* domain types (the typed data contracts produced by a parse)
* the error taxonomy shared by the engine and its callers
* small IO helpers (atomic JSON writes for exports)

It imports nothing from :mod:`ingest` or :mod:`cli`;
``tests/test_dependency_boundaries.py`` enforces that.
"""

from __future__ import annotations

__version__ = "0.3.0"
