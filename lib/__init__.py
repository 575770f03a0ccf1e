# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable infrastructure:
# - storage/: the Storage interface and its memory/PostgreSQL/MySQL backends
# - utils.py: Shared utilities (error base class, public ids, timestamps)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.utils import ApplicationError, generate_public_id, utc_now

__all__ = [
    "ApplicationError",
    "generate_public_id",
    "utc_now",
]
