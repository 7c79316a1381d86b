# API Utilities - DRY Helpers
from oficina.api.utils.db_helpers import get_by_id, validate_fk, validate_unique
from oficina.api.utils.pagination import paginate_query, paginate_response, apply_search_filter
from oficina.api.utils.sequencers import generate_sequential_number, Prefixes
from oficina.api.utils.updates import update_entity
from oficina.api.utils.status import require_status, forbid_status

__all__ = [
    # db_helpers
    "get_by_id",
    "validate_fk",
    "validate_unique",
    # pagination
    "paginate_query",
    "paginate_response",
    "apply_search_filter",
    # sequencers
    "generate_sequential_number",
    "Prefixes",
    # updates
    "update_entity",
    # status
    "require_status",
    "forbid_status",
]
