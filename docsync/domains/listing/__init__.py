from docsync.domains.listing.views import RECENT_LIMIT, ListView, derive_views, matches_search
from docsync.domains.listing.controller import DocumentListController

__all__ = [
    "RECENT_LIMIT", "ListView", "derive_views", "matches_search",
    "DocumentListController",
]
