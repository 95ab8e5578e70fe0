from dataclasses import dataclass
from typing import Iterable, Tuple

from docsync.domains.documents.entities import Document

RECENT_LIMIT = 6


@dataclass(frozen=True)
class ListView:
    """Производные представления коллекции документов"""
    filtered: Tuple[Document, ...]
    recent: Tuple[Document, ...]
    starred: Tuple[Document, ...]


def matches_search(document: Document, search_term: str) -> bool:
    """Поиск подстроки в заголовке без учёта регистра"""
    return (search_term or "").lower() in document.title.lower()


def derive_views(
    documents: Iterable[Document],
    search_term: str = "",
    recent_limit: int = RECENT_LIMIT
) -> ListView:
    """Построение представлений filtered, recent и starred"""
    filtered = tuple(doc for doc in documents if matches_search(doc, search_term))

    # sorted устойчив и при reverse=True, равные метки сохраняют порядок filtered
    recent = tuple(
        sorted(filtered, key=lambda doc: doc.updated_at, reverse=True)[:recent_limit]
    )
    starred = tuple(doc for doc in filtered if doc.is_starred)

    return ListView(filtered=filtered, recent=recent, starred=starred)
