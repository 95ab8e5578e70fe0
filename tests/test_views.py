"""Tests for the derived list views."""

from datetime import timedelta

from docsync.domains.listing.views import derive_views, matches_search
from fakes import T0, make_document


def _collection():
    return [
        make_document(id="a", title="Report Q3", updated_at=T0, is_starred=True),
        make_document(id="b", title="Shopping list", updated_at=T0 + timedelta(days=2)),
        make_document(id="c", title="Quarterly report", updated_at=T0 + timedelta(days=1), is_starred=True),
        make_document(id="d", title="Notes", updated_at=T0 + timedelta(days=3)),
    ]


class TestSearchFilter:
    """Поиск по заголовку без учёта регистра."""

    def test_case_insensitive_match(self):
        doc = make_document(title="Report Q3")
        for term in ("report", "Q3", "REPORT q3", "port q"):
            assert matches_search(doc, term)

    def test_non_matching_term(self):
        assert not matches_search(make_document(title="Report Q3"), "q4")

    def test_empty_term_matches_everything(self):
        views = derive_views(_collection(), "")
        assert [doc.id for doc in views.filtered] == ["a", "b", "c", "d"]

    def test_filtered_keeps_input_order(self):
        views = derive_views(_collection(), "report")
        assert [doc.id for doc in views.filtered] == ["a", "c"]


class TestRecent:
    """Представление recent."""

    def test_ten_documents_over_a_year(self):
        documents = [
            make_document(id=f"d{i}", title=f"Doc {i}", updated_at=T0 + timedelta(days=36 * i))
            for i in range(10)
        ]
        views = derive_views(documents, "")
        assert [doc.id for doc in views.recent] == ["d9", "d8", "d7", "d6", "d5", "d4"]

    def test_recent_sorted_descending(self):
        views = derive_views(_collection(), "")
        assert [doc.id for doc in views.recent] == ["d", "b", "c", "a"]

    def test_ties_keep_filtered_order(self):
        documents = [make_document(id=name, title=name, updated_at=T0) for name in "xyz"]
        views = derive_views(documents, "")
        assert [doc.id for doc in views.recent] == ["x", "y", "z"]

    def test_recent_never_exceeds_limit(self):
        documents = [make_document(id=str(i), title="t") for i in range(20)]
        assert len(derive_views(documents, "").recent) == 6
        assert len(derive_views(documents, "", recent_limit=3).recent) == 3


class TestStarred:
    """Представление starred."""

    def test_starred_is_subset_of_filtered_in_same_order(self):
        views = derive_views(_collection(), "")
        assert [doc.id for doc in views.starred] == ["a", "c"]
        assert set(views.starred) <= set(views.filtered)

    def test_starred_respects_search(self):
        views = derive_views(_collection(), "quarterly")
        assert [doc.id for doc in views.starred] == ["c"]


class TestPurity:
    """derive_views не имеет побочных эффектов."""

    def test_idempotent(self):
        documents = _collection()
        assert derive_views(documents, "re") == derive_views(documents, "re")

    def test_input_not_mutated(self):
        documents = _collection()
        before = [(doc.id, doc.title, doc.updated_at, doc.is_starred) for doc in documents]
        derive_views(documents, "report")
        assert [(doc.id, doc.title, doc.updated_at, doc.is_starred) for doc in documents] == before

    def test_filtered_subset_of_input(self):
        documents = _collection()
        views = derive_views(documents, "o")
        assert set(views.filtered) <= set(documents)
