"""Tests for the editing session controller."""

import asyncio

import pytest

from docsync.domains.documents.errors import LoadError, NotFoundError, SaveError
from docsync.domains.editing.scheduler import DebouncedSaveScheduler
from docsync.domains.editing.session import EditingSessionController, SaveStatus, SessionState
from docsync.domains.editing.surface import InMemorySurface
from docsync.domains.identity.entities import Identity
from docsync.domains.identity.session import AuthSession
from fakes import DEBOUNCE, T0, FakeDocumentStore


def make_session(store, document_id="d1", surface=None, **kwargs):
    return EditingSessionController(
        document_id,
        store,
        surface=surface,
        scheduler=DebouncedSaveScheduler(delay=DEBOUNCE, name=document_id),
        **kwargs
    )


class TestLoad:
    """Загрузка документа."""

    @pytest.mark.asyncio
    async def test_load_populates_local_state(self, store):
        surface = InMemorySurface()
        session = make_session(store, surface=surface)
        assert session.is_loading

        state = await session.load("d1", "u1")

        assert state is SessionState.READY
        assert session.document.title == "Draft"
        assert session.local_title == "Draft"
        assert session.local_content == ""
        assert session.save_status is SaveStatus.IDLE
        assert surface.seed_count == 1

    @pytest.mark.asyncio
    async def test_load_scoped_to_owner(self, store):
        session = make_session(store)

        await session.load("d1", "u1")

        assert store.list_calls[0].id == "d1"
        assert store.list_calls[0].user_id == "u1"

    @pytest.mark.asyncio
    async def test_missing_document_is_terminal_not_found(self, store):
        errors = []
        session = make_session(store, document_id="d9", on_error=errors.append)

        state = await session.load("d9", "u1")
        assert state is SessionState.NOT_FOUND
        assert session.is_not_found
        assert isinstance(errors[0], NotFoundError)

        session.edit_title("anything")
        assert not session.scheduler.is_armed

        # Повторов нет
        await session.load("d9", "u1")
        assert len(store.list_calls) == 1

    @pytest.mark.asyncio
    async def test_foreign_document_is_not_found(self, store):
        session = make_session(store)

        assert await session.load("d1", "someone-else") is SessionState.NOT_FOUND

    @pytest.mark.asyncio
    async def test_store_failure_reports_load_error(self, store):
        store.list_error = RuntimeError("network")
        session = make_session(store)

        state = await session.load("d1", "u1")

        assert state is SessionState.LOAD_FAILED
        assert isinstance(session.last_error, LoadError)
        assert session.document is None

    @pytest.mark.asyncio
    async def test_surface_seeded_only_once(self, store):
        surface = InMemorySurface()
        session = make_session(store, surface=surface)
        await session.load("d1", "u1")

        surface.input("<p>typed</p>")
        session.handle_content_change()
        await session.flush()
        await session.load("d1", "u1")

        assert surface.seed_count == 1
        assert surface.get_serialized_content() == "<p>typed</p>"

    def test_edits_before_load_are_ignored(self, store):
        session = make_session(store)

        session.edit_title("early")

        assert session.local_title == ""
        assert not session.scheduler.is_armed


class TestDebouncedEdits:
    """Правки склеиваются в одно сохранение."""

    @pytest.mark.asyncio
    async def test_typing_burst_saves_once_with_last_value(self, store):
        session = make_session(store)
        await session.load("d1", "u1")

        for title in ("Draft ", "Draft v", "Draft v2"):
            session.edit_title(title)
            assert session.local_title == title

        assert session.document.title == "Draft"
        assert session.document.updated_at == T0

        await asyncio.sleep(DEBOUNCE * 4)

        assert store.update_calls == [("d1", {"title": "Draft v2", "content": ""})]
        assert session.document.title == "Draft v2"
        assert session.document.updated_at > T0

    @pytest.mark.asyncio
    async def test_updated_at_advances_only_after_save_resolves(self, store):
        gate = store.hold_updates()
        session = make_session(store)
        await session.load("d1", "u1")

        session.edit_title("Draft v2")
        await asyncio.sleep(DEBOUNCE * 2)

        assert session.save_status is SaveStatus.SAVING
        assert session.status_label == "saving..."
        assert session.document.updated_at == T0
        assert session.document.title == "Draft"

        gate.set()
        await session.flush()

        assert session.save_status is SaveStatus.IDLE
        assert session.status_label == "saved"
        assert session.document.updated_at > T0

    @pytest.mark.asyncio
    async def test_edit_during_save_produces_one_follow_up(self, store):
        gate = store.hold_updates()
        session = make_session(store)
        await session.load("d1", "u1")

        session.edit_title("first")
        await asyncio.sleep(DEBOUNCE * 2)
        assert len(store.update_calls) == 1

        session.edit_title("second")
        session.edit_content("<p>body</p>")
        assert session.pending_save
        await asyncio.sleep(DEBOUNCE * 2)
        assert len(store.update_calls) == 1

        gate.set()
        await asyncio.sleep(0)
        await asyncio.sleep(DEBOUNCE * 3)

        assert store.update_calls == [
            ("d1", {"title": "first", "content": ""}),
            ("d1", {"title": "second", "content": "<p>body</p>"}),
        ]
        assert session.document.title == "second"
        assert not session.pending_save

    @pytest.mark.asyncio
    async def test_failed_save_keeps_confirmed_state(self, store):
        store.update_error = RuntimeError("offline")
        errors = []
        session = make_session(store, on_error=errors.append)
        await session.load("d1", "u1")

        session.edit_title("lost?")
        await session.flush()

        assert session.local_title == "lost?"
        assert session.document.title == "Draft"
        assert session.save_status is SaveStatus.IDLE
        assert isinstance(errors[0], SaveError)

    @pytest.mark.asyncio
    async def test_hung_store_times_out(self, store):
        store.hold_updates()
        session = make_session(store, timeout=DEBOUNCE)
        await session.load("d1", "u1")

        session.edit_title("stuck")
        await session.flush()

        assert session.save_status is SaveStatus.IDLE
        assert isinstance(session.last_error, SaveError)

    @pytest.mark.asyncio
    async def test_long_title_is_saved(self, store):
        session = make_session(store)
        await session.load("d1", "u1")

        session.edit_title("x" * 300)
        await session.flush()

        assert store.documents["d1"].title == "x" * 300
        assert session.last_error is None


class TestFormatting:
    """Команды форматирования."""

    @pytest.mark.asyncio
    async def test_format_reads_surface_and_schedules_save(self, store):
        surface = InMemorySurface()
        session = make_session(store, surface=surface)
        await session.load("d1", "u1")

        surface.input("<b>bold</b>")
        session.format_text("bold")

        assert surface.commands == [("bold", None)]
        assert session.local_content == "<b>bold</b>"
        assert session.scheduler.is_armed

    @pytest.mark.asyncio
    async def test_unknown_command_rejected(self, store):
        session = make_session(store, surface=InMemorySurface())
        await session.load("d1", "u1")

        with pytest.raises(ValueError, match="Unknown formatting command"):
            session.format_text("blink")


class TestStar:
    """Отметка из редактора."""

    @pytest.mark.asyncio
    async def test_toggle_is_not_debounced(self, store):
        session = make_session(store)
        await session.load("d1", "u1")

        task = session.toggle_star()
        assert session.document.is_starred is True
        assert not session.scheduler.is_armed

        await task
        assert store.update_calls == [("d1", {"is_starred": True})]

    def test_toggle_without_document(self, store):
        assert make_session(store).toggle_star() is None


class TestLoadSaveRace:
    """Медленная перезагрузка не затирает сохранённые правки."""

    @pytest.mark.asyncio
    async def test_stale_reload_is_discarded(self, store):
        session = make_session(store)
        await session.load("d1", "u1")

        gate = store.hold_lists()
        reload = asyncio.ensure_future(session.load("d1", "u1"))
        await asyncio.sleep(0)

        session.edit_title("Newer")
        await session.flush()
        assert store.documents["d1"].title == "Newer"

        gate.set()
        await reload

        assert session.local_title == "Newer"
        assert session.document.title == "Newer"

    @pytest.mark.asyncio
    async def test_reload_older_than_confirmed_state_is_discarded(self, draft):
        store = FakeDocumentStore([draft])
        session = make_session(store)
        await session.load("d1", "u1")
        session.edit_title("Saved")
        await session.flush()

        # Хранилище отдаёт устаревшую копию
        store.documents["d1"] = draft.copy()
        await session.load("d1", "u1")

        assert session.document.title == "Saved"
        assert session.local_title == "Saved"

    @pytest.mark.asyncio
    async def test_reload_keeps_edit_waiting_for_timer(self, store):
        session = make_session(store)
        await session.load("d1", "u1")

        session.edit_title("Mine")
        await session.load("d1", "u1")

        assert session.local_title == "Mine"
        assert session.has_unsaved_edits

        await session.flush()
        assert store.documents["d1"].title == "Mine"
        assert session.document.title == "Mine"

    @pytest.mark.asyncio
    async def test_reload_during_save_does_not_undo_it(self, store):
        gate = store.hold_updates()
        session = make_session(store)
        await session.load("d1", "u1")

        session.edit_title("Mine")
        await asyncio.sleep(DEBOUNCE * 2)
        assert session.scheduler.is_saving

        await session.load("d1", "u1")
        assert session.local_title == "Mine"

        gate.set()
        await session.flush()

        assert store.documents["d1"].title == "Mine"
        assert session.local_title == "Mine"
        assert session.document.title == "Mine"


class TestLifecycle:
    """Привязка к аутентификации и закрытие."""

    @pytest.mark.asyncio
    async def test_loads_when_user_resolves(self, store):
        auth = AuthSession()
        session = make_session(store)
        session.bind(auth)
        assert store.list_calls == []

        auth.resolve(Identity(id="u1"))
        assert await session.wait_loaded() is SessionState.READY

        # Тот же пользователь не вызывает повторной загрузки
        auth.resolve(Identity(id="u1"))
        assert len(store.list_calls) == 1

    @pytest.mark.asyncio
    async def test_reloads_after_sign_out_and_sign_in(self, store):
        auth = AuthSession()
        session = make_session(store)
        session.bind(auth)

        auth.resolve(Identity(id="u1"))
        await session.wait_loaded()
        auth.sign_out()
        auth.sign_in(Identity(id="u1"))
        await session.wait_loaded()

        assert len(store.list_calls) == 2

    @pytest.mark.asyncio
    async def test_close_flushes_last_edit_and_unsubscribes(self, store):
        auth = AuthSession()
        session = EditingSessionController(
            "d1", store, scheduler=DebouncedSaveScheduler(delay=10, name="d1")
        )
        session.bind(auth)
        auth.resolve(Identity(id="u1"))
        await session.wait_loaded()

        session.edit_title("last words")
        session.close()
        assert not session.scheduler.is_armed

        await session.flush()
        assert store.documents["d1"].title == "last words"

        session.edit_title("after close")
        auth.sign_in(Identity(id="u2"))
        assert len(store.list_calls) == 1
        assert len(store.update_calls) == 1

    @pytest.mark.asyncio
    async def test_edits_paused_while_signed_out(self, store):
        auth = AuthSession()
        session = make_session(store)
        session.bind(auth)
        auth.resolve(Identity(id="u1"))
        await session.wait_loaded()

        auth.sign_out()
        session.edit_title("nobody")

        assert session.local_title == "Draft"
        assert not session.scheduler.is_armed
        assert session.toggle_star() is None

        auth.sign_in(Identity(id="u1"))
        await session.wait_loaded()
        session.edit_title("back")
        await session.flush()

        assert store.documents["d1"].title == "back"

    @pytest.mark.asyncio
    async def test_edit_survives_reload_after_sign_in(self, store):
        auth = AuthSession()
        session = make_session(store)
        session.bind(auth)
        auth.resolve(Identity(id="u1"))
        await session.wait_loaded()

        session.edit_title("Mine")
        auth.sign_out()
        auth.sign_in(Identity(id="u1"))
        await session.wait_loaded()

        assert session.local_title == "Mine"
        await session.flush()
        assert store.documents["d1"].title == "Mine"
