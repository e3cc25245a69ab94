from typing import Optional

import httpx
import pytest

from todo_rpc.client import RpcError, TodoRpcClient
from todo_rpc.main import app
from todo_rpc.repositories import get_repository
from todo_rpc.view import TodoListView


@pytest.fixture
def make_client(repo):
    """Factory for API clients talking to the in-process app."""
    app.dependency_overrides[get_repository] = lambda: repo

    def factory() -> TodoRpcClient:
        return TodoRpcClient("http://testserver", transport=httpx.ASGITransport(app=app))

    yield factory
    app.dependency_overrides.clear()


def failing_client(exc: Optional[Exception] = None) -> TodoRpcClient:
    """Client whose every call fails, either with a transport error or a 500 envelope."""

    def handler(request: httpx.Request) -> httpx.Response:
        if exc is not None:
            raise exc
        return httpx.Response(
            500,
            json={"error": {"code": "INTERNAL_SERVER_ERROR", "message": "database is locked", "data": {}}},
        )

    return TodoRpcClient("http://testserver", transport=httpx.MockTransport(handler))


class TestTodoRpcClient:
    @pytest.mark.asyncio
    async def test_round_trip_through_procedures(self, make_client):
        async with make_client() as api:
            assert await api.get_todos() == []
            created = await api.create_todo("Buy milk")
            assert created.description == "Buy milk"
            assert created.completed is False

            updated = await api.update_todo(created.id, True)
            assert updated.completed is True
            assert updated.created_at == created.created_at

            assert await api.get_todos() == [updated]
            assert (await api.delete_todo(created.id)).success is True
            assert (await api.delete_todo(created.id)).success is False

    @pytest.mark.asyncio
    async def test_not_found_raises_rpc_error(self, make_client):
        async with make_client() as api:
            with pytest.raises(RpcError) as excinfo:
                await api.update_todo(99999, True)
        err = excinfo.value
        assert err.code == "NOT_FOUND"
        assert err.status_code == 404
        assert err.data["id"] == 99999
        assert "99999" in err.message

    @pytest.mark.asyncio
    async def test_invalid_input_raises_rpc_error(self, make_client):
        async with make_client() as api:
            with pytest.raises(RpcError) as excinfo:
                await api.create_todo("   ")
        assert excinfo.value.code == "BAD_REQUEST"
        assert excinfo.value.status_code == 400

    @pytest.mark.asyncio
    async def test_non_envelope_response(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(502, text="Bad Gateway"))
        async with TodoRpcClient("http://testserver", transport=transport) as api:
            with pytest.raises(RpcError) as excinfo:
                await api.get_todos()
        assert excinfo.value.status_code == 502

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{"result": None}, {"result": "ok"}, {"result": []}])
    async def test_malformed_result_raises_rpc_error(self, body):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=body))
        async with TodoRpcClient("http://testserver", transport=transport) as api:
            with pytest.raises(RpcError) as excinfo:
                await api.get_todos()
            view = TodoListView(api)
            await view.load()
        assert excinfo.value.status_code == 200
        assert view.todos == []


class TestTodoListView:
    @pytest.mark.asyncio
    async def test_load_replaces_state(self, repo, make_client):
        repo.create("Existing one")
        repo.create("Existing two")
        async with make_client() as api:
            view = TodoListView(api)
            view.todos = []
            await view.load()
        assert [t.description for t in view.todos] == ["Existing one", "Existing two"]
        assert view.is_loading is False

    @pytest.mark.asyncio
    async def test_submit_appends_trimmed_and_clears_draft(self, repo, make_client):
        async with make_client() as api:
            view = TodoListView(api)
            await view.load()
            view.draft = "  Walk the dog  "
            created = await view.submit()
        assert created is not None
        assert created.description == "Walk the dog"
        assert view.todos == [created]
        assert view.draft == ""
        assert view.is_creating is False
        assert repo.get(created.id)["description"] == "Walk the dog"

    @pytest.mark.asyncio
    async def test_blank_submit_is_ignored(self, repo, make_client):
        async with make_client() as api:
            view = TodoListView(api)
            view.draft = "   "
            assert await view.submit() is None
        assert view.todos == []
        assert repo.list() == []

    @pytest.mark.asyncio
    async def test_toggle_uses_server_record(self, repo, make_client):
        repo.create("Toggle me")
        repo.create("Leave me")
        async with make_client() as api:
            view = TodoListView(api)
            await view.load()
            target, other = view.todos
            updated = await view.toggle(target)
            assert updated is not None and updated.completed is True
            assert view.todos == [updated, other]

            await view.toggle(view.find(target.id))
        assert view.find(target.id).completed is False
        assert repo.get(target.id)["completed"] is False

    @pytest.mark.asyncio
    async def test_remove_only_on_success(self, repo, make_client):
        keep = repo.create("Keep")
        drop = repo.create("Drop")
        async with make_client() as api:
            view = TodoListView(api)
            await view.load()
            assert await view.remove(drop["id"]) is True
            assert [t.id for t in view.todos] == [keep["id"]]

            # Removed behind the view's back: server says success=false, state stays
            repo.delete(keep["id"])
            assert await view.remove(keep["id"]) is False
        assert [t.id for t in view.todos] == [keep["id"]]

    @pytest.mark.asyncio
    async def test_toggle_of_vanished_todo_keeps_state(self, repo, make_client):
        repo.create("Gone soon")
        async with make_client() as api:
            view = TodoListView(api)
            await view.load()
            before = list(view.todos)
            repo.delete(before[0].id)
            assert await view.toggle(before[0]) is None
        assert view.todos == before

    @pytest.mark.asyncio
    @pytest.mark.parametrize("exc", [None, httpx.ConnectError("connection refused")])
    async def test_remote_failures_leave_state_untouched(self, exc, caplog):
        async with failing_client(exc) as api:
            view = TodoListView(api)
            await view.load()
            assert view.todos == []

            view.draft = "Keep my draft"
            assert await view.submit() is None
            assert view.draft == "Keep my draft"
            assert view.todos == []
        assert "Failed to load todos" in caplog.text
        assert "Failed to create todo" in caplog.text

    @pytest.mark.asyncio
    async def test_failed_mutations_do_not_touch_loaded_list(self, repo, make_client):
        repo.create("Stable")
        async with make_client() as api:
            view = TodoListView(api)
            await view.load()
        snapshot = list(view.todos)

        async with failing_client() as broken:
            view._client = broken
            assert await view.toggle(snapshot[0]) is None
            assert await view.remove(snapshot[0].id) is False
            await view.load()
        assert view.todos == snapshot


class TestRender:
    @pytest.mark.asyncio
    async def test_render_counts_and_marks(self, repo, make_client):
        first = repo.create("Write report")
        repo.create("Call mom")
        repo.update(first["id"], True)
        async with make_client() as api:
            view = TodoListView(api)
            await view.load()
        text = view.render()
        assert "Progress: 1 of 2 completed (50%)" in text
        assert f"[x] #{first['id']} Write report" in text
        assert "[ ] #" in text and "Call mom" in text
        assert view.progress_percent == 50

    def test_render_empty(self):
        view = TodoListView(client=None)  # type: ignore[arg-type]
        assert "No todos yet!" in view.render()
        assert view.progress_percent == 0
