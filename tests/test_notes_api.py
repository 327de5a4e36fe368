"""
Notebook API - Note and Data Endpoint Tests
===========================================

What:  Exercises note-level endpoints (compound key addressing) and the
       Data endpoints over HTTP against the SQLite-backed store.

What we test:
    ✅ The create → add note → rename → delete note → delete notebook walk
    ✅ Appending leaves prior notes untouched; removal of an absent id is a no-op
    ✅ Title/text updates refresh note and notebook lastAccess
    ✅ Data replacement discards previous queries; clears at every scope
    ✅ Well-formed but unmatched compound keys → 404
"""

import uuid
from datetime import datetime

import pytest

QUERIES = [
    {"question": "What is inertia?", "response": "Resistance to change in motion"},
    {"question": "Unit of force?", "response": "Newton"},
]


def parse_time(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


async def add_note(client, notebook_id: str, **fields) -> dict:
    response = await client.post(f"/notebook/{notebook_id}/notes", json=fields)
    assert response.status_code == 200, response.text
    return response.json()


class TestNoteLifecycle:
    @pytest.mark.asyncio
    async def test_full_walk(self, test_client, notebook_factory):
        notebook = await notebook_factory("Physics")
        nb_id = notebook["id"]

        note = await add_note(test_client, nb_id, title="Ch1", text="intro")
        fetched = (await test_client.get(f"/notebooks/{nb_id}")).json()
        assert [(n["id"], n["title"], n["text"]) for n in fetched["notes"]] == [
            (note["id"], "Ch1", "intro")
        ]

        renamed = await test_client.patch(
            f"/notebooks/{nb_id}/notes/{note['id']}/title", json={"title": "Chapter 1"}
        )
        assert renamed.status_code == 200

        current = (await test_client.get(f"/notebooks/{nb_id}/notes/{note['id']}")).json()
        assert current["title"] == "Chapter 1"
        assert parse_time(current["lastAccess"]) > parse_time(note["lastAccess"])

        assert (await test_client.delete(f"/notebooks/{nb_id}/notes/{note['id']}")).status_code == 200
        missing = await test_client.get(f"/notebooks/{nb_id}/notes/{note['id']}")
        assert missing.status_code == 404

        assert (await test_client.delete(f"/notebooks/{nb_id}")).status_code == 200
        assert (await test_client.get(f"/notebooks/{nb_id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_single_note_read_omits_data(self, test_client, notebook_factory):
        notebook = await notebook_factory()
        note = await add_note(test_client, notebook["id"], title="t", text="b", data={"info": "x"})

        response = await test_client.get(f"/notebooks/{notebook['id']}/notes/{note['id']}")

        assert response.status_code == 200
        assert response.json() == {
            "id": note["id"],
            "title": "t",
            "text": "b",
            "lastAccess": note["lastAccess"],
        }


class TestAddNote:
    @pytest.mark.asyncio
    async def test_append_grows_by_one_and_keeps_prior_notes(self, test_client, notebook_factory):
        notebook = await notebook_factory(notes=[{"title": "first", "text": "one"}])
        nb_id = notebook["id"]

        await add_note(test_client, nb_id, title="second")
        notes = (await test_client.get(f"/notebooks/{nb_id}/notes")).json()

        assert len(notes) == 2
        assert notes[0] == notebook["notes"][0]
        assert notes[1]["title"] == "second"

    @pytest.mark.asyncio
    async def test_plural_path_also_appends(self, test_client, notebook_factory):
        notebook = await notebook_factory()

        response = await test_client.post(f"/notebooks/{notebook['id']}/notes", json={"title": "p"})

        assert response.status_code == 200
        assert len((await test_client.get(f"/notebooks/{notebook['id']}/notes")).json()) == 1

    @pytest.mark.asyncio
    async def test_append_refreshes_notebook_last_access(self, test_client, notebook_factory):
        notebook = await notebook_factory()

        await add_note(test_client, notebook["id"], title="x")
        stamp = (await test_client.get(f"/notebooks/{notebook['id']}/lastaccessdate")).json()

        assert parse_time(stamp["lastAccess"]) > parse_time(notebook["lastAccess"])

    @pytest.mark.asyncio
    async def test_client_supplied_id_is_kept(self, test_client, notebook_factory):
        notebook = await notebook_factory()
        supplied = uuid.uuid4()

        note = await add_note(test_client, notebook["id"], id=str(supplied), title="mine")

        assert note["id"] == supplied.hex

    @pytest.mark.asyncio
    async def test_duplicate_id_is_400(self, test_client, notebook_factory):
        notebook = await notebook_factory()
        note = await add_note(test_client, notebook["id"], title="a")

        response = await test_client.post(
            f"/notebook/{notebook['id']}/notes", json={"id": note["id"], "title": "b"}
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_malformed_supplied_id_is_400(self, test_client, notebook_factory):
        notebook = await notebook_factory()

        response = await test_client.post(
            f"/notebook/{notebook['id']}/notes", json={"id": "nope", "title": "b"}
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_notebook_is_404(self, test_client):
        response = await test_client.post(f"/notebook/{uuid.uuid4().hex}/notes", json={"title": "a"})
        assert response.status_code == 404


class TestRemoveNote:
    @pytest.mark.asyncio
    async def test_absent_note_is_noop_success(self, test_client, notebook_factory):
        notebook = await notebook_factory(notes=[{"title": "stay"}])

        response = await test_client.delete(f"/notebooks/{notebook['id']}/notes/{uuid.uuid4().hex}")

        assert response.status_code == 200
        notes = (await test_client.get(f"/notebooks/{notebook['id']}/notes")).json()
        assert notes == notebook["notes"]

    @pytest.mark.asyncio
    async def test_malformed_note_id_is_400(self, test_client, notebook_factory):
        notebook = await notebook_factory()

        response = await test_client.delete(f"/notebooks/{notebook['id']}/notes/bad")

        assert response.status_code == 400


class TestNoteUpdates:
    @pytest.mark.asyncio
    async def test_text_update_changes_only_that_note(self, test_client, notebook_factory):
        notebook = await notebook_factory(notes=[{"title": "a", "text": "1"}, {"title": "b", "text": "2"}])
        first, second = notebook["notes"]

        response = await test_client.patch(
            f"/notebooks/{notebook['id']}/notes/{second['id']}/text", json={"text": "changed"}
        )

        assert response.status_code == 200
        assert response.json()["text"] == "changed"
        notes = (await test_client.get(f"/notebooks/{notebook['id']}/notes")).json()
        assert notes[0] == first
        assert notes[1]["text"] == "changed"
        assert notes[1]["title"] == "b"

    @pytest.mark.asyncio
    async def test_update_refreshes_notebook_last_access(self, test_client, notebook_factory):
        notebook = await notebook_factory(notes=[{"title": "a"}])
        note_id = notebook["notes"][0]["id"]

        await test_client.patch(
            f"/notebooks/{notebook['id']}/notes/{note_id}/title", json={"title": "b"}
        )
        stamp = (await test_client.get(f"/notebooks/{notebook['id']}/lastaccessdate")).json()

        assert parse_time(stamp["lastAccess"]) > parse_time(notebook["lastAccess"])

    @pytest.mark.asyncio
    async def test_unmatched_compound_key_is_404(self, test_client, notebook_factory):
        notebook = await notebook_factory(notes=[{"title": "a"}])

        response = await test_client.patch(
            f"/notebooks/{notebook['id']}/notes/{uuid.uuid4().hex}/title", json={"title": "b"}
        )

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_note_in_other_notebook_is_404(self, test_client, notebook_factory):
        owner = await notebook_factory("owner", notes=[{"title": "a"}])
        other = await notebook_factory("other")
        note_id = owner["notes"][0]["id"]

        response = await test_client.patch(
            f"/notebooks/{other['id']}/notes/{note_id}/text", json={"text": "x"}
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_missing_title_field_is_400(self, test_client, notebook_factory):
        notebook = await notebook_factory(notes=[{"title": "a"}])
        note_id = notebook["notes"][0]["id"]

        response = await test_client.patch(
            f"/notebooks/{notebook['id']}/notes/{note_id}/title", json={}
        )

        assert response.status_code == 400


class TestNoteData:
    @pytest.mark.asyncio
    async def test_replace_discards_previous_queries(self, test_client, notebook_factory):
        notebook = await notebook_factory(notes=[{"title": "a"}])
        url = f"/notebooks/{notebook['id']}/notes/{notebook['notes'][0]['id']}/data"

        first = await test_client.post(url, json={"info": "v1", "queries": QUERIES})
        assert first.json() == {"info": "v1", "queries": QUERIES}

        second = await test_client.patch(url, json={"info": "v2"})
        assert second.status_code == 200
        assert second.json() == {"info": "v2"}

        assert (await test_client.get(url)).json() == {"info": "v2"}

    @pytest.mark.asyncio
    async def test_alldata_matches_data(self, test_client, notebook_factory):
        notebook = await notebook_factory(notes=[{"title": "a"}, {"title": "b"}])
        second_id = notebook["notes"][1]["id"]
        base = f"/notebooks/{notebook['id']}/notes/{second_id}"
        await test_client.post(f"{base}/data", json={"info": "second"})

        assert (await test_client.get(f"{base}/alldata")).json() == {"info": "second"}

    @pytest.mark.asyncio
    async def test_replace_unknown_note_is_404(self, test_client, notebook_factory):
        notebook = await notebook_factory()

        response = await test_client.post(
            f"/notebooks/{notebook['id']}/notes/{uuid.uuid4().hex}/data", json={"info": "x"}
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_query_requires_both_halves(self, test_client, notebook_factory):
        notebook = await notebook_factory(notes=[{"title": "a"}])
        url = f"/notebooks/{notebook['id']}/notes/{notebook['notes'][0]['id']}/data"

        response = await test_client.post(url, json={"queries": [{"question": "only"}]})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_clear_one_note(self, test_client, notebook_factory):
        notebook = await notebook_factory(notes=[{"title": "a"}, {"title": "b"}])
        nb_id = notebook["id"]
        a_id, b_id = (n["id"] for n in notebook["notes"])
        await test_client.post(f"/notebooks/{nb_id}/notes/{a_id}/data", json={"info": "a"})
        await test_client.post(f"/notebooks/{nb_id}/notes/{b_id}/data", json={"info": "b"})

        response = await test_client.delete(f"/notebooks/{nb_id}/notes/{a_id}/data")

        assert response.status_code == 200
        assert (await test_client.get(f"/notebooks/{nb_id}/data")).json() == [{}, {"info": "b"}]

    @pytest.mark.asyncio
    async def test_clear_unknown_note_is_404(self, test_client, notebook_factory):
        notebook = await notebook_factory()

        response = await test_client.delete(
            f"/notebooks/{notebook['id']}/notes/{uuid.uuid4().hex}/data"
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_notebook_data_lists_each_note(self, test_client, notebook_factory):
        notebook = await notebook_factory(notes=[{"title": "a", "data": {"info": "x"}}, {"title": "b"}])

        response = await test_client.get(f"/notebooks/{notebook['id']}/data")

        assert response.status_code == 200
        assert response.json() == [{"info": "x"}, {}]

    @pytest.mark.asyncio
    async def test_notebook_data_unknown_is_404(self, test_client):
        response = await test_client.get(f"/notebooks/{uuid.uuid4().hex}/data")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_clear_notebook_data(self, test_client, notebook_factory):
        notebook = await notebook_factory(notes=[{"title": "a", "data": {"info": "x"}}])
        other = await notebook_factory("other", notes=[{"title": "b", "data": {"info": "y"}}])

        response = await test_client.delete(f"/notebooks/{notebook['id']}/data")

        assert response.status_code == 200
        assert (await test_client.get(f"/notebooks/{notebook['id']}/data")).json() == [{}]
        assert (await test_client.get(f"/notebooks/{other['id']}/data")).json() == [{"info": "y"}]

    @pytest.mark.asyncio
    async def test_clear_all_data(self, test_client, notebook_factory):
        first = await notebook_factory("one", notes=[{"title": "a", "data": {"info": "x"}}])
        second = await notebook_factory("two", notes=[{"title": "b", "data": {"info": "y"}}])

        response = await test_client.delete("/notebooks/removeAllData")

        assert response.status_code == 200
        for notebook in (first, second):
            data = (await test_client.get(f"/notebooks/{notebook['id']}/data")).json()
            assert data == [{}]
            titles = [n["title"] for n in (await test_client.get(f"/notebooks/{notebook['id']}/notes")).json()]
            assert titles == [notebook["notes"][0]["title"]]
