from datetime import datetime, timedelta, timezone

import pytest

from gentest.core.exceptions import BackendError
from gentest.repositories.implementations.sql_row_store import SQLRowStore


@pytest.fixture
def store(db_session):
    return SQLRowStore(db_session)


async def _seed(store):
    user = (await store.insert("users", {"name": "Ana", "email": "ana@example.com", "password_hash": "x"}))[0]
    project = (await store.insert("projects", {"name": "Loja", "user_id": user["id"]}))[0]
    use_case = (await store.insert(
        "use_cases",
        {"name": "Login", "actor": "Usuário", "main_flow": "Entrar", "project_id": project["id"]},
    ))[0]
    return user, project, use_case


def _test_case(use_case_id, title, **extra):
    return {
        "title": title,
        "type": "Caminho Feliz",
        "steps": "Entrar",
        "expected_result": "Painel",
        "use_case_id": use_case_id,
        **extra,
    }


@pytest.mark.asyncio
async def test_insert_fills_id_defaults_and_timestamp(store):
    user, project, _ = await _seed(store)

    assert len(project["id"]) == 36
    assert project["description"] == ""
    assert project["user_id"] == user["id"]
    assert project["created_at"] is not None


@pytest.mark.asyncio
async def test_select_orders_newest_first(store):
    _, _, use_case = await _seed(store)
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    await store.insert(
        "test_cases",
        [
            _test_case(use_case["id"], "antigo", created_at=base),
            _test_case(use_case["id"], "novo", created_at=base + timedelta(minutes=5)),
        ],
    )

    rows = await store.select(
        "test_cases", filters={"use_case_id": use_case["id"]}, order_by="created_at", descending=True
    )

    assert [row["title"] for row in rows] == ["novo", "antigo"]


@pytest.mark.asyncio
async def test_delete_by_id_keeps_siblings(store):
    _, _, use_case = await _seed(store)
    first, second = await store.insert(
        "test_cases", [_test_case(use_case["id"], "um"), _test_case(use_case["id"], "dois")]
    )

    deleted = await store.delete("test_cases", {"id": first["id"]})

    assert deleted == 1
    remaining = await store.select("test_cases", filters={"use_case_id": use_case["id"]})
    assert [row["id"] for row in remaining] == [second["id"]]


@pytest.mark.asyncio
async def test_update_returns_updated_rows(store):
    _, project, _ = await _seed(store)

    rows = await store.update("projects", {"name": "Nova"}, {"id": project["id"]})

    assert rows[0]["name"] == "Nova"
    assert await store.update("projects", {"name": "x"}, {"id": "missing"}) == []


@pytest.mark.asyncio
async def test_replace_swaps_rows_of_one_parent(store):
    _, _, use_case = await _seed(store)
    await store.insert("test_cases", [_test_case(use_case["id"], "velho")])

    inserted = await store.replace(
        "test_cases", {"use_case_id": use_case["id"]}, [_test_case(use_case["id"], "novo")]
    )

    assert [row["title"] for row in inserted] == ["novo"]
    rows = await store.select("test_cases", filters={"use_case_id": use_case["id"]})
    assert [row["title"] for row in rows] == ["novo"]


@pytest.mark.asyncio
async def test_failed_replace_keeps_previous_rows(store):
    _, _, use_case = await _seed(store)
    await store.insert("test_cases", [_test_case(use_case["id"], "velho")])

    with pytest.raises(BackendError):
        # title is required
        await store.replace("test_cases", {"use_case_id": use_case["id"]}, [{"use_case_id": use_case["id"]}])

    rows = await store.select("test_cases", filters={"use_case_id": use_case["id"]})
    assert [row["title"] for row in rows] == ["velho"]


@pytest.mark.asyncio
async def test_deleting_parent_cascades(store):
    _, project, use_case = await _seed(store)
    test_case = (await store.insert("test_cases", _test_case(use_case["id"], "um")))[0]
    await store.insert(
        "code_skeletons",
        {"test_case_id": test_case["id"], "framework": "JavaScript + Cypress", "generated_code": "cy.visit('/')"},
    )

    await store.delete("projects", {"id": project["id"]})

    assert await store.select("use_cases") == []
    assert await store.select("test_cases") == []
    assert await store.select("code_skeletons") == []


@pytest.mark.asyncio
async def test_foreign_key_violation_is_a_backend_error(store):
    with pytest.raises(BackendError):
        await store.insert("projects", {"name": "Órfão", "user_id": "missing"})


@pytest.mark.asyncio
async def test_unknown_table_and_column(store):
    with pytest.raises(BackendError):
        await store.select("nope")
    with pytest.raises(BackendError):
        await store.select("projects", filters={"nope": 1})
