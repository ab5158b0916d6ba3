# python -m pytest app/tests/core/test_query_executor.py -v

"""Tests for SQL generation and result handling in QueryExecutor."""

import pytest

from app.core.errors import InvalidFieldTypeError, StoreError, UnknownTableError
from app.core.schema import ID, ZERO_ID


class TestList:
    @pytest.mark.asyncio
    async def test_list_sql_and_records(self, executor, store):
        store.fetch_results.append([(1, "Alice", None), (2, "Bob", 30)])

        records = await executor.list("users", 5, 0)

        assert records == [
            {"id": 1, "name": "Alice", "age": None},
            {"id": 2, "name": "Bob", "age": 30},
        ]
        assert store.calls == [
            (
                "fetch_all",
                "SELECT `id`, `name`, `age` FROM `users` ORDER BY `id` ASC LIMIT %s OFFSET %s",
                [5, 0],
            )
        ]

    @pytest.mark.asyncio
    async def test_list_empty_is_a_list(self, executor):
        assert await executor.list("users", 5, 10) == []

    @pytest.mark.asyncio
    async def test_unknown_table_runs_no_sql(self, executor, store):
        with pytest.raises(UnknownTableError):
            await executor.list("nope", 5, 0)
        assert store.calls == []


class TestGet:
    @pytest.mark.asyncio
    async def test_get_found(self, executor, store):
        store.fetch_results.append([(1, "Alice", None)])

        record = await executor.get("users", ID(1))

        assert record == {"id": 1, "name": "Alice", "age": None}
        assert store.statements() == ["SELECT `id`, `name`, `age` FROM `users` WHERE `id` = %s"]
        assert store.calls[0][2] == [1]

    @pytest.mark.asyncio
    async def test_get_missing_is_none(self, executor):
        assert await executor.get("users", ID(404)) is None


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_reports_affected_rows(self, executor, store):
        store.execute_results.extend([1, 0])

        assert await executor.delete("users", ID(1)) is True
        assert await executor.delete("users", ID(1)) is False
        assert store.statements() == ["DELETE FROM `users` WHERE `id` = %s"] * 2


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_returns_generated_id(self, executor, store):
        store.insert_results.append(12)

        new_id = await executor.create("users", ["name", "age"], ["Alice", None])

        assert new_id == 12
        assert store.calls == [
            ("insert", "INSERT INTO `users` (`name`, `age`) VALUES (%s, %s)", ["Alice", None], "id")
        ]

    @pytest.mark.asyncio
    async def test_create_without_auto_increment_returns_zero_id(self, executor, store):
        new_id = await executor.create("codes", ["code"], [7])

        assert new_id == ZERO_ID
        assert store.calls[0][3] is None

    @pytest.mark.asyncio
    async def test_create_with_no_columns_inserts_defaults(self, executor, store):
        await executor.create("codes", [], [])
        assert store.statements() == ["INSERT INTO `codes` () VALUES ()"]

    @pytest.mark.asyncio
    async def test_create_rejects_auto_increment_column(self, executor, store):
        with pytest.raises(ValueError):
            await executor.create("users", ["id", "name"], [5, "Alice"])
        assert store.calls == []

    @pytest.mark.asyncio
    async def test_create_rejects_mismatched_lengths(self, executor):
        with pytest.raises(ValueError):
            await executor.create("users", ["name"], [])


class TestUpdate:
    @pytest.mark.asyncio
    async def test_update_only_named_fields(self, executor, store):
        store.execute_results.append(1)

        updated = await executor.update("users", ID(3), ["age"], [30])

        assert updated is True
        assert store.calls == [("execute", "UPDATE `users` SET `age` = %s WHERE `id` = %s", [30, 3])]

    @pytest.mark.asyncio
    async def test_update_missing_row(self, executor, store):
        store.execute_results.append(0)
        assert await executor.update("users", ID(3), ["name", "age"], ["B", None]) is False

    @pytest.mark.asyncio
    async def test_update_primary_key_fails_before_sql(self, executor, store):
        with pytest.raises(InvalidFieldTypeError):
            await executor.update("users", ID(3), ["id"], [4])
        assert store.calls == []

    @pytest.mark.asyncio
    async def test_empty_update_is_a_noop(self, executor, store):
        assert await executor.update("users", ID(3), [], []) is False
        assert store.calls == []


@pytest.mark.asyncio
async def test_store_errors_propagate(executor, store):
    store.fail_with = "Database error: gone away"
    with pytest.raises(StoreError):
        await executor.list("users", 5, 0)


@pytest.mark.asyncio
async def test_placeholders_follow_the_store_dialect(catalog, store):
    from app.core.query_executor import QueryExecutor

    class DollarStore(type(store)):
        def quote_identifier(self, name):
            return '"' + name + '"'

        def placeholder(self, index):
            return f"${index}"

    pg_store = DollarStore(store.tables)
    pg_store.execute_results.append(1)

    await QueryExecutor(catalog, pg_store).update("users", ID(9), ["name", "age"], ["C", 1])

    assert pg_store.statements() == ['UPDATE "users" SET "name" = $1, "age" = $2 WHERE "id" = $3']
