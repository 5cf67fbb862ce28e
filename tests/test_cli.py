import json

import pytest
from click.testing import CliRunner

from dynamo_fixture.cli.commands import cli

REGION = "us-east-1"
SIMPLE_TABLE = "dynamo-fixture-test"
COMPOSITE_TABLE = "orders"


@pytest.fixture
def runner():
    return CliRunner()


def _invoke(runner, *args):
    return runner.invoke(cli, [*args, "--region", REGION])


class TestTableCommands:
    def test_create_table(self, runner, dynamodb):
        result = _invoke(runner, "create-table", "--table", SIMPLE_TABLE)
        assert result.exit_code == 0
        assert "is ready" in result.output
        assert dynamodb.Table(SIMPLE_TABLE).key_schema[0]["AttributeName"] == "id"

    def test_create_composite_table(self, runner, dynamodb):
        result = _invoke(runner, "create-table", "--table", COMPOSITE_TABLE, "--composite")
        assert result.exit_code == 0
        key_names = [k["AttributeName"] for k in dynamodb.Table(COMPOSITE_TABLE).key_schema]
        assert key_names == ["partitionKey", "sortKey"]

    def test_table_from_env(self, runner, dynamodb):
        result = runner.invoke(
            cli, ["create-table", "--region", REGION], env={"DYNAMO_FIXTURE_TABLE": "from-env"}
        )
        assert result.exit_code == 0
        assert [t.name for t in dynamodb.tables.all()] == ["from-env"]

    def test_drop_table(self, runner, simple_table):
        result = _invoke(runner, "drop-table", "--table", SIMPLE_TABLE)
        assert result.exit_code == 0
        assert "Dropped" in result.output

    def test_drop_missing_table(self, runner, dynamodb):
        result = _invoke(runner, "drop-table", "--table", "missing")
        assert result.exit_code == 0
        assert "does not exist" in result.output


class TestItemCommands:
    def test_seed_and_get(self, runner, simple_table, tmp_path):
        items_file = tmp_path / "items.json"
        items_file.write_text(json.dumps([
            {"id": "a", "price": 1.5, "tags": ["x"]},
            {"id": "b", "count": 2},
        ]))

        result = _invoke(runner, "seed", "--table", SIMPLE_TABLE, str(items_file))
        assert result.exit_code == 0
        assert "Inserted 2 item(s)" in result.output

        result = _invoke(runner, "get", "--table", SIMPLE_TABLE, '{"id": "a"}')
        assert result.exit_code == 0
        assert json.loads(result.output) == {"id": "a", "price": 1.5, "tags": ["x"]}

    def test_get_missing(self, runner, simple_table):
        result = _invoke(runner, "get", "--table", SIMPLE_TABLE, '{"id": "missing"}')
        assert result.exit_code == 0
        assert "No item found" in result.output

    def test_remove_with_full_items(self, runner, composite_table, tmp_path):
        composite_table.put_item(Item={"partitionKey": "u1", "sortKey": "o1", "amount": 10})
        items_file = tmp_path / "items.json"
        items_file.write_text(json.dumps([{"partitionKey": "u1", "sortKey": "o1", "amount": 10}]))

        result = _invoke(runner, "remove", "--table", COMPOSITE_TABLE, str(items_file))

        assert result.exit_code == 0
        assert composite_table.scan()["Items"] == []

    def test_seed_rejects_non_array(self, runner, simple_table, tmp_path):
        items_file = tmp_path / "items.json"
        items_file.write_text('{"id": "a"}')
        result = _invoke(runner, "seed", "--table", SIMPLE_TABLE, str(items_file))
        assert result.exit_code == 2

    def test_get_rejects_bad_json(self, runner, simple_table):
        result = _invoke(runner, "get", "--table", SIMPLE_TABLE, "{not json")
        assert result.exit_code == 2

    def test_storage_error_exits_non_zero(self, runner, dynamodb, tmp_path):
        items_file = tmp_path / "items.json"
        items_file.write_text('[{"id": "a"}]')
        result = _invoke(runner, "seed", "--table", "missing", str(items_file))
        assert result.exit_code == 1
        assert "Error" in result.output
