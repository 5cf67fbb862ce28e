import json
import logging
from decimal import Decimal

import click
from botocore.exceptions import BotoCoreError, ClientError

from dynamo_fixture.fixture.table import TableFixture
from dynamo_fixture.storage.client import DocumentClient
from dynamo_fixture.testing.tables import (
    connection_config,
    create_composite_table,
    create_table,
    delete_table,
)

logger = logging.getLogger(__name__)

_table_option = click.option("--table", required=True, envvar="DYNAMO_FIXTURE_TABLE", help="Table name")
_region_option = click.option("--region", envvar="AWS_DEFAULT_REGION")
_endpoint_option = click.option(
    "--endpoint-url", envvar="DYNAMO_FIXTURE_ENDPOINT_URL", help="e.g. http://localhost:8000 for DynamoDB Local"
)


def _json_default(value):
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _load_json(text: str, source: str):
    try:
        # boto3 rejects floats, numbers must be Decimal
        return json.loads(text, parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"invalid JSON in {source}: {e}") from e


def _load_items(file) -> list:
    items = _load_json(file.read(), file.name)
    if not isinstance(items, list):
        raise click.BadParameter(f"{file.name} must contain a JSON array")
    return items


@click.group()
@click.version_option(package_name="dynamo-fixture")
@click.option("-v", "--verbose", is_flag=True, help="Log every request")
def cli(verbose):
    """Create, seed and clear DynamoDB tables used by test suites."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


@cli.command("create-table")
@_table_option
@_region_option
@_endpoint_option
@click.option("--composite", is_flag=True, help="Key on partitionKey/sortKey instead of id")
def create_table_cmd(table, region, endpoint_url, composite):
    """Create a pay-per-request test table. An existing table is left alone."""
    dynamodb = DocumentClient(connection_config(region, endpoint_url)).resource
    try:
        if composite:
            create_composite_table(dynamodb, table)
        else:
            create_table(dynamodb, table)
    except (BotoCoreError, ClientError) as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Table {table} is ready")


@cli.command("drop-table")
@_table_option
@_region_option
@_endpoint_option
def drop_table_cmd(table, region, endpoint_url):
    """Delete a test table. A missing table is not an error."""
    dynamodb = DocumentClient(connection_config(region, endpoint_url)).resource
    try:
        dropped = delete_table(dynamodb, table)
    except (BotoCoreError, ClientError) as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Dropped {table}" if dropped else f"Table {table} does not exist")


@cli.command()
@_table_option
@_region_option
@_endpoint_option
@click.argument("file", type=click.File("r"))
def seed(table, region, endpoint_url, file):
    """Insert every item from a JSON array file."""
    items = _load_items(file)
    fixture = TableFixture(connection_config(region, endpoint_url), table)
    try:
        for item in items:
            fixture.insert(item)
    except (BotoCoreError, ClientError) as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Inserted {len(items)} item(s) into {table}")


@cli.command()
@_table_option
@_region_option
@_endpoint_option
@click.argument("file", type=click.File("r"))
def remove(table, region, endpoint_url, file):
    """Remove every item (or key) listed in a JSON array file."""
    items = _load_items(file)
    fixture = TableFixture(connection_config(region, endpoint_url), table)
    try:
        for item in items:
            fixture.remove(item)
    except (BotoCoreError, ClientError) as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Removed {len(items)} item(s) from {table}")


@cli.command()
@_table_option
@_region_option
@_endpoint_option
@click.argument("key")
def get(table, region, endpoint_url, key):
    """Print the item for a JSON key (or full item)."""
    key_or_item = _load_json(key, "KEY")
    fixture = TableFixture(connection_config(region, endpoint_url), table)
    try:
        response = fixture.get(key_or_item)
    except (BotoCoreError, ClientError) as e:
        raise click.ClickException(str(e)) from e

    if "Item" not in response:
        click.echo("No item found")
        return
    click.echo(json.dumps(response["Item"], indent=2, sort_keys=True, default=_json_default))
