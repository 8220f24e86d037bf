"""skillreg CLI — validate, address, publish, search, and resolve skill manifests."""

import asyncio
import json

import click
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from skillreg import __version__

console = Console()


def _load_manifest(path: str) -> dict:
    """Read a manifest from a YAML or JSON file."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise click.ClickException(f"Failed to read {path}: {e}")
    if not isinstance(data, dict):
        raise click.ClickException(f"{path} does not contain a manifest object")
    return data


def _build_registry(publisher: str | None = None, offline: bool = False):
    from pydantic import ValidationError

    from skillreg.config import RegistryConfig
    from skillreg.registry.service import build_registry

    try:
        config = RegistryConfig.from_env()
    except ValidationError as e:
        raise click.ClickException(f"Invalid configuration: {e}")
    if publisher:
        config.account_id = publisher
    if offline:
        config.broker_url = ""
        config.mirror_url = ""
    return build_registry(config)


def _print_violations(errors: list[str]) -> None:
    console.print("[red]Invalid skill manifest:[/]")
    for error in errors:
        console.print(f"  [red]x[/] {error}")


@click.group()
@click.version_option(version=__version__)
@click.option("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, WARNING, ...)")
def main(log_level: str):
    """skillreg — skill registry for agent marketplaces.

    Validate skill manifests, derive their ledger addresses, publish them
    to a catalog or remote broker, and discover skills by keyword.
    """
    from skillreg.utils.log import configure_logging

    configure_logging(log_level)


# ── Validate ─────────────────────────────────────────────────────────


@main.command()
@click.argument("manifest_path")
def validate(manifest_path: str):
    """Validate a skill manifest file."""
    from skillreg.registry.validator import validate_manifest

    console.print(f"\n[bold blue]skillreg[/] — Validating: {manifest_path}\n")

    result = validate_manifest(_load_manifest(manifest_path))
    if result.valid:
        console.print("  [green]v[/] Manifest is valid")
        return

    console.print("[red]Validation FAILED:[/]")
    for error in result.errors:
        console.print(f"  [red]x[/] {error}")
    raise SystemExit(1)


# ── Address ──────────────────────────────────────────────────────────


@main.command()
@click.argument("name")
@click.argument("version")
def address(name: str, version: str):
    """Print the topic id a NAME/VERSION pair publishes to."""
    from skillreg.registry.address import derive_address

    click.echo(derive_address(name, version))


# ── Publish ──────────────────────────────────────────────────────────


@main.command()
@click.argument("manifest_path")
@click.option("--publisher", "-p", default=None, help="Publisher account id (default: HEDERA_ACCOUNT_ID)")
@click.option("--broker/--no-broker", default=False, help="Also mirror the manifest to the remote broker")
@click.option("--quote-only", is_flag=True, help="Only request a broker quote, do not publish")
def publish(manifest_path: str, publisher: str | None, broker: bool, quote_only: bool):
    """Publish a skill manifest and print its catalog record."""
    from skillreg.utils.exceptions import InvalidManifestError

    console.print(f"\n[bold blue]skillreg[/] — Publishing: {manifest_path}\n")

    data = _load_manifest(manifest_path)
    registry = _build_registry(publisher, offline=not broker)

    try:
        record = registry.publish(data)
    except InvalidManifestError as e:
        _print_violations(e.errors)
        raise SystemExit(1)

    console.print(f"  Published: {record.manifest.qualified_id}")
    console.print(f"  Topic:     [cyan]{record.topic_id}[/]")
    console.print(f"  Publisher: {record.publisher}")

    if not broker:
        return

    console.print("\n[bold]Mirroring to broker...[/]")
    result = asyncio.run(registry.mirror_publish(record.manifest, quote_only=quote_only))

    lines = [f"Status: {result.status}"]
    if result.quote_id:
        lines.append(f"Quote:  {result.quote_id} ({result.cost:g} credits)")
    if result.job_id:
        lines.append(f"Job:    {result.job_id}")
    if result.detail:
        lines.append(f"Detail: {result.detail}")
    style = "green" if result.status in ("published", "quoted") else "yellow"
    console.print(Panel("\n".join(lines), title="Broker", border_style=style))


# ── Search ───────────────────────────────────────────────────────────


@main.command()
@click.argument("query", default="")
@click.option("--manifest", "-m", "manifests", multiple=True, help="Manifest file to load into the catalog first")
@click.option("--source", default="local", type=click.Choice(["local", "broker", "hybrid"]))
@click.option("--category", "-c", default="", help="Filter by skill category")
@click.option("--tag", "-t", default="", help="Filter by tag")
@click.option("--limit", "-n", default=20, help="Maximum results")
@click.option("--no-seed", is_flag=True, help="Do not load the built-in marketplace skills")
def search(query: str, manifests: tuple, source: str, category: str, tag: str, limit: int, no_seed: bool):
    """Search skills by keyword. An empty QUERY lists everything."""
    from skillreg.registry.seed import seed_marketplace_skills
    from skillreg.utils.exceptions import InvalidManifestError

    registry = _build_registry(offline=source == "local")
    if not no_seed:
        seed_marketplace_skills(registry)
    for path in manifests:
        try:
            registry.publish(_load_manifest(path))
        except InvalidManifestError as e:
            console.print(f"[red]Cannot load {path}[/]")
            _print_violations(e.errors)
            raise SystemExit(1)

    result = asyncio.run(
        registry.search(query, category=category, tag=tag, limit=limit, source=source)
    )

    if result.source == "local" and source != "local":
        console.print("[yellow]No broker results, showing local catalog.[/]")

    if result.skills:
        table = Table(title=f"Local skills ({len(result.skills)} found)")
        table.add_column("Topic", style="dim")
        table.add_column("Name", style="cyan", no_wrap=True)
        table.add_column("Version")
        table.add_column("Categories")
        table.add_column("Description")
        for record in result.skills:
            m = record.manifest
            categories = ", ".join(sorted({s.category for s in m.skills}))
            table.add_row(record.topic_id, m.name, m.version, categories, m.description[:50])
        console.print(table)

    for skill in result.broker_skills:
        console.print(f"  [magenta]broker[/] [cyan]{skill.get('name', '?')}[/] {skill.get('version', '')}")

    if not result.skills and not result.broker_skills:
        console.print("[yellow]No matching skills found.[/]")


# ── Resolve ──────────────────────────────────────────────────────────


@main.command()
@click.argument("topic_id")
@click.option("--sequence", "-s", default=1, help="Topic message sequence number")
def resolve(topic_id: str, sequence: int):
    """Resolve a manifest published directly to a ledger topic."""
    from skillreg.utils.exceptions import LedgerLookupError

    registry = _build_registry()
    if not registry.has_on_chain_client:
        raise click.ClickException("No mirror node configured (set SKILLREG_MIRROR_URL)")

    try:
        manifest = asyncio.run(registry.resolve_on_chain(topic_id, sequence))
    except LedgerLookupError as e:
        raise click.ClickException(str(e))

    if manifest is None:
        console.print(f"[yellow]No skill manifest at {topic_id}#{sequence}.[/]")
        return

    click.echo(json.dumps(manifest.to_dict(), indent=2))


if __name__ == "__main__":
    main()
