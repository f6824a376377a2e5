"""CLI entry point for skill-manager"""

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from codex_skill_manager import __version__
from codex_skill_manager.config import load_config
from codex_skill_manager.errors import CommandError, SkillManagerError
from codex_skill_manager.hashing import compute_skill_hash
from codex_skill_manager.models import ListState, PublishBump
from codex_skill_manager.platforms import SkillPlatform
from codex_skill_manager.store import SkillStore

PLATFORM_CHOICES = [p.storage_key for p in SkillPlatform]


def _load_store(ctx: click.Context) -> SkillStore:
    store = ctx.obj["store"]
    if store.load_skills() is ListState.FAILED:
        click.echo(f"❌ Error: {store.list_error}", err=True)
        raise click.Abort()
    return store


def _find_skills(store: SkillStore, name: str, platform=None):
    matches = [
        s for s in store.skills_named(name)
        if platform is None or s.platform is SkillPlatform(platform)
    ]
    if not matches:
        click.echo(f"❌ Error: no local skill named '{name}'", err=True)
        raise click.Abort()
    return matches


@click.group()
@click.version_option(version=__version__)
@click.option("--home", type=click.Path(path_type=Path), help="Base for platform roots (default: ~)")
@click.option("--data-dir", type=click.Path(path_type=Path), help="Config and publish-state directory")
@click.option("--verbose", "-v", is_flag=True, help="Verbose logging")
@click.pass_context
def cli(ctx, home, data_dir, verbose):
    """Codex Skill Manager - find, install and publish agent skills"""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    config = load_config(data_dir=data_dir, home=home)
    ctx.ensure_object(dict)
    ctx.obj["store"] = SkillStore(config)


@cli.command()
@click.option("--parallel/--sequential", default=True, help="Scan roots in parallel")
@click.pass_context
def scan(ctx, parallel):
    """Scan every skills root and summarise what was found"""
    store = ctx.obj["store"]
    click.echo("🔍 Scanning skill roots...")

    if store.load_skills(parallel=parallel) is ListState.FAILED:
        click.echo(f"❌ Error: {store.list_error}", err=True)
        raise click.Abort()

    result = store.last_scan
    click.echo("\n✅ Scan complete!")
    click.echo(f"   Total skills: {result.total_count}")
    counts = result.count_by_source()
    if counts:
        click.echo("")
        click.echo("   By source:")
        for source in sorted(counts):
            click.echo(f"     - {source}: {counts[source]}")

    if result.errors:
        click.echo("\n⚠️  Errors encountered:")
        for error in result.errors:
            click.echo(f"   - {error}")


@cli.command()
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Output file path")
@click.pass_context
def export(ctx, output):
    """Export the scanned skills to JSON"""
    from codex_skill_manager.exporters import JSONExporter

    store = _load_store(ctx)
    output_path = output or Path.cwd() / "skills.json"

    try:
        JSONExporter().export_to_file(store.last_scan, output_path)
    except OSError as e:
        click.echo(f"❌ Error: {e}", err=True)
        raise click.Abort()

    click.echo(f"✅ Exported to {output_path}")
    click.echo(f"   {store.last_scan.total_count} skills")


@cli.command(name="list")
@click.option(
    "--source",
    type=click.Choice(["all", "platform", "custom"], case_sensitive=False),
    default="all",
    show_default=True,
    help="Which skills to show",
)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def list_skills(ctx, source, output_json):
    """List local skills, one row per skill name"""
    store = _load_store(ctx)

    if source == "platform":
        groups = store.platform_groups()
    elif source == "custom":
        groups = store.grouped_local_skills([s for s in store.skills if s.is_from_custom_path])
    else:
        groups = store.grouped_local_skills()

    if output_json:
        from codex_skill_manager.exporters import JSONExporter

        click.echo(
            JSONExporter().export_groups(
                groups,
                annotate=lambda skill: {
                    "owned": store.is_owned(skill),
                    "needs_publish": store.is_owned(skill) and store.skill_needs_publish(skill),
                },
            )
        )
        return

    table = Table(title=f"Skills ({len(groups)})")
    table.add_column("Name", style="bold")
    table.add_column("Slug")
    table.add_column("Installed")
    table.add_column("Owned")
    table.add_column("Changes")

    for group in groups:
        skill = group.skill
        owned = store.is_owned(skill)
        platforms = ", ".join(
            sorted(p.label for p in group.installed_platforms)
        ) or (skill.custom_path.display_name if skill.custom_path else "")
        changes = ""
        if owned:
            changes = "unpublished" if store.skill_needs_publish(skill) else "published"
        table.add_row(skill.display_name, skill.name, platforms, "yes" if owned else "no", changes)

    Console().print(table)


@cli.command()
@click.argument("name")
@click.option("--platform", type=click.Choice(PLATFORM_CHOICES), help="Show the copy from this platform")
@click.pass_context
def show(ctx, name, platform):
    """Print a skill's SKILL.md body and its references"""
    store = _load_store(ctx)
    matches = _find_skills(store, name, platform)
    group = store.grouped_local_skills(matches)[0]
    skill = group.skill

    click.echo(f"# {skill.display_name}")
    click.echo(f"{skill.description}\n")
    click.echo(f"Path: {skill.folder_path}")
    stats = skill.stats
    click.echo(
        f"References: {stats.references}  Assets: {stats.assets}  "
        f"Scripts: {stats.scripts}  Templates: {stats.templates}"
    )
    for ref in skill.references:
        click.echo(f"  - {ref.name} ({ref.path.name})")
    click.echo("")
    try:
        click.echo(store.read_markdown(skill))
    except (OSError, UnicodeDecodeError) as e:
        click.echo(f"❌ Error: couldn't read {skill.manifest_path}: {e}", err=True)
        raise click.Abort()


@cli.command(name="hash")
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--include-binary", is_flag=True, help="Also hash files that aren't UTF-8 text")
def hash_command(path, include_binary):
    """Print the content hash of a skill directory"""
    click.echo(compute_skill_hash(path, include_binary=include_binary))


@cli.command()
@click.argument("archive", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--slug", required=True, help="Directory name to install as")
@click.option("--version", "version", help="Version recorded in the provenance file")
@click.option(
    "--platform",
    "platforms",
    type=click.Choice(PLATFORM_CHOICES),
    multiple=True,
    required=True,
    help="Destination platform (repeatable)",
)
@click.pass_context
def install(ctx, archive, slug, version, platforms):
    """Install a skill zip archive into one or more platform roots"""
    store = ctx.obj["store"]
    try:
        skill_id = store.install_archive(
            archive, slug, version, [SkillPlatform(p) for p in platforms]
        )
    except SkillManagerError as e:
        click.echo(f"❌ Error: {e}", err=True)
        completed = getattr(e, "completed", None)
        if completed:
            click.echo("   Already installed into:", err=True)
            for root in completed:
                click.echo(f"   - {root}", err=True)
        raise click.Abort()

    click.echo(f"✅ Installed {slug} ({skill_id})")


@cli.command()
@click.argument("name")
@click.option("--platform", type=click.Choice(PLATFORM_CHOICES), help="Only delete this platform's copy")
@click.option("--yes", is_flag=True, help="Don't ask for confirmation")
@click.pass_context
def delete(ctx, name, platform, yes):
    """Delete every local copy of a skill"""
    store = _load_store(ctx)
    matches = _find_skills(store, name, platform)

    if not yes:
        for skill in matches:
            click.echo(f"  - {skill.folder_path}")
        click.confirm(f"Delete {len(matches)} folder(s)?", abort=True)

    failed = store.delete_skills([s.id for s in matches])
    if failed:
        click.echo(f"❌ Error: couldn't delete {', '.join(failed)}", err=True)
        raise click.Abort()
    click.echo(f"🗑️  Deleted {len(matches)} copies of {name}")


@cli.command()
@click.argument("name")
@click.option(
    "--bump",
    type=click.Choice([b.value for b in PublishBump]),
    default=PublishBump.PATCH.value,
    show_default=True,
)
@click.option("--changelog", default="", help="Changelog text")
@click.option("--tag", "tags", multiple=True, help="Tag label (repeatable)")
@click.option("--published-version", help="Last version published to the registry")
@click.option("--platform", type=click.Choice(PLATFORM_CHOICES), help="Publish this platform's copy")
@click.pass_context
def publish(ctx, name, bump, changelog, tags, published_version, platform):
    """Publish an owned skill to clawdhub"""
    store = _load_store(ctx)
    matches = _find_skills(store, name, platform)
    skill = store.grouped_local_skills(matches)[0].skill

    try:
        state = store.publish_skill(
            skill, PublishBump(bump), changelog, list(tags), published_version
        )
    except SkillManagerError as e:
        click.echo(f"❌ Error: {e}", err=True)
        raise click.Abort()

    click.echo(f"✅ Published {skill.name}")
    click.echo(f"   Hash: {state.last_published_hash}")


@cli.command()
@click.pass_context
def whoami(ctx):
    """Show clawdhub CLI availability and login"""
    status = ctx.obj["store"].fetch_clawdhub_status()
    if not status.is_installed:
        click.echo(f"❌ {status.error_message}")
    elif status.is_logged_in:
        click.echo(f"👤 Logged in as {status.username}")
    else:
        click.echo("🔒 Not logged in to clawdhub")


@cli.group()
def paths():
    """Manage custom skill paths"""
    pass


@paths.command(name="list")
@click.pass_context
def paths_list(ctx):
    """List registered custom paths"""
    config = ctx.obj["store"].config
    if not config.custom_paths:
        click.echo("No custom paths registered.")
        return
    for custom in config.custom_paths:
        click.echo(f"{custom.storage_key}  {custom.display_name}  {custom.path}")


@paths.command(name="add")
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--name", "display_name", help="Display name (default: directory name)")
@click.pass_context
def paths_add(ctx, path, display_name):
    """Register a directory to scan for skills"""
    custom = ctx.obj["store"].add_custom_path(path, display_name)
    click.echo(f"✅ Added {custom.display_name} ({custom.storage_key})")


@paths.command(name="remove")
@click.argument("key")
@click.pass_context
def paths_remove(ctx, key):
    """Unregister a custom path by key, id or directory"""
    removed = ctx.obj["store"].remove_custom_path(key)
    if not removed:
        click.echo(f"❌ Error: no custom path matching '{key}'", err=True)
        raise click.Abort()
    click.echo(f"✅ Removed {removed.display_name}")


if __name__ == "__main__":
    cli()
