"""Command line interface for the NeoCities client."""

import logging
import sys
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .api_clients import NeocitiesError, NetworkError
from .config import ClientConfig, load_config
from .credentials import resolve_key
from .site import Site

console = Console()
logger = logging.getLogger(__name__)


def _fail(message: str, guidance: Optional[str] = None) -> None:
    """Print an error and exit with status 1."""
    console.print(f"❌ {message}", style="red", markup=False, soft_wrap=True)
    if guidance:
        console.print(guidance)
    sys.exit(1)


def _run(ctx: click.Context, operation):
    """Run a site operation, turning its errors into a failed exit."""
    try:
        return operation()
    except NetworkError as e:
        _fail(str(e), e.user_guidance if ctx.obj.get("verbose") else None)
    except (NeocitiesError, OSError, ValueError) as e:
        _fail(str(e))


def key_options(f):
    """Add the --key and --keyfile options to a command."""
    f = click.option(
        "--keyfile",
        type=click.Path(dir_okay=False),
        help="File holding the API key of your NeoCities site.",
    )(f)
    f = click.option("--key", help="The API key of your NeoCities site.")(f)
    return f


def _build_site(
    ctx: click.Context,
    key: Optional[str],
    keyfile: Optional[str],
    site_name: str = "",
) -> Site:
    try:
        resolved = resolve_key(key=key, keyfile=keyfile)
    except OSError as e:
        _fail(f"Failed to read keyfile {keyfile}: {e}")
    return Site(site_name=site_name, key=resolved, config=ctx.obj["config"])


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format."""
    if size_bytes >= 1024 * 1024 * 1024:
        return f"{size_bytes / (1024 * 1024 * 1024):.1f} GB"
    if size_bytes >= 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f} MB"
    if size_bytes >= 1024:
        return f"{size_bytes / 1024:.1f} KB"
    return f"{size_bytes} B"


@click.group()
@click.option("--config", "-c", type=click.Path(exists=False), help="Config file path")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.version_option(version=__version__, prog_name="neocities")
@click.pass_context
def cli(ctx, config: Optional[str], verbose: bool):
    """Manage a NeoCities site from the command line.

    \b
    AUTHENTICATION:
      Commands that change or list a site need its API key. Pass it with
      --key, point --keyfile at a file holding it, or set NEOCITIES_API_KEY.

    \b
    EXAMPLES:
      neocities upload index.html --keyfile ~/.neocities-key
      neocities upload build/about.html --name about.html --key KEY
      neocities push public
      neocities delete old.html drafts/notes.html
      neocities list
      neocities info mysite
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    try:
        client_config = load_config(config_path=config)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))

    ctx.obj["config"] = client_config

    level = logging.INFO if verbose else _log_level(client_config)
    logging.basicConfig(level=level, format="%(levelname)s:%(name)s:%(message)s")

    # Keep third-party request logging out of normal output
    if not verbose:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)

    logger.debug(f"Using NeoCities API at {client_config.base_url}")


def _log_level(client_config: ClientConfig) -> int:
    return getattr(logging, client_config.log_level.upper(), logging.WARNING)


@cli.command()
@click.argument("file", type=click.Path())
@click.option("--name", default="", help="The name you want for your uploaded file.")
@key_options
@click.pass_context
def upload(ctx, file: str, name: str, key: Optional[str], keyfile: Optional[str]):
    """Upload FILE to the site."""
    site = _build_site(ctx, key, keyfile)
    _run(ctx, lambda: site.upload_file(file, name))
    console.print(f"✅ Uploaded {file}", style="green")


@cli.command()
@click.argument("directory", type=click.Path())
@key_options
@click.pass_context
def push(ctx, directory: str, key: Optional[str], keyfile: Optional[str]):
    """Upload DIRECTORY and everything below it.

    Files keep their path relative to the current directory on the site.
    A file that fails to upload is reported and the push carries on.
    """
    site = _build_site(ctx, key, keyfile)
    report = _run(ctx, lambda: site.push(directory))

    for path, error in report.failed.items():
        console.print(
            f"⚠️  {path}: {error}", style="yellow", markup=False, soft_wrap=True
        )
    console.print(
        f"✅ Pushed {len(report.uploaded)} files ({len(report.failed)} failed)",
        style="green" if report.ok else "yellow",
    )


@cli.command()
@click.argument("files", nargs=-1, required=True)
@key_options
@click.pass_context
def delete(ctx, files: Tuple[str, ...], key: Optional[str], keyfile: Optional[str]):
    """Delete FILES from the site."""
    site = _build_site(ctx, key, keyfile)
    _run(ctx, lambda: site.delete_files(*files))
    console.print(f"✅ Deleted {len(files)} files", style="green")


@cli.command(name="list")
@click.argument("path", default="")
@key_options
@click.pass_context
def list_command(ctx, path: str, key: Optional[str], keyfile: Optional[str]):
    """List the files on the site, optionally below PATH."""
    site = _build_site(ctx, key, keyfile)
    files = _run(ctx, lambda: site.list_files(path))

    if not files:
        console.print("(empty directory)")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Path")
    table.add_column("Size", justify="right")
    table.add_column("Updated")

    for f in files:
        updated = f.updated_at.strftime("%Y-%m-%d %H:%M") if f.updated_at else ""
        if f.is_directory:
            table.add_row(f"📁 {f.path}/", "", updated)
        else:
            table.add_row(f"📄 {f.path}", format_file_size(f.size), updated)

    console.print(table)


@cli.command()
@click.argument("sitename")
@key_options
@click.pass_context
def info(ctx, sitename: str, key: Optional[str], keyfile: Optional[str]):
    """Show information about the site SITENAME."""
    site = _build_site(ctx, key, keyfile, site_name=sitename)
    _run(ctx, site.get_info)

    site_info = site.info
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Site", site_info.sitename or sitename)
    table.add_row("Hits", str(site_info.hits))
    if site_info.views is not None:
        table.add_row("Views", str(site_info.views))
    if site_info.created_at:
        table.add_row("Created", site_info.created_at.isoformat())
    if site_info.last_updated:
        table.add_row("Last updated", site_info.last_updated.isoformat())
    table.add_row("Domain", site_info.domain or "")
    table.add_row("Tags", ", ".join(site_info.tags))

    console.print(table)


def main():
    """Console script entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
