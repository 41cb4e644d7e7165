from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable

import click
import httpx

from .cli_options import CliOptions
from .config import Config
from .errors import ResolverError
from .github_cache import GithubCache
from .resolver import GithubResolver


def _build_resolver(options: CliOptions) -> GithubResolver:
    return GithubResolver(
        options.resolver_options(),
        cache_store=GithubCache(options.cache_file),
    )


def _run(
    ctx: click.Context, operation: Callable[[GithubResolver], Awaitable[Any]]
) -> None:
    options: CliOptions = ctx.obj
    resolver = _build_resolver(options)
    try:
        payload = asyncio.run(operation(resolver))
    except ResolverError as exc:
        raise click.ClickException(str(exc)) from exc
    except httpx.HTTPError as exc:
        raise click.ClickException(f"Request to GitHub failed: {exc}") from exc
    click.echo(json.dumps(payload, indent=options.indent_value()))


@click.group()
@click.option(
    "--repository",
    type=str,
    default=Config.default_repository,
    show_default=True,
    help="GitHub repository in OWNER/NAME form.",
)
@click.option(
    "--token",
    type=str,
    envvar=Config.token_env,
    default=None,
    help=f"GitHub token (default: ${Config.token_env}).",
)
@click.option(
    "--minimum-major",
    type=int,
    default=5,
    show_default=True,
    help="Releases below this major version are not supported.",
)
@click.option(
    "--maximum-major",
    type=int,
    default=None,
    help="Releases above this major version are not supported.",
)
@click.option(
    "--cache-file",
    type=click.Path(dir_okay=False, path_type=str),
    default=None,
    help=f"Location of the HTTP cache (default: ${Config.cache_env} or the user config dir).",
)
@click.option(
    "--indent",
    type=int,
    default=2,
    show_default=True,
    help="Number of spaces for JSON indentation (use 0 for compact)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log requests and cache activity.")
@click.pass_context
def click_main(
    ctx: click.Context,
    repository: str,
    token: str | None,
    minimum_major: int,
    maximum_major: int | None,
    cache_file: str | None,
    indent: int,
    verbose: bool,
) -> None:
    """Look up GitHub releases, revalidating cached responses with etags."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = CliOptions(
        repository=repository,
        token=token,
        minimum_major=minimum_major,
        maximum_major=maximum_major,
        cache_file=cache_file,
        indent=indent,
        verbose=verbose,
    )


@click_main.command("latest")
@click.pass_context
def latest_command(ctx: click.Context) -> None:
    """Print the newest supported release."""
    _run(ctx, lambda resolver: resolver.get_latest_info())


@click_main.command("list")
@click.pass_context
def list_command(ctx: click.Context) -> None:
    """Print the first page of releases as returned by GitHub."""
    _run(ctx, lambda resolver: resolver.get_releases_list())


@click_main.command("tag")
@click.argument("tag", type=str)
@click.pass_context
def tag_command(ctx: click.Context, tag: str) -> None:
    """Print the release for TAG."""
    _run(ctx, lambda resolver: resolver.get_tag_info(tag))


def main() -> None:
    click_main(standalone_mode=True)


if __name__ == "__main__":
    main()
