from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer

from .core.config import ConfigError, DocpagerConfig, load_config, parse_max_page_size
from .core.exceptions import DocpagerError
from .core.logging_utils import configure_logging
from .document.loader import load_document_file
from .document.nodes import DocumentNode
from .integrations.chat.sender import render_and_send
from .integrations.matrix import MatrixChatTransport, MatrixRestClient, room_thread
from .render import render_pages

logger = logging.getLogger("docpager.cli")

OUTPUT_FORMATS = ("text", "html", "both", "json")

app = typer.Typer(add_completion=False)


def get_version() -> str:
    import importlib.metadata

    try:
        return importlib.metadata.version("docpager")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def raise_exit(message: str, *, cause: Optional[BaseException] = None) -> NoReturn:
    typer.echo(message, err=True)
    if cause is not None:
        raise typer.Exit(code=1) from cause
    raise typer.Exit(code=1)


def _version_callback(value: bool) -> None:
    if not value:
        return
    typer.echo(f"docpager {get_version()}")
    raise typer.Exit(code=0)


@app.callback()
def _root(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level."),
) -> None:
    """Render document trees into paged chat messages."""
    try:
        configure_logging(log_level)
    except ValueError as exc:
        raise_exit(str(exc), cause=exc)


def _load_settings(config_path: Optional[Path]) -> DocpagerConfig:
    try:
        return load_config(path=config_path) if config_path else load_config()
    except ConfigError as exc:
        raise_exit(f"Invalid configuration: {exc}", cause=exc)


def _resolve_page_size(config: DocpagerConfig, override: Optional[int]) -> int:
    if override is None:
        return config.render.max_page_size
    try:
        return parse_max_page_size(override, source="--max-page-size")
    except ConfigError as exc:
        raise_exit(str(exc), cause=exc)


def _load_tree(path: Path) -> DocumentNode:
    try:
        return load_document_file(path)
    except DocpagerError as exc:
        raise_exit(str(exc), cause=exc)


@app.command()
def render(
    document: Path = typer.Argument(..., help="YAML or JSON document file."),
    max_page_size: Optional[int] = typer.Option(
        None, "--max-page-size", help="Maximum characters per page."
    ),
    output_format: str = typer.Option(
        "both", "--format", help="Output: text, html, both or json."
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file."),
) -> None:
    """Render DOCUMENT and print each page."""
    if output_format not in OUTPUT_FORMATS:
        raise_exit(
            f"--format must be one of {', '.join(OUTPUT_FORMATS)}, got {output_format!r}"
        )
    config = _load_settings(config_path)
    page_size = _resolve_page_size(config, max_page_size)
    tree = _load_tree(document)
    pages: list[dict[str, str]] = []

    def _collect(text: str, html: str) -> int:
        pages.append({"text": text, "html": html})
        return len(pages)

    asyncio.run(render_pages(tree, max_page_size=page_size, send=_collect))

    if output_format == "json":
        typer.echo(json.dumps(pages, indent=2, ensure_ascii=False))
        return
    for index, page in enumerate(pages, start=1):
        typer.echo(f"--- page {index}/{len(pages)} ---")
        if output_format in ("text", "both"):
            typer.echo(page["text"])
        if output_format == "both":
            typer.echo("--- html ---")
        if output_format in ("html", "both"):
            typer.echo(page["html"])


@app.command()
def send(
    document: Path = typer.Argument(..., help="YAML or JSON document file."),
    room: str = typer.Option(..., "--room", help="Matrix room id to send to."),
    max_page_size: Optional[int] = typer.Option(
        None, "--max-page-size", help="Maximum characters per page."
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file."),
) -> None:
    """Render DOCUMENT and deliver it to a Matrix room."""
    config = _load_settings(config_path)
    page_size = _resolve_page_size(config, max_page_size)
    if not config.matrix.homeserver_url:
        raise_exit("matrix.homeserver_url is not configured.")
    if not config.matrix.access_token:
        raise_exit(
            f"Set {config.matrix.access_token_env} to a Matrix access token."
        )
    tree = _load_tree(document)

    async def _deliver() -> list[str]:
        async with MatrixRestClient(
            homeserver_url=config.matrix.homeserver_url or "",
            access_token=config.matrix.access_token or "",
            timeout_seconds=config.matrix.timeout_seconds,
        ) as client:
            transport = MatrixChatTransport(
                client, msgtype=config.render.message_type
            )
            return await render_and_send(
                tree, transport, room_thread(room), max_page_size=page_size
            )

    try:
        event_ids = asyncio.run(_deliver())
    except DocpagerError as exc:
        raise_exit(f"Delivery failed: {exc}", cause=exc)
    for event_id in event_ids:
        typer.echo(event_id)


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
