"""Typer-based CLI for resolving hosts and issuing raw API requests."""

from __future__ import annotations

import json
import logging
from typing import Any, NoReturn

import httpx
import typer

from ollama_wire.client import (
    InvalidHostError,
    JsonBody,
    OllamaWireError,
    format_host,
    iter_records,
    read_json,
)
from ollama_wire.core.config import TransportConfig
from ollama_wire.session import open_dispatcher

app = typer.Typer(help="Talk to an Ollama-compatible HTTP API.")

_UNREACHABLE_EXIT_CODE = 3
_INVALID_INPUT_EXIT_CODE = 2
_METHODS = ("GET", "HEAD", "POST", "DELETE")

_COLOR_ERROR = typer.colors.RED


def _exit_with_message(message: str, *, code: int = _INVALID_INPUT_EXIT_CODE) -> NoReturn:
    typer.echo(typer.style(message, fg=_COLOR_ERROR), err=True)
    raise typer.Exit(code=code)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _parse_data(data: str | None) -> JsonBody | None:
    if data is None:
        return None
    try:
        return JsonBody(json.loads(data))
    except json.JSONDecodeError as exc:
        _exit_with_message(f"Error: --data is not valid JSON: {exc.msg}")


def _parse_headers(values: list[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for value in values:
        name, sep, header_value = value.partition(":")
        if not sep or not name.strip():
            _exit_with_message(f"Error: invalid --header {value!r}, expected NAME:VALUE")
        headers[name.strip()] = header_value.strip()
    return headers


def _echo_json(payload: Any, *, compact: bool = False) -> None:
    if compact:
        typer.echo(json.dumps(payload, separators=(",", ":")))
        return
    typer.echo(json.dumps(payload, indent=2, sort_keys=True))


def _echo_status(response: httpx.Response) -> None:
    typer.echo(f"{response.status_code} {response.reason_phrase}")


@app.command("resolve")
def resolve(
    hosts: list[str] = typer.Argument(..., help="Host strings such as ':11434' or 'example.com'."),
) -> None:
    """Print the canonical base URL for each host."""
    for host in hosts:
        try:
            typer.echo(format_host(host))
        except InvalidHostError as exc:
            _exit_with_message(f"Error: {exc}", code=exc.exit_code)


@app.command("request")
def request(
    method: str = typer.Argument(..., help="HTTP method: GET, HEAD, POST or DELETE."),
    path: str = typer.Argument(..., help="API path such as /api/tags, or an absolute URL."),
    host: str | None = typer.Option(None, "--host", help="Host override; defaults to OLLAMA_HOST."),
    data: str | None = typer.Option(None, "--data", "-d", help="JSON request body."),
    header: list[str] = typer.Option([], "--header", "-H", help="Extra header as NAME:VALUE."),
    stream: bool = typer.Option(False, "--stream/--no-stream", help="Decode an NDJSON response."),
    timeout: float | None = typer.Option(None, "--timeout", help="Request timeout in seconds."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Send one request and print the JSON response or streamed records."""
    _configure_logging(verbose)
    normalized_method = method.strip().upper()
    if normalized_method not in _METHODS:
        _exit_with_message(f"Error: unsupported method {method!r}")
    body = _parse_data(data)
    if body is not None and normalized_method in {"GET", "HEAD"}:
        _exit_with_message(f"Error: {normalized_method} requests cannot carry --data")

    try:
        config = TransportConfig.from_env(
            host=host,
            timeout=timeout,
            headers=_parse_headers(header),
        )
        with open_dispatcher(config) as dispatcher:
            response = dispatcher.request(normalized_method, path, body)
            if normalized_method == "HEAD":
                response.close()
                _echo_status(response)
                return
            if stream:
                for record in iter_records(response):
                    _echo_json(record, compact=True)
                return
            if not response.read():
                response.close()
                _echo_status(response)
                return
            _echo_json(read_json(response))
    except OllamaWireError as exc:
        _exit_with_message(f"Error: {exc}", code=exc.exit_code)
    except httpx.HTTPError as exc:
        _exit_with_message(f"Error: {exc}", code=_UNREACHABLE_EXIT_CODE)
    except json.JSONDecodeError as exc:
        _exit_with_message(f"Error: response is not valid JSON: {exc}", code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
