"""CLI entrypoint for FAQ Assistant."""

from __future__ import annotations

import json
import os
from typing import Optional

import requests
import typer

app = typer.Typer(name="faqa", help="FAQ Assistant command-line interface")

DEFAULT_HOST = "http://127.0.0.1:8787"


def _resolve_host(override: Optional[str]) -> str:
    if override:
        return override.rstrip('/')
    env_host = os.environ.get("FAQA_HOST")
    if env_host:
        return env_host.rstrip('/')
    return DEFAULT_HOST


def _request(method: str, path: str, host: Optional[str] = None, **kwargs) -> requests.Response:
    base = _resolve_host(host)
    url = f"{base}{path}"
    try:
        resp = requests.request(method, url, timeout=120, **kwargs)
    except requests.RequestException as exc:
        typer.echo(f"Request failed: {exc}", err=True)
        raise typer.Exit(code=1)
    if not resp.ok:
        try:
            detail = resp.json()
        except ValueError:
            detail = resp.text
        typer.echo(f"Request failed ({resp.status_code}): {detail}", err=True)
        raise typer.Exit(code=1)
    return resp


@app.command()
def crawl(
    url: str = typer.Argument(..., help="Page to index"),
    selector: Optional[str] = typer.Option(None, "--selector", help="CSS selector limiting extracted text"),
    max_pages: int = typer.Option(10, "--max-pages", help="Page budget when following links"),
    follow_links: bool = typer.Option(False, "--follow-links", help="Follow same-host links breadth-first"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Crawl a page into the knowledge base."""
    body: dict[str, object] = {"url": url, "maxPages": max_pages, "followLinks": follow_links}
    if selector:
        body["selector"] = selector
    resp = _request("POST", "/api/crawl", host=host, json=body)
    typer.echo(json.dumps(resp.json(), indent=2))


@app.command()
def chat(
    message: str = typer.Argument(..., help="Question to ask"),
    conversation: Optional[str] = typer.Option(None, "--conversation", help="Existing conversation ID"),
    user: Optional[str] = typer.Option(None, "--user", help="User ID; enables conversation history"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Ask the knowledge base a question."""
    payload: dict[str, object] = {"message": message}
    if conversation:
        payload["conversationId"] = conversation
    if user:
        payload["userId"] = user
    resp = _request("POST", "/api/chat", host=host, json=payload)
    typer.echo(json.dumps(resp.json(), indent=2))


@app.command()
def jobs(
    limit: int = typer.Option(20, "--limit", help="Number of jobs to list"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """List recent crawl jobs."""
    resp = _request("GET", "/api/crawl/jobs", host=host, params={"limit": limit})
    typer.echo(json.dumps(resp.json(), indent=2))


if __name__ == "__main__":
    app()
