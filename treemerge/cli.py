"""CLI entry point for treemerge."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from treemerge.config import TreemergeConfig, load_config
from treemerge.config.loader import DEFAULT_CONFIG_TEMPLATE
from treemerge.directory import open_directory
from treemerge.summary import TreeSummarizer
from treemerge.tree.nodes import ChildableNode

app = typer.Typer(
    name="treemerge",
    help="Summarize directory trees by merging structurally similar siblings.",
)

config_app = typer.Typer(help="Manage treemerge configuration.")
app.add_typer(config_app, name="config")

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

# Global state
_config: TreemergeConfig | None = None


def _get_config() -> TreemergeConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to treemerge.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1) from e
    logging.basicConfig(
        level=_LOG_LEVELS[_config.log_level],
        format="%(levelname)s %(name)s: %(message)s",
    )


def _open_root(path: str, cfg: TreemergeConfig) -> ChildableNode:
    root_path = Path(path)
    if not root_path.is_dir():
        rprint(f"[red]Not a directory:[/red] {escape(path)}")
        raise typer.Exit(1)
    return open_directory(root_path, cfg.scan.ignore_patterns)


@app.command()
def summarize(
    path: Annotated[str, typer.Argument(help="Directory to summarize")] = ".",
    plain: Annotated[bool, typer.Option("--plain", help="Print the bare summary text")] = False,
) -> None:
    """Print a summary of PATH with similar siblings merged."""
    cfg = _get_config()
    root = _open_root(path, cfg)
    summary = TreeSummarizer.from_config(cfg).summarize(root)

    if plain:
        typer.echo(summary, nl=False)
    else:
        rprint(Panel(Text(summary.rstrip("\n")), title=escape(str(Path(path).resolve())), border_style="blue"))


@app.command()
def hashes(
    path: Annotated[str, typer.Argument(help="Directory to analyze")] = ".",
    min_count: Annotated[int, typer.Option("--min-count", help="Minimum nodes sharing a fingerprint")] = 2,
) -> None:
    """List fingerprints shared by at least MIN_COUNT nodes, one of them a directory."""
    cfg = _get_config()
    root = _open_root(path, cfg)
    summarizer = TreeSummarizer.from_config(cfg)
    summarizer.merge_children(root)

    mapping = summarizer.hasher.get_hash_to_node_mapping([
        lambda _, nodes: len(nodes) >= min_count,
        lambda _, nodes: any(node.get_children() is not None for node in nodes),
    ])

    table = Table(title=f"Shared fingerprints ({len(mapping)})")
    table.add_column("Fingerprint", style="cyan", justify="right")
    table.add_column("Nodes", justify="right")
    table.add_column("Names", style="green")
    for fingerprint, nodes in sorted(mapping.items(), key=lambda item: (-len(item[1]), item[0])):
        names = sorted(node.name for node in nodes)
        shown = ", ".join(names[:5]) + (", ..." if len(names) > 5 else "")
        table.add_row(str(fingerprint), str(len(nodes)), escape(shown))
    rprint(table)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(mode="json"), default_flow_style=False, sort_keys=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default treemerge.yaml in current directory."""
    target = Path("treemerge.yaml")
    if target.exists() and not force:
        rprint("[yellow]treemerge.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
