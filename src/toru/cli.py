"""toru command line interface.

Installed as the ``toru`` console_script.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

import click
import yaml

from toru import __version__
from toru import log as glog
from toru.config import Config
from toru.errors import InternalError, RecordError, ToruError
from toru.state import VaultState

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

_DATE = click.DateTime(formats=["%Y-%m-%d"])
_DATETIME = click.DateTime(formats=["%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M", "%Y-%m-%d"])
_PRIORITIES = click.Choice(["backlog", "low", "medium", "high"], case_sensitive=False)


# ── error reporting / vault session ──────────────────────────────


@contextmanager
def _reporting_errors() -> Iterator[None]:
    """Print a failed command's error and exit non-zero."""
    try:
        yield
    except InternalError as exc:
        glog.error(f"Internal error: {exc}")
        sys.exit(1)
    except RecordError as exc:
        glog.error(f"Malformed record: {exc}")
        sys.exit(1)
    except ToruError as exc:
        glog.error(str(exc))
        sys.exit(1)
    except (OSError, yaml.YAMLError) as exc:
        glog.error(f"Internal error: {exc}")
        sys.exit(1)


@contextmanager
def _vault_session(cfg: Config) -> Iterator[tuple[Path, VaultState]]:
    """Load the current vault's state, and save it only if the body succeeds."""
    with _reporting_errors():
        _, vault = cfg.current_vault()
        state = VaultState.load(vault)
        yield vault, state
        state.save()


def _save_config(cfg: Config) -> None:
    with _reporting_errors():
        cfg.save()


# ── root group ───────────────────────────────────────────────────


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("-v", "--verbose", is_flag=True, help="Show debug output")
@click.version_option(__version__, prog_name="toru")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """toru: a task tracker keeping one file per task inside a vault.

    \b
    EXAMPLES:
      toru vault new personal ~/tasks        # Create and select a vault
      toru new -n "Buy milk" -t shopping     # Create a task
      toru new -n "Cook" -d "Buy milk"       # Create a task depending on another
      toru list -c due -c priority           # List open tasks
      toru delete "Buy milk"                 # Delete by name or id
    """
    glog.set_verbose(verbose)
    with _reporting_errors():
        ctx.obj = Config.load()


# ── task commands ────────────────────────────────────────────────


@main.command()
@click.option("-n", "--name", required=True, help="Task name (must not be purely numeric)")
@click.option("-i", "--info", default=None, help="Free text details")
@click.option("-t", "--tag", "tags", multiple=True, help="Tag (repeatable)")
@click.option("-d", "--dependency", "dependencies", multiple=True, help="Id or name of a task this depends on (repeatable)")
@click.option("-p", "--priority", type=_PRIORITIES, default=None, help="Priority level [default: low]")
@click.option("--due", type=_DATETIME, default=None, help="Due date, yyyy-mm-ddThh:mm:ss")
@click.pass_obj
def new(
    cfg: Config,
    name: str,
    info: str | None,
    tags: tuple[str, ...],
    dependencies: tuple[str, ...],
    priority: str | None,
    due: datetime | None,
) -> None:
    """Create a new task."""
    from toru import format as fmt
    from toru.tasks import store
    from toru.tasks.model import Priority

    with _vault_session(cfg) as (vault, state):
        dep_ids = [state.index.lookup(token) for token in dependencies]
        task = store.create(
            name,
            info,
            tags,
            dep_ids,
            Priority(priority.lower()) if priority else None,
            due,
            vault,
            state,
        )
        glog.success(f"Created task {fmt.task_name(task.name)} (id: {fmt.task_id(task.id)})")


@main.command()
@click.argument("id_or_name")
@click.pass_obj
def view(cfg: Config, id_or_name: str) -> None:
    """Display the specified task in detail."""
    from toru import format as fmt
    from toru.tasks import store

    with _vault_session(cfg) as (vault, state):
        task = store.load(state.index.lookup(id_or_name), vault)
        for line in fmt.task_lines(task):
            glog.console.print(line)
        if task.dependencies:
            tasks = store.load_all_as_map(vault)
            glog.console.print(fmt.dependency_tree(task, state.graph, tasks))


@main.command()
@click.argument("id_or_name")
@click.option("-i", "--info", "info_only", is_flag=True, help="Edit only the info, in its own file")
@click.pass_obj
def edit(cfg: Config, id_or_name: str, info_only: bool) -> None:
    """Edit a task directly in your editor."""
    from toru import format as fmt
    from toru.edit import edit_info, edit_raw

    with _vault_session(cfg) as (vault, state):
        task_id = state.index.lookup(id_or_name)
        if info_only:
            edit_info(task_id, vault, cfg.editor)
        else:
            edit_raw(task_id, vault, cfg.editor, state)
        glog.success(f"Updated task {fmt.task_id(task_id)}")


@main.command()
@click.argument("id_or_name")
@click.pass_obj
def delete(cfg: Config, id_or_name: str) -> None:
    """Delete a task (its file is moved to the trash)."""
    from toru import format as fmt
    from toru.tasks import store

    with _vault_session(cfg) as (vault, state):
        task = store.remove(state.index.lookup(id_or_name), vault, state)
        glog.success(f"Deleted task {fmt.task_name(task.name)} (id: {fmt.task_id(task.id)})")


@main.command()
@click.argument("id_or_name")
@click.pass_obj
def complete(cfg: Config, id_or_name: str) -> None:
    """Mark a task as complete."""
    from toru import format as fmt
    from toru.tasks import store

    with _vault_session(cfg) as (vault, state):
        task = store.complete(state.index.lookup(id_or_name), vault)
        glog.success(f"Marked task {fmt.task_name(task.name)} as complete")


@main.command()
@click.argument("id_or_name")
@click.option("-H", "--hours", type=click.IntRange(min=0), default=0, help="Hours to log")
@click.option("-M", "--minutes", type=click.IntRange(min=0), default=0, help="Minutes to log")
@click.option("-d", "--date", "logged_date", type=_DATE, default=None, help="Date of the entry [default: today]")
@click.option("-m", "--message", default=None, help="Message identifying the entry")
@click.pass_obj
def track(
    cfg: Config,
    id_or_name: str,
    hours: int,
    minutes: int,
    logged_date: datetime | None,
    message: str | None,
) -> None:
    """Track time against a task."""
    from toru import format as fmt
    from toru.tasks import store

    with _vault_session(cfg) as (vault, state):
        task_id = state.index.lookup(id_or_name)
        entry = store.track(
            task_id,
            vault,
            hours,
            minutes,
            logged_date.date() if logged_date else None,
            message,
        )
        glog.success(f"Logged {entry.duration} against task {fmt.task_id(task_id)}")


@main.command("list")
@click.option("-c", "--column", "columns", multiple=True,
              type=click.Choice(["due", "priority", "created", "tracked", "tags", "status"]),
              help="Extra column to show (repeatable)")
@click.option("--order-by", type=click.Choice(["id", "name", "due", "priority", "created", "tracked"]), default="id")
@click.option("--order", type=click.Choice(["asc", "desc"]), default="asc")
@click.option("-t", "--tag", "tags", multiple=True, help="Only tasks with one of these tags")
@click.option("-e", "--exclude-tag", "exclude_tags", multiple=True, help="Hide tasks with any of these tags")
@click.option("-p", "--priority", "priorities", multiple=True, type=_PRIORITIES, help="Only these priority levels")
@click.option("--due-before", type=_DATE, default=None, help="Due on or before this date")
@click.option("--due-after", type=_DATE, default=None, help="Due on or after this date")
@click.option("--created-before", type=_DATE, default=None, help="Created on or before this date")
@click.option("--created-after", type=_DATE, default=None, help="Created on or after this date")
@click.option("--include-completed", is_flag=True, help="Include completed tasks")
@click.option("--no-dependencies", "--bottom-level", is_flag=True, help="Only tasks with no dependencies")
@click.option("--no-dependents", "--top-level", is_flag=True, help="Only tasks nothing depends on")
@click.pass_obj
def list_tasks(
    cfg: Config,
    columns: tuple[str, ...],
    order_by: str,
    order: str,
    tags: tuple[str, ...],
    exclude_tags: tuple[str, ...],
    priorities: tuple[str, ...],
    due_before: datetime | None,
    due_after: datetime | None,
    created_before: datetime | None,
    created_after: datetime | None,
    include_completed: bool,
    no_dependencies: bool,
    no_dependents: bool,
) -> None:
    """List tasks according to the given columns, ordering and filters."""
    from toru import format as fmt
    from toru.listing import Column, ListOptions, Order, OrderBy, filter_tasks, sort_tasks
    from toru.tasks import store
    from toru.tasks.model import Priority

    def _day(value: datetime | None):
        return value.date() if value else None

    options = ListOptions(
        columns=[Column(c) for c in columns],
        order_by=OrderBy(order_by),
        order=Order(order),
        tags=list(tags),
        exclude_tags=list(exclude_tags),
        priorities=[Priority(p.lower()) for p in priorities],
        due_before=_day(due_before),
        due_after=_day(due_after),
        created_before=_day(created_before),
        created_after=_day(created_after),
        include_completed=include_completed,
        no_dependencies=no_dependencies,
        no_dependents=no_dependents,
    )

    with _vault_session(cfg) as (vault, state):
        tasks = filter_tasks(store.load_all(vault), options, state.graph)
        glog.console.print(fmt.task_table(sort_tasks(tasks, options), options.unique_columns()))


# ── version control ──────────────────────────────────────────────


_PASSTHROUGH = dict(ignore_unknown_options=True, allow_interspersed_args=False)


def _run_vcs(cfg: Config, tool: str, args: tuple[str, ...]) -> None:
    from toru.vcs import Vcs, run

    with _reporting_errors():
        _, vault = cfg.current_vault()
        code = run(Vcs(tool), list(args), vault)
    if code != 0:
        sys.exit(code)


@main.command(context_settings=_PASSTHROUGH)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def git(cfg: Config, args: tuple[str, ...]) -> None:
    """Run Git commands at the root of the vault."""
    _run_vcs(cfg, "git", args)


@main.command(context_settings=_PASSTHROUGH)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def svn(cfg: Config, args: tuple[str, ...]) -> None:
    """Run Subversion commands at the root of the vault."""
    _run_vcs(cfg, "svn", args)


@main.command()
@click.pass_obj
def gitignore(cfg: Config) -> None:
    """Add the recommended .gitignore file to the vault."""
    from toru.vcs import create_gitignore

    with _reporting_errors():
        _, vault = cfg.current_vault()
        path = create_gitignore(vault)
    glog.success(f"Wrote {path}")


@main.command("svn-ignore")
@click.pass_obj
def svn_ignore(cfg: Config) -> None:
    """Add the recommended svn:ignore property to the vault root."""
    from toru.vcs import set_svn_ignore

    with _reporting_errors():
        _, vault = cfg.current_vault()
        code = set_svn_ignore(vault)
    if code != 0:
        sys.exit(code)


# ── stats ────────────────────────────────────────────────────────


@main.group()
def stats() -> None:
    """Statistics about the state of your vault."""


@stats.command("tracked")
@click.option("-d", "--days", type=click.IntRange(min=1), default=7, show_default=True)
@click.pass_obj
def stats_tracked(cfg: Config, days: int) -> None:
    """Time tracked per tag recently."""
    from toru import format as fmt
    from toru.stats import time_per_tag
    from toru.tasks import store

    with _vault_session(cfg) as (vault, _state):
        glog.console.print(fmt.tag_time_table(time_per_tag(store.load_all(vault), days)))


@stats.command("completed")
@click.option("-d", "--days", type=click.IntRange(min=1), default=7, show_default=True)
@click.pass_obj
def stats_completed(cfg: Config, days: int) -> None:
    """Recently completed tasks."""
    from toru import format as fmt
    from toru.stats import completed_recently
    from toru.tasks import store

    with _vault_session(cfg) as (vault, _state):
        glog.console.print(fmt.completed_table(completed_recently(store.load_all(vault), days)))


# ── configuration ────────────────────────────────────────────────


@main.group("config")
def config_group() -> None:
    """Change global configuration."""


@config_group.command()
@click.argument("command", required=False)
@click.pass_obj
def editor(cfg: Config, command: str | None) -> None:
    """Show or set the command used to launch your editor."""
    if command is None:
        glog.console.print(cfg.editor)
        return
    cfg.editor = command
    _save_config(cfg)
    glog.success(f"Editor set to {command}")


# ── vaults ───────────────────────────────────────────────────────


@main.group("vault")
def vault_group() -> None:
    """Create and manage vaults."""


@vault_group.command("new")
@click.argument("name")
@click.argument("path", type=click.Path(path_type=Path))
@click.pass_obj
def vault_new(cfg: Config, name: str, path: Path) -> None:
    """Create a new vault at PATH and select it."""
    from toru import format as fmt
    from toru import vault

    with _reporting_errors():
        vault.new(name, path, cfg)
        vault.switch(name, cfg)
    _save_config(cfg)
    glog.success(f"Created vault {fmt.vault_name(name)}")


@vault_group.command("connect")
@click.argument("name")
@click.argument("path", type=click.Path(path_type=Path))
@click.pass_obj
def vault_connect(cfg: Config, name: str, path: Path) -> None:
    """Connect an existing vault."""
    from toru import format as fmt
    from toru import vault

    with _reporting_errors():
        vault.connect(name, path, cfg)
    _save_config(cfg)
    glog.success(f"Connected vault {fmt.vault_name(name)}")


@vault_group.command("disconnect")
@click.argument("name")
@click.pass_obj
def vault_disconnect(cfg: Config, name: str) -> None:
    """Disconnect a vault without altering its files."""
    from toru import format as fmt
    from toru import vault

    with _reporting_errors():
        vault.disconnect(name, cfg)
    _save_config(cfg)
    glog.success(f"Disconnected vault {fmt.vault_name(name)}")


@vault_group.command("delete")
@click.argument("name")
@click.confirmation_option(prompt="Move this vault and all of its tasks to the trash?")
@click.pass_obj
def vault_delete(cfg: Config, name: str) -> None:
    """Delete a vault along with all of its data."""
    from toru import format as fmt
    from toru import vault

    with _reporting_errors():
        vault.delete(name, cfg)
    _save_config(cfg)
    glog.success(f"Deleted vault {fmt.vault_name(name)}")


@vault_group.command("rename")
@click.argument("old_name")
@click.argument("new_name")
@click.pass_obj
def vault_rename(cfg: Config, old_name: str, new_name: str) -> None:
    """Rename a vault."""
    from toru import format as fmt
    from toru import vault

    with _reporting_errors():
        vault.rename(old_name, new_name, cfg)
    _save_config(cfg)
    glog.success(f"Renamed vault {fmt.vault_name(old_name)} to {fmt.vault_name(new_name)}")


@vault_group.command("list")
@click.pass_obj
def vault_list(cfg: Config) -> None:
    """List all configured vaults; the current one is starred."""
    from toru import format as fmt

    if not cfg.vaults:
        glog.error("No vaults currently set up, try running: toru vault new <NAME> <PATH>")
        sys.exit(1)
    width = max(len(name) for name, _ in cfg.vaults)
    for i, (name, path) in enumerate(cfg.vaults):
        marker = "*" if i == 0 else " "
        padding = " " * (width - len(name) + 1)
        glog.console.print(f"{marker} {fmt.vault_name(name)}{padding}{path}")


@main.command()
@click.argument("name")
@click.pass_obj
def switch(cfg: Config, name: str) -> None:
    """Switch to the specified vault."""
    from toru import format as fmt
    from toru import vault

    with _reporting_errors():
        vault.switch(name, cfg)
    _save_config(cfg)
    glog.success(f"Switched to vault {fmt.vault_name(name)}")
