"""
kubeplan — CLI entrypoint.

Usage:
    kubeplan --help
    kubeplan plan
    kubeplan up --yes
    kubeplan diff --env staging --var image_tag=1.2.3
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from kubeplan import __version__
from kubeplan.core.observability.logging_config import level_from_flags, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="kubeplan")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to kubeplan.yml (default: auto-detect).",
)
@click.option("--env", "environment", default=None, help="Target environment.")
@click.option("--context", "kube_context", default=None, help="kubectl context.")
@click.option("--namespace", "-n", default=None, help="Kubernetes namespace.")
@click.option("--kubeconfig", default=None, help="kubectl config file.")
@click.option(
    "--var",
    "variables",
    multiple=True,
    help="Config value for generators, e.g. --var image_tag=1.2.3 (repeatable).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    environment: str | None,
    kube_context: str | None,
    namespace: str | None,
    kubeconfig: str | None,
    variables: tuple[str, ...],
) -> None:
    """kubeplan — deploy dependent Kubernetes modules in order."""
    from kubeplan.core.config.loader import parse_vars
    from kubeplan.core.errors import ConfigError

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None
    ctx.obj["env"] = environment
    ctx.obj["kube_context"] = kube_context
    ctx.obj["namespace"] = namespace
    ctx.obj["kubeconfig"] = kubeconfig

    try:
        ctx.obj["variables"] = parse_vars(variables)
    except ConfigError as e:
        raise click.BadParameter(str(e), param_hint="--var") from e

    setup_logging(
        level=level_from_flags(debug=debug, verbose=verbose, quiet=quiet),
        quiet_third_party=not debug,
    )


def _build_plan(ctx: click.Context, start: str | None):
    from kubeplan.core.use_cases.plan import build_plan

    return build_plan(
        config_path=ctx.obj.get("config_path"),
        env=ctx.obj.get("env"),
        variables=ctx.obj.get("variables"),
        start=start,
    )


def _echo_plan(lines: list[str]) -> None:
    for line in lines:
        if line.startswith("[DEPLOY]"):
            click.secho("[DEPLOY]", fg="blue", nl=False)
            click.echo(line[len("[DEPLOY]"):])
        elif line.startswith("[ WAIT ]"):
            click.secho("[ WAIT ]", fg="yellow", nl=False)
            click.echo(line[len("[ WAIT ]"):])
        else:
            click.secho(line, fg="bright_black")


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--manifests", is_flag=True, help="Show the manifest of every deploy.")
@click.option("--start", default=None, help="Only plan the subtree unlocked by this module.")
@click.pass_context
def plan(ctx: click.Context, as_json: bool, manifests: bool, start: str | None) -> None:
    """Resolve modules and print the execution plan."""
    from kubeplan.core.engine.planner import describe_plan

    result = _build_plan(ctx, start)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if not ctx.obj.get("quiet"):
        env_label = f" ({result.context.env})" if result.context and result.context.env else ""
        click.secho(f"\n# Execution plan{env_label}: {len(result.plan)} steps", fg="cyan", bold=True)
    _echo_plan(describe_plan(result.plan, verbose=manifests))
    click.echo()


def _run(ctx: click.Context, mode: str, as_json: bool, start: str | None, yes: bool) -> None:
    from kubeplan.core.engine.planner import describe_plan
    from kubeplan.core.engine.runner import describe_intent
    from kubeplan.core.use_cases.run import run_plan

    planned = _build_plan(ctx, start)

    if planned.ok and not as_json and not yes:
        _echo_plan(describe_plan(planned.plan))
        click.echo()
        click.confirm(f"Run {len(planned.plan)} steps ({mode})?", abort=True)

    def _progress(step, event: str) -> None:
        if as_json or ctx.obj.get("quiet"):
            return
        if event == "start":
            click.secho(describe_intent(step), fg="blue")
        else:
            click.secho("====> Success", fg="green")

    result = run_plan(
        mode=mode,  # type: ignore[arg-type]
        kube_context=ctx.obj.get("kube_context"),
        namespace=ctx.obj.get("namespace"),
        kubeconfig=ctx.obj.get("kubeconfig"),
        listener=_progress,
        planned=planned,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        click.echo(f"   Completed {len(result.completed)}/{result.planned} steps")
        sys.exit(1)

    click.echo()
    click.secho(
        f"✅ {mode}: {len(result.completed)}/{result.planned} steps succeeded",
        fg="green",
        bold=True,
    )


_RUN_OPTIONS = [
    click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON."),
    click.option("--start", default=None, help="Only run the subtree unlocked by this module."),
]


def _run_options(fn):
    for option in reversed(_RUN_OPTIONS):
        fn = option(fn)
    return fn


@cli.command()
@_run_options
@click.option("--yes", "-y", is_flag=True, help="Run without confirmation.")
@click.pass_context
def up(ctx: click.Context, as_json: bool, start: str | None, yes: bool) -> None:
    """Apply every module to the cluster, in dependency order."""
    _run(ctx, "live", as_json, start, yes)


@cli.command("dry-run")
@_run_options
@click.pass_context
def dry_run(ctx: click.Context, as_json: bool, start: str | None) -> None:
    """Validate every object server-side without persisting it."""
    _run(ctx, "dry-run", as_json, start, yes=True)


@cli.command()
@_run_options
@click.pass_context
def diff(ctx: click.Context, as_json: bool, start: str | None) -> None:
    """Show what applying the plan would change."""
    _run(ctx, "diff", as_json, start, yes=True)


@cli.command()
@click.argument("kind")
@click.argument("name")
@click.option(
    "--timeout", "-t", type=click.IntRange(min=0), default=None,
    help="Timeout in seconds (default 300).",
)
@click.pass_context
def wait(ctx: click.Context, kind: str, name: str, timeout: int | None) -> None:
    """Wait for a Job to finish or a Deployment/StatefulSet to roll out.

    Examples:

        kubeplan wait job db-migrate --timeout 600

        kubeplan wait deployment api
    """
    from kubeplan.adapters.kubectl import Kubectl
    from kubeplan.core.config.loader import build_kubectl, find_config_file, load_config
    from kubeplan.core.errors import KubeplanError
    from kubeplan.core.use_cases.run import wait_for

    try:
        config_path = ctx.obj.get("config_path") or find_config_file()
        if config_path is not None:
            kubectl = build_kubectl(
                load_config(config_path),
                context=ctx.obj.get("kube_context"),
                namespace=ctx.obj.get("namespace"),
                kubeconfig=ctx.obj.get("kubeconfig"),
            )
        else:
            kubectl = Kubectl(
                context=ctx.obj.get("kube_context") or "",
                namespace=ctx.obj.get("namespace") or "default",
                kubeconfig=ctx.obj.get("kubeconfig") or "",
            )
        wait_for(kind, name, timeout, kubectl)
    except KubeplanError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)
    except FileNotFoundError as e:
        click.secho(f"❌ Cannot run {kubectl.binary}: {e}", fg="red")
        sys.exit(1)

    click.secho(f"✅ {kind}/{name} is ready", fg="green")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
