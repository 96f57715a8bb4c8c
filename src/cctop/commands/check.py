"""Check command for cctop.

Verifies each link of the hook delivery chain.
"""

import shutil
import time

import click

from cctop.hooks.install import HOOK_COMMAND, get_claude_settings_path, hooks_installed

RECENT_ACTIVITY_SECONDS = 300


def _report(name: str, ok: bool, detail: str = "", hint: str = "") -> None:
    status = "OK" if ok else "FAIL"
    suffix = f"  ({detail})" if detail else ""
    click.echo(f"{name:<22}{status}{suffix}")
    if hint and not ok:
        click.echo(f"{'':<22}hint: {hint}")


@click.command()
@click.pass_obj
def check(obj: dict) -> None:
    """Check that hooks are installed and delivering events.

    Exits 1 if any required check fails.

    Examples:

        cctop check
    """
    config = obj["config"]
    all_ok = True

    hook_path = shutil.which(HOOK_COMMAND)
    _report(
        "cctop-hook binary",
        hook_path is not None,
        hook_path or "not found in PATH",
        "reinstall cctop so its scripts land on PATH",
    )
    all_ok &= hook_path is not None

    installed = hooks_installed()
    _report(
        "Hooks installed",
        installed,
        str(get_claude_settings_path()),
        "run: cctop setup",
    )
    all_ok &= installed

    writable = False
    if config.sessions_dir.is_dir():
        probe = config.sessions_dir / ".write-test"
        try:
            probe.write_text("")
            probe.unlink()
            writable = True
        except OSError:
            pass
    _report(
        "Sessions directory",
        writable,
        str(config.sessions_dir),
        "run: cctop setup",
    )
    all_ok &= writable

    # Activity is advisory: no events simply means no session has run yet
    latest = None
    if config.logs_dir.is_dir():
        mtimes = [
            p.stat().st_mtime
            for p in config.logs_dir.glob("*.log")
            if not p.name.startswith("_")
        ]
        latest = max(mtimes, default=None)
    if latest is None:
        click.echo(f"{'Recent hook activity':<22}WARN  (no hook logs found)")
    else:
        elapsed = int(time.time() - latest)
        label = "OK" if elapsed < RECENT_ACTIVITY_SECONDS else "WARN"
        click.echo(f"{'Recent hook activity':<22}{label}  (last event {elapsed}s ago)")

    click.echo()
    if all_ok:
        click.echo("All checks passed.")
    else:
        click.echo("Some checks failed. Fix the issues above and re-run: cctop check")
        raise SystemExit(1)
