# src/lotocomb/cli.py

"""
Lotocomb - 25 choose 15 game enumerator with memory instrumentation

Description:
    Enumerates every 15-number game drawn from 1..25 that contains a set of
    required numbers, in lexicographic order, optionally printing only a
    window of positions. Elapsed time and process memory are sampled every
    N games (optionally with garbage-collection events) and charted.

usage: see lotocomb -h
"""

from __future__ import annotations

import argparse
import faulthandler
import os
import platform
import sys
import textwrap
import traceback
from importlib.resources import files as pkg_files

from colorama import Fore, Style
from colorama import just_fix_windows_console

from lotocomb import __version__ as _ver
from lotocomb import config as CONFIG
from lotocomb.chart import plot_memory
from lotocomb.fmt import format_combination, format_count, format_duration, format_numbers
from lotocomb.generator import RankWindow, validate_required
from lotocomb.output_manager import OutputManager, resolve_output_path
from lotocomb.run import DEFAULT_REQUIRED, RunConfig, RunReport, run
from lotocomb.runtime import APPLY, CFG, ensure_runtime_deps
from lotocomb.runtime import current as _rt_current
from lotocomb.runtime import reset as _rt_reset
from lotocomb.sampler import DEFAULT_STEP_INTERVAL
from lotocomb.utility import (
    InvalidArgument,
    UserInputError,
    flatten_dotted,
    parse_positive_int,
    split_ints,
    typename,
)
from lotocomb.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir

COMMANDS = ("init", "where", "profiles", "active")

ENV_REQUIRED = "LOTOCOMB_REQUIRED"
ENV_STEP = "LOTOCOMB_STEP_INTERVAL"
ENV_START = "LOTOCOMB_START"
ENV_COUNT = "LOTOCOMB_COUNT"


def _install_loud_error_handlers(debug: bool) -> None:
    if not debug:
        return
    # Always show full Python tracebacks
    faulthandler.enable()

    def _excepthook(exc_type, exc, tb):
        sys.stderr.write("\n[UNCAUGHT EXCEPTION]\n")
        traceback.print_exception(exc_type, exc, tb, file=sys.stderr)
        sys.stderr.flush()
    sys.excepthook = _excepthook


def _print_user_error(msg: str) -> None:
    """Uniform, one-line friendly error."""
    if msg.startswith("Invalid input:"):
        msg = msg.replace("Invalid input:", f"{Fore.RED}Invalid input:{Style.RESET_ALL}", 1)
    elif not msg.startswith("Error:"):
        msg = f"{Fore.RED}Error:{Style.RESET_ALL} {msg}"
    print(msg, file=sys.stderr)


def _debug(msg: str) -> None:
    if _rt_current().debug:
        print(f"{Style.DIM}[debug]{Style.RESET_ALL} {msg}", file=sys.stderr)


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:

    epilog = textwrap.dedent(f"""\
    commands:
      init
          Create the workspace folder and copy packaged profiles if missing.

      init overwrite
          Meant for developers. Requires environment variable LOTOCOMB_DEV=1.
          Replaces all profiles with the packaged ones.

      profiles
          List available profiles with their descriptions.

      active
          Show the last used profile.

      where
          Show the workspace and package paths.

    environment:
      {ENV_REQUIRED}       required numbers, e.g. "1,2" (default 1,2)
      {ENV_STEP}  sample every N games (default {DEFAULT_STEP_INTERVAL})
      {ENV_START}, {ENV_COUNT}
                              rank window (1-based first position, how many)
      LOTOCOMB_HOME           workspace folder

    Command-line values win over environment values, which win over the profile.
    --no-window drops a window set by the environment or the remembered profile.
    """)

    p = argparse.ArgumentParser(
        prog="lotocomb",
        description="Lotocomb — 25 choose 15 games with required numbers, memory sampling and chart",
        usage=(
            "lotocomb [required ...] [--step N] [--start S --count C | --no-window] [--turbo] [--profile NAME]\n"
            "                [--chart show|none|FILE] [--gc] [--output FILE] [--quiet] [--debug]\n"
            "       lotocomb -h | --help\n"
            "       lotocomb {init [overwrite] | profiles | active | where}\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("items", nargs="*", metavar="required",
                   help="required numbers (comma, space or semicolon separated) or a command")
    p.add_argument("--step", default=None, help="sample time and memory every N games")
    p.add_argument("--start", default=None, help="first 1-based position to print")
    p.add_argument("--count", default=None, help="how many positions to print from --start")
    p.add_argument("--no-window", action="store_true",
                   help="print no window, ignoring one set by the environment or the profile")
    p.add_argument("--turbo", action="store_true", default=None,
                   help="count through one reused buffer (faster, no rank window)")
    p.add_argument("--profile", default=None, help="profile name (default: last used, else 'default')")
    p.add_argument("--chart", default=None, help="'show', 'none' or an image file path")
    p.add_argument("--gc", action="store_true", default=None, help="record garbage collections")
    p.add_argument("--output", default=None, help="append console output to a file (also prints unless --quiet)")
    p.add_argument("--quiet", action="store_true", help="suppress screen output")
    p.add_argument("--debug", action="store_true", help="show resolved settings and full tracebacks")
    p.add_argument("--version", action="version", version=f"lotocomb {_ver}")
    return p


def main(argv=None) -> int:
    """Thin wrapper: catch friendly errors, hide tracebacks unless debug."""
    try:
        return _main_impl(argv)
    except UserInputError as e:
        _print_user_error(str(e))
        return 2
    except KeyboardInterrupt:
        print("Aborted by user.", file=sys.stderr)
        return 130
    except Exception as e:
        debug = "--debug" in (argv if argv is not None else sys.argv)
        if debug:
            raise
        print(f"Unexpected error: {e.__class__.__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return 1


# ---- settings resolution ----
def _first(*values):
    """First value that is neither None nor a blank string."""
    for v in values:
        if v is None or (isinstance(v, str) and not v.strip()):
            continue
        return v
    return None


def _resolve_required(items: list[str], env: dict[str, str]) -> tuple[int, ...] | list[int]:
    raw = _first(" ".join(items) if items else None, env.get(ENV_REQUIRED), CFG("GENERATION.REQUIRED", None))
    if raw is None:
        return DEFAULT_REQUIRED
    if isinstance(raw, list):
        return raw
    nums = split_ints(str(raw), what="required number")
    return nums if nums else DEFAULT_REQUIRED


def _resolve_window(args, env: dict[str, str]) -> RankWindow | None:
    if getattr(args, "no_window", False):
        if args.start is not None or args.count is not None:
            raise InvalidArgument("Invalid input: --no-window cannot be combined with --start/--count.")
        return None
    start = parse_positive_int(_first(args.start, env.get(ENV_START), CFG("WINDOW.START", None)),
                               what="window start")
    count = parse_positive_int(_first(args.count, env.get(ENV_COUNT), CFG("WINDOW.COUNT", None)),
                               what="window count")
    if start is None and count is None:
        return None
    return RankWindow(start=start or 1, count=count or 1)


def resolve_config(args, env: dict[str, str] | None = None) -> RunConfig:
    """Merge CLI arguments, environment and the applied profile into a RunConfig."""
    env = os.environ if env is None else env
    step = parse_positive_int(
        _first(args.step, env.get(ENV_STEP), CFG("GENERATION.STEP_INTERVAL", None)),
        what="step interval",
    )
    window = _resolve_window(args, env)
    if args.turbo is not None:
        turbo = args.turbo
    else:
        # a profile TURBO yields to a window; an explicit --turbo does not
        turbo = window is None and bool(CFG("GENERATION.TURBO", False))
    track_gc = args.gc if args.gc is not None else bool(CFG("OUTPUT.GC_EVENTS", False))
    return RunConfig(
        required=validate_required(_resolve_required(args.items, env)),
        step_interval=step or DEFAULT_STEP_INTERVAL,
        window=window,
        turbo=turbo,
        track_gc=track_gc,
    )


def _load_profile(explicit: str | None) -> str:
    """
    Precedence:
      1) explicit --profile
      2) last used (from workspace)
      3) 'default'
    Returns the applied profile name.
    """
    if explicit:
        if not CONFIG.has_profile(explicit):
            raise UserInputError(
                f"Unknown profile: '{explicit}'. Available profiles: {', '.join(CONFIG.list_all_profiles())}"
            )
        name = explicit
    else:
        last = CONFIG.read_current_profile()
        name = last if last and CONFIG.has_profile(last) else "default"

    if not CONFIG.has_profile(name):
        _debug(f"no profile '{name}' in {workspace_dir()}; using built-in defaults")
        return name

    selected = CONFIG.load_settings(name)
    APPLY(selected)
    if explicit:
        CONFIG.write_current_profile(name)

    if _rt_current().debug:
        _debug(f"active profile: {name} ({selected._source})")
        for k, v in sorted(flatten_dotted(selected.as_dict()).items(), key=lambda kv: kv[0].lower()):
            print(f"        {k:.<40} {v!r} ({typename(v)})", file=sys.stderr)
    return name


def _run_command(cmd: str, items: list[str]) -> int:
    _TWO_ARGS = 2
    if cmd == "init":
        if len(items) == _TWO_ARGS and items[1] == "overwrite":
            if os.environ.get("LOTOCOMB_DEV") != "1":
                print("Refusing to overwrite: set LOTOCOMB_DEV=1 to enable developer overwrite.")
                return 2
            ws, copied = seed_workspace(overwrite=True)
            print(f"Workspace ready at: {ws} (overwrote existing files)")
        else:
            ws, _, copied = ensure_workspace_seeded()
            print(f"Workspace ready at: {ws}")
        print(f"Copied -> profiles: {copied.get('profiles', 0)}")
        return 0
    if cmd == "where":
        print(f"Workspace: {workspace_dir()}")
        print(f"Package:   {pkg_files('lotocomb')}")
        return 0
    if cmd == "profiles":
        ensure_workspace_seeded()
        active = CONFIG.read_current_profile()
        for name, desc in CONFIG.list_profiles_with_descriptions():
            mark = f"{Fore.GREEN}*{Style.RESET_ALL}" if name == active else " "
            print(f"{mark} {Fore.YELLOW}{name:<16}{Style.RESET_ALL} {desc}")
        return 0
    # active
    print(f"Active profile: {CONFIG.read_current_profile() or 'default'}")
    return 0


# ---- reporting ----
def _print_summary(report: RunReport, om: OutputManager) -> None:
    nums = format_numbers(report.required) or "(none)"
    if report.window is None:
        om.write(f"Generated {format_count(report.printed)} games containing {nums}.")
    else:
        w = report.window
        om.write(
            f"Printed {format_count(report.printed)} games at positions "
            f"{format_count(w.start)}..{format_count(w.end)} "
            f"(scanned {format_count(report.scanned)})."
        )
    om.write(f"Expected total: {format_count(report.expected)}   "
             f"elapsed: {format_duration(report.elapsed_s)}   samples: {len(report.times)}")

    if not report.consistent:
        om.write(f"{Fore.RED}{Style.BRIGHT}Count mismatch:{Style.RESET_ALL} printed {report.printed}, "
                 f"expected {format_count(report.expected_printed)}")

    if report.gc_events:
        last = report.gc_events[-1]
        om.write(f"\nGC summary ({len(report.gc_events)} events):")
        om.write(f"Total GC time: {report.gc_total_ms:.1f} ms")
        om.write(f"Last GC: {last.action} / {last.cause}, duration {last.duration_ms:.1f} ms, "
                 f"memory {last.used_before_mb}MB -> {last.used_after_mb}MB")


def _render_chart(target: str, report: RunReport, om: OutputManager) -> None:
    mode = target.strip().lower()
    if mode in ("none", "off", "false", "0"):
        return
    show = mode == "show"
    output = None if show else resolve_output_path(target, str(workspace_dir()))
    plot_memory(report.times, report.memory, report.gc_events,
                started=report.started, output=output, show=show)
    if output:
        om.write(f"Chart written to {output}")


# ---- main ----
def _main_impl(argv=None) -> int:

    just_fix_windows_console()

    # Only touch redirected output (pipes/files), leave TTY as-is
    if not sys.stdout.isatty() and platform.system() == "Windows":
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")
        sys.stderr.reconfigure(encoding="utf-8", errors="replace")

    parser = _build_parser()
    args = parser.parse_args(argv)
    rt = _rt_reset()
    rt.debug = bool(args.debug)
    _install_loud_error_handlers(args.debug)

    if args.items and args.items[0] in COMMANDS:
        return _run_command(args.items[0], args.items)

    if not ensure_runtime_deps(strict=True):
        return 1

    ensure_workspace_seeded()
    profile_name = _load_profile(args.profile)
    if args.debug:
        rt.debug = True  # a profile may not switch off an explicit --debug

    cfg = resolve_config(args)

    chart_target = str(_first(args.chart, CFG("OUTPUT.CHART", None)) or "show")
    output_target = _first(args.output, CFG("OUTPUT.OUTPUT_FILE", None))
    try:
        om = OutputManager(output_file=output_target, quiet=args.quiet)
    except ValueError as e:
        print(f"Fatal error in --output: {e}", file=sys.stderr)
        return 1

    try:
        om.write(f"{Fore.YELLOW}{Style.BRIGHT}Lotocomb v{_ver}{Style.RESET_ALL} — profile {profile_name}")
        _debug(f"config: {cfg}")
        mode = "turbo walk" if cfg.turbo else "lazy generator"
        om.write(f"Monitoring memory every {format_count(cfg.step_interval)} games ({mode})...")
        om.write(f"Generating games with required numbers "
                 f"{format_numbers(cfg.required) or '(none)'}...")

        def on_sample(step: int, elapsed: float, mem: int) -> None:
            om.write(f"Step {format_count(step)}: {mem} MB  {Style.DIM}({format_duration(elapsed)}){Style.RESET_ALL}")

        def on_game(pos: int, game: tuple[int, ...]) -> None:
            om.write(f"#{pos:<10,} {format_combination(game, cfg.required)}")

        # without a window every game would be printed; only the count is reported
        report = run(cfg, on_combination=on_game if cfg.window is not None else None, on_sample=on_sample)
        _print_summary(report, om)
        _render_chart(chart_target, report, om)
    finally:
        om.close()

    return 0 if report.consistent else 1


if __name__ == "__main__":
    raise SystemExit(main())
