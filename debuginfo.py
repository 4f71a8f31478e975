import sys
import argparse

try:
    from rich.console import Console
    from rich.table import Table
    from rich import box
    from rich.markup import escape
except ImportError:
    print("Error: The 'rich' library is required for the CLI but not installed.", file=sys.stderr)
    print("Please install it with: pip install debuginfo", file=sys.stderr)
    sys.exit(1)

from debuginfolib import __version__
from debuginfolib.config import (
    ConfigError,
    config_from_env,
    default_config,
    load_preset,
    merge_configs,
    save_preset,
    validate_config,
)
from debuginfolib.info import DebugInfo
from debuginfolib.models import CallerNameFormat

console = Console()


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        description="Preview debug info strings for a configuration",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("--version", action="version",
                        version=f"debuginfo {__version__}")

    parser.add_argument("--caller-format", dest="caller_name_format", type=str, default=None,
                        choices=[f.value for f in CallerNameFormat],
                        help="Caller name format (default: full_name)")
    parser.add_argument("--timestamp-format", dest="timestamp_format", type=str, default=None,
                        help="LDML timestamp pattern, e.g. 'yyyy-MM-dd HH:mm:ss'")
    parser.add_argument("--culture", type=str, default=None,
                        help="Locale for the timestamp, e.g. de-DE (default: en_US)")
    parser.add_argument("--delimiter", type=str, default=None,
                        help="Separator between timestamp and caller name")

    parser.add_argument("--preset", type=str, default=None,
                        help="JSON preset file to load before command-line overrides")
    parser.add_argument("--save-preset", dest="save_preset", type=str, default=None,
                        help="Write the effective configuration to this JSON file")

    return parser.parse_args(argv)


def build_config(args, environ=None):
    """defaults < environment < preset < command line"""
    layers = [default_config(), config_from_env(environ)]
    if args.preset:
        layers.append(load_preset(args.preset))
    cli_overrides = {
        k: getattr(args, k)
        for k in ("caller_name_format", "timestamp_format", "culture", "delimiter")
        if getattr(args, k) is not None
    }
    # empty --culture selects the default locale, as DEBUGINFO_CULTURE does
    if "culture" in cli_overrides and not cli_overrides["culture"].strip():
        cli_overrides["culture"] = None
    layers.append(cli_overrides)
    config = merge_configs(*layers)
    validate_config(config)
    return config


def print_preview(info):
    table = Table(title="Debug info", box=box.SIMPLE)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Date", info.date)
    table.add_row("Time", info.time)
    table.add_row("DateTime", info.date_time)
    table.add_row("TimeStamp", info.timestamp())
    table.add_row("Caller", info.caller_name())
    table.add_row("Combined", info.render())

    console.print(table)


def main(argv=None, environ=None):
    args = parse_arguments(argv)

    try:
        config = build_config(args, environ)
        info = DebugInfo()
        info.configure(config)
    except ConfigError as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        return 2

    print_preview(info)

    if args.save_preset:
        save_preset(info.to_config(), args.save_preset,
                    description="Saved by debuginfo")
        console.print(f"\n[dim]Preset saved to: {args.save_preset}[/]")

    return 0


if __name__ == "__main__":
    sys.exit(main())
