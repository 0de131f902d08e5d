import signal
import sys
import typing as t
import click
import zirconium as zr
import zrlog
from autoinject import injector
from storls.exc import ConfigError
from storls.listing import ListingDriver, SeparatorStyle, TextSink, JsonSink, ListingSink
from storls.storage import StorageController, RootResolutionError
from storls.util import EventHaltFlag


@click.group
def main():
    pass


@main.command
@click.argument("locations", nargs=-1)
@click.option("-r", "--recursive", is_flag=True, default=False, help="List recursively.")
@click.option("-I", "--incomplete", is_flag=True, default=False, help="Include incomplete (uncommitted) uploads.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print one JSON object per entry.")
@click.option("--no-color", is_flag=True, default=False, help="Do not colorize text output.")
@click.option("--separator-style", type=click.Choice(["auto", "slash", "backslash"], case_sensitive=False), default=None)
@injector.inject
def ls(locations: tuple,
       recursive: bool,
       incomplete: bool,
       as_json: bool,
       no_color: bool,
       separator_style: t.Optional[str],
       storage: StorageController = None,
       config: zr.ApplicationConfig = None):
    """List files and folders."""
    log = zrlog.get_logger("storls.cli")
    try:
        style = SeparatorStyle.from_config(separator_style or config.as_str(("storls", "separator_style"), default="auto"))
    except ConfigError as ex:
        raise click.UsageError(str(ex)) from ex
    as_json = as_json or config.as_str(("storls", "output"), default="text") == "json"
    color = config.as_bool(("storls", "color"), default=True) and not no_color
    sink: ListingSink = JsonSink() if as_json else TextSink(color)
    halt_flag = EventHaltFlag()
    previous_handler = signal.signal(signal.SIGINT, lambda sig_num, frame: halt_flag.halt())
    exit_code = 0
    try:
        for location in (locations or (".",)):
            handle = storage.get_handle(location, halt_flag=halt_flag)
            driver = ListingDriver(handle, handle, sink, style, halt_flag)
            try:
                summary = driver.run(recursive, incomplete)
            except RootResolutionError as ex:
                click.echo(f"storls: Unable to list [{location}]: {ex}", err=True)
                exit_code = 1
                continue
            log.debug(f"Listed [{location}]: {summary}")
            if summary.cancelled:
                exit_code = 130
                break
    finally:
        signal.signal(signal.SIGINT, previous_handler)
    sys.exit(exit_code)
