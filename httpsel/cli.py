"""httpsel CLI - pick and send requests from a .http request file."""

import json
import sys

import click

TOOL_HELP = """\
httpsel — HTTP request selector for .http request files.

Parses a request-collection file and lets you list, inspect and send
the requests in it.

\b
USAGE
─────
  httpsel requests.http              interactive menu (on a terminal)
  httpsel requests.http --list       numbered summary
  httpsel requests.http --run 0      send the first request
  httpsel requests.http --run GetUsers --dry-run
  cat requests.http | httpsel - --json
  httpsel --text 'GET https://example.com' --run 0

\b
FILE FORMAT
───────────
  \b
  @host = example.com               variable declaration ("quotes" optional)
  # @name GetUsers                  name for the next request
  # comment / // comment            ignored
  GET https://{{host}}/users        request line (GET POST PUT PATCH DELETE)
  Accept: application/json          headers until the first blank line
                                    blank line, then the body
  {"name": "{{$random.alphabetic(6)}}"}

\b
PLACEHOLDERS
────────────
  \b
  {{var}}                           declared variable ('' if undeclared)
  {{$uuid}} {{$random.uuid}}        UUID v4
  {{$timestamp}}                    Unix seconds
  {{$isoTimestamp}}                 UTC, millisecond precision
  {{$randomInt(from,to)}}           integer in [from, to), default 0,1000
  {{$random.integer(from,to)}}      same as randomInt
  {{$random.float(from,to)}}        float, 6 decimals, default 0,1000
  {{$random.alphabetic(n)}}         n letters (default 10)
  {{$random.alphanumeric(n)}}       n letters, digits or _
  {{$random.hexadecimal(n)}}        n lowercase hex digits
  {{$random.email}}                 random address

\b
MENU KEYS
─────────
  Up/Down (or k/j) move, d toggles details, Enter sends, q quits.

\b
CONFIG FILE FORMAT (.httpsel.yaml)
──────────────────────────────────
  Config resolution order:
    1. -c/--config flag (explicit path)
    2. .httpsel.yaml / .httpsel.yml / httpsel.yaml / httpsel.yml in CWD
    3. ~/.httpsel/config.yaml (global)

  \b
  defaults:
    timeout: 30                     # seconds
    env_file: .env                  # load .env file
    headers:                        # sent with every request
      Authorization: Bearer ${API_TOKEN}

\b
EXIT CODES
──────────
  0 = success
  1 = unreadable input, no requests found, unknown --run selector,
      or a request failed to send
"""


@click.command(
    help=TOOL_HELP,
    context_settings={"help_option_names": ["-h", "--help"], "max_content_width": 100},
)
@click.argument("source", required=False)
@click.option(
    "--text",
    "text",
    default=None,
    help="Parse this literal request text instead of SOURCE.",
)
@click.option(
    "-c",
    "--config",
    "config_file",
    default=None,
    help="Path to config file. Default: .httpsel.yaml in CWD, then ~/.httpsel/config.yaml.",
)
@click.option(
    "--list",
    "show_list",
    is_flag=True,
    default=False,
    help="Print a numbered summary of the parsed requests.",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the parsed requests as a JSON array.",
)
@click.option(
    "--run",
    "run_selectors",
    multiple=True,
    metavar="INDEX|NAME",
    help="Send a request by 0-based index or by name. Repeatable.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="With --run, print the request instead of sending it.",
)
@click.option(
    "--timeout",
    type=int,
    default=None,
    help="Request timeout in seconds. Default: 30.",
)
@click.option(
    "--verbose",
    is_flag=True,
    default=False,
    help="Include response headers in output.",
)
@click.option(
    "--raw",
    is_flag=True,
    default=False,
    help="Output raw response body only. Useful for piping.",
)
def main(
    source,
    text,
    config_file,
    show_list,
    as_json,
    run_selectors,
    dry_run,
    timeout,
    verbose,
    raw,
):
    """Parse a request file and list, inspect or send its requests."""
    from httpsel.core import build_adapter, load_config, load_env, resolve_config_path
    from httpsel.menu import RequestMenu, run_menu
    from httpsel.parser import RequestFileParser
    from httpsel.reader import read_source

    if source is None and text is None:
        ctx = click.get_current_context()
        click.echo(ctx.get_help())
        ctx.exit(1)

    # --- Load config ---
    config_path = resolve_config_path(config_file)
    config = load_config(config_path)
    defaults = config.get("defaults", {})
    env = load_env(defaults.get("env_file"), base_dir=config["_config_dir"] or ".")

    # --- Parse ---
    try:
        label, lines = read_source(source, text)
        requests = RequestFileParser().parse(lines)
    except OSError as e:
        click.echo(f"ERROR: Could not open file {source}: {e.strerror or e}", err=True)
        sys.exit(1)

    if not requests:
        click.echo(f"No valid requests found in: {label}", err=True)
        sys.exit(1)

    # --- Dispatch ---

    if as_json:
        click.echo(json.dumps([r.to_dict() for r in requests], indent=2))
        return

    if run_selectors:
        adapter = None if dry_run else build_adapter(config, env, timeout)
        _cmd_run(requests, run_selectors, adapter, dry_run, verbose, raw)
        return

    if show_list or not sys.stdout.isatty():
        _cmd_list(requests)
        return

    run_menu(RequestMenu(requests), build_adapter(config, env, timeout), verbose=verbose)


# ── Subcommand implementations ──────────────────────────────────────────


def _cmd_list(requests):
    from httpsel.display import format_request_line

    for i, request in enumerate(requests):
        click.echo(format_request_line(request, i))


def _cmd_run(requests, selectors, adapter, dry_run, verbose, raw):
    from httpsel.display import format_output, format_request

    for n, selector in enumerate(selectors):
        request = _select_request(requests, selector)
        if request is None:
            click.echo(f"ERROR: No request matches '{selector}'.", err=True)
            sys.exit(1)

        if n:
            click.echo()

        if dry_run:
            click.echo(format_request(request))
            continue

        result = adapter.execute(request)
        if result.error:
            click.echo(f"ERROR: {result.error}", err=True)
            sys.exit(1)
        click.echo(format_output(result, verbose=verbose, raw=raw))


# ── Helpers ──────────────────────────────────────────────────────────────


def _select_request(requests, selector):
    """Find a request by 0-based index, falling back to name match."""
    selector = selector.strip()
    if selector.isdigit():
        index = int(selector)
        if index < len(requests):
            return requests[index]
    for request in requests:
        if request.name == selector:
            return request
    return None
