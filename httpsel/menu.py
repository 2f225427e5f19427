"""httpsel menu - interactive request selection."""

import click

from httpsel.display import format_output, format_request

TITLE = "HTTP Request Selector"
FOOTER = "Press 'd' to toggle details, arrow keys to navigate, Enter to select, q to quit."

# click.getchar() returns the whole escape sequence for special keys.
KEY_MAP = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\xe0H": "up",  # Windows
    "\xe0P": "down",
    "\x00H": "up",
    "\x00P": "down",
    "k": "up",
    "j": "down",
    "\r": "enter",
    "\n": "enter",
    "q": "quit",
    "Q": "quit",
    "d": "details",
    "D": "details",
}

MAX_KEY_READ_ATTEMPTS = 3


class RequestMenu:
    """Selection state over an ordered list of parsed requests."""

    def __init__(self, requests=None):
        self.requests = list(requests or [])
        self.selected = 0
        self.show_details = False

    def __len__(self):
        return len(self.requests)

    def move_up(self) -> None:
        if self.selected > 0:
            self.selected -= 1

    def move_down(self) -> None:
        if self.selected < len(self.requests) - 1:
            self.selected += 1

    def toggle_details(self) -> None:
        self.show_details = not self.show_details

    def get_selected(self):
        if 0 <= self.selected < len(self.requests):
            return self.requests[self.selected]
        return None

    def reset(self) -> None:
        self.selected = 0
        self.show_details = False

    def render(self) -> str:
        lines = [TITLE, "=" * len(TITLE), ""]

        if not self.requests:
            lines.append("No requests available.")
            return "\n".join(lines)

        if self.show_details:
            lines.append(format_request(self.get_selected()))
        else:
            for i, request in enumerate(self.requests):
                marker = "> " if i == self.selected else "  "
                if request.name:
                    lines.append(f"{marker}# {request.name}")
                    lines.append(f"    {request.method} {request.url}")
                else:
                    lines.append(f"{marker}{request.method} {request.url}")

        lines.append("")
        lines.append(FOOTER)
        return "\n".join(lines)


def read_key(getchar=click.getchar, attempts: int = MAX_KEY_READ_ATTEMPTS) -> str:
    """Read one key press and normalise it to a menu action.

    Returns 'up', 'down', 'enter', 'quit', 'details' or the raw character.
    End of input and Ctrl-C read as 'quit'. Terminal errors are retried up to
    `attempts` times before giving up with 'quit'.
    """
    for _ in range(attempts):
        try:
            key = getchar()
        except (EOFError, KeyboardInterrupt):
            return "quit"
        except OSError:
            continue
        return KEY_MAP.get(key, key)
    return "quit"


def run_menu(menu: RequestMenu, adapter, getchar=click.getchar, verbose: bool = False) -> None:
    """Interactive loop: render, read a key, act on it until 'quit'."""
    if len(menu) == 0:
        click.echo("No requests to display. Exiting.")
        return

    while True:
        click.clear()
        click.echo(menu.render())

        key = read_key(getchar)
        if key == "up":
            menu.move_up()
        elif key == "down":
            menu.move_down()
        elif key == "details":
            menu.toggle_details()
        elif key == "quit":
            break
        elif key == "enter":
            request = menu.get_selected()
            if request is None:
                continue
            click.echo("\nExecuting request...")
            click.echo(format_request(request))
            click.echo("\nResponse:")
            result = adapter.execute(request)
            click.echo(format_output(result, verbose=verbose))
            click.echo("\nPress any key to continue...", nl=False)
            read_key(getchar)

    click.clear()
