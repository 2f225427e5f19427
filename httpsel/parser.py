"""httpsel parser - turns request-collection text into request records."""

from collections.abc import Iterable
from pathlib import Path
from typing import Any

from httpsel.reader import iter_file_lines
from httpsel.substitution import Substitutor

NAME_MARKER = "# @name"
COMMENT_PREFIXES = ("#", "//")
METHOD_PREFIXES = ("GET ", "POST ", "PUT ", "PATCH ", "DELETE ")


class HttpRequest:
    """One parsed request block."""

    def __init__(self, method: str, url: str, name: str | None = None):
        self.method = method
        self.url = url
        self.name = name
        self.headers: dict[str, str] = {}
        self.body: str | None = None

    def add_header(self, key: str, value: str) -> None:
        self.headers[key] = value

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "method": self.method,
            "url": self.url,
            "headers": dict(self.headers),
            "body": self.body,
        }

    def __eq__(self, other):
        if not isinstance(other, HttpRequest):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return (
            f"HttpRequest(method={self.method!r}, url={self.url!r}, "
            f"name={self.name!r}, headers=<{len(self.headers)} headers>, "
            f"body={'<present>' if self.body else '<none>'})"
        )


class RequestFileParser:
    """Single-pass, line-oriented parser for request-collection files.

    Variables declared with '@name = value' live in ``self.variables`` and are
    cleared at the start of every parse() call. An instance is not safe to
    share between threads; use one parser per concurrent parse.
    """

    def __init__(self):
        self.variables: dict[str, str] = {}
        self.substitutor = Substitutor(self.variables)

    def parse(self, lines: Iterable[str]) -> list[HttpRequest]:
        """Parse lines (without trailing newlines) into request records.

        Malformed lines are skipped or substituted as empty; this never raises
        on bad content.
        """
        self.variables.clear()
        substitute = self.substitutor.substitute

        requests: list[HttpRequest] = []
        current: HttpRequest | None = None
        in_headers = False
        in_body = False
        name = ""
        body = ""

        for line in lines:
            if line.startswith(NAME_MARKER):
                name = line[len(NAME_MARKER) + 1 :]
                continue

            if line.startswith(COMMENT_PREFIXES):
                continue

            if line.startswith("@"):
                self._declare_variable(line)
                continue

            if not line:
                if current is not None and in_headers:
                    in_headers = False
                    in_body = True
                    body = ""
                    name = ""
                continue

            if line.startswith(METHOD_PREFIXES):
                if current is not None:
                    self._finalize(current, in_body, body, requests)

                method, _, url = substitute(line).partition(" ")
                current = HttpRequest(method, url, name or None)
                in_headers = True
                in_body = False
                body = ""
                name = ""
            elif in_headers and current is not None:
                key, sep, value = line.partition(":")
                if sep:
                    current.add_header(substitute(key.strip()), substitute(value.strip()))
            elif in_body and current is not None:
                if body:
                    body += "\n"
                body += substitute(line)

        if current is not None:
            self._finalize(current, in_body, body, requests)

        return requests

    def parse_text(self, text: str) -> list[HttpRequest]:
        return self.parse(text.split("\n"))

    def _declare_variable(self, line: str) -> None:
        """Store '@name = value'; lines without '=' are ignored."""
        var_name, sep, value = line[1:].partition("=")
        if not sep:
            return
        var_name = var_name.strip()
        value = value.strip()
        if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
            value = value[1:-1]
        self.variables[var_name] = value

    def _finalize(
        self,
        request: HttpRequest,
        in_body: bool,
        body: str,
        requests: list[HttpRequest],
    ) -> None:
        # Body lines were substituted on the way in; the joined body gets a
        # second pass here.
        if in_body and body:
            request.body = self.substitutor.substitute(body)
        requests.append(request)


# ── Convenience entry points ─────────────────────────────────────────────


def parse_lines(lines: Iterable[str]) -> list[HttpRequest]:
    """Parse a line sequence with a fresh parser."""
    return RequestFileParser().parse(lines)


def parse_text(text: str) -> list[HttpRequest]:
    """Parse in-memory request text, splitting on newlines."""
    return RequestFileParser().parse_text(text)


def parse_file(path: str | Path) -> list[HttpRequest]:
    """Parse a request file through the memory-mapped line reader.

    Raises OSError if the file cannot be opened.
    """
    return RequestFileParser().parse(iter_file_lines(path))
