"""httpsel display - text rendering of requests and responses."""

import json


def format_request_line(request, index: int | None = None) -> str:
    """One-line summary: '[0] GET https://... (name)'."""
    prefix = f"[{index}] " if index is not None else ""
    label = f"  ({request.name})" if request.name else ""
    return f"{prefix}{request.method:<6} {request.url}{label}"


def format_request(request) -> str:
    """Multi-line detail block for a parsed request."""
    lines: list[str] = []
    if request.name:
        lines.append(f"Name: {request.name}")
    lines.append(f"Method: {request.method}")
    lines.append(f"URL: {request.url}")

    if request.headers:
        lines.append("Headers:")
        for key, value in request.headers.items():
            lines.append(f"  {key}: {value}")

    if request.body:
        lines.append("Body:")
        lines.append(request.body)

    return "\n".join(lines)


def format_output(
    result,  # RequestResult from executor.py
    verbose: bool = False,
    raw: bool = False,
) -> str:
    """Format the request result for CLI output.

    Default layout is STATUS / TIME / BODY; verbose adds response headers,
    raw prints the body alone.
    """
    if result.error:
        return f"ERROR: {result.error}"

    if raw:
        body = result.body
        if isinstance(body, dict | list):
            return json.dumps(body, indent=2)
        return str(body) if body is not None else ""

    lines: list[str] = [
        f"STATUS: {result.status_code}",
        f"TIME: {int(result.elapsed_ms)}ms",
    ]

    if verbose and result.headers:
        lines.append("HEADERS:")
        for key, value in result.headers.items():
            lines.append(f"  {key}: {value}")

    body = result.body
    if body is not None and body != "":
        lines.append("BODY:")
        if isinstance(body, dict | list):
            lines.append(json.dumps(body, indent=2))
        else:
            lines.append(str(body))

    return "\n".join(lines)
