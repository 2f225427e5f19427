"""httpsel substitution - {{placeholder}} resolution and dynamic generators."""

import datetime
import math
import random
import string
import time as _time
import uuid

DEFAULT_INT_RANGE = (0, 1000)
DEFAULT_FLOAT_RANGE = (0.0, 1000.0)
DEFAULT_LENGTH = 10

ALPHABETIC = string.ascii_lowercase + string.ascii_uppercase
ALPHANUMERIC = ALPHABETIC + string.digits + "_"
HEXADECIMAL = "0123456789abcdef"


# ── Generators ───────────────────────────────────────────────────────────


def _rng() -> random.Random:
    # Fresh entropy-backed source per call, no shared state between calls.
    return random.SystemRandom()


def _parse_range(params: str, default: tuple, convert) -> tuple:
    """Parse 'from,to' into a pair, falling back to default on bad input.

    A missing upper bound keeps the default one.
    """
    if not params.strip():
        return default
    parts = params.split(",", 1)
    try:
        low = convert(parts[0].strip())
        high = convert(parts[1].strip()) if len(parts) > 1 else default[1]
    except ValueError:
        return default
    return (low, high)


def _parse_length(params: str) -> int:
    if not params.strip():
        return DEFAULT_LENGTH
    try:
        return int(params.strip())
    except ValueError:
        return DEFAULT_LENGTH


def generate_uuid(params: str = "") -> str:
    return str(uuid.uuid4())


def generate_timestamp(params: str = "") -> str:
    return str(int(_time.time()))


def generate_iso_timestamp(params: str = "") -> str:
    """Current UTC time with millisecond precision, e.g. 2024-01-02T03:04:05.678Z."""
    now = datetime.datetime.now(datetime.timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S") + f".{now.microsecond // 1000:03d}Z"


def generate_random_int(params: str = "") -> str:
    """Integer in [from, to). An empty range falls back to the default one."""
    low, high = _parse_range(params, DEFAULT_INT_RANGE, int)
    if high <= low:
        low, high = DEFAULT_INT_RANGE
    return str(_rng().randrange(low, high))


def generate_random_float(params: str = "") -> str:
    """Float in [from, to] with six decimals. Non-finite bounds use the default range."""
    low, high = _parse_range(params, DEFAULT_FLOAT_RANGE, float)
    if not (math.isfinite(low) and math.isfinite(high)):
        low, high = DEFAULT_FLOAT_RANGE
    return f"{_rng().uniform(low, high):.6f}"


def _random_string(alphabet: str, params: str) -> str:
    length = _parse_length(params)
    if length <= 0:
        return ""
    rng = _rng()
    return "".join(rng.choice(alphabet) for _ in range(length))


def generate_random_alphabetic(params: str = "") -> str:
    return _random_string(ALPHABETIC, params)


def generate_random_alphanumeric(params: str = "") -> str:
    return _random_string(ALPHANUMERIC, params)


def generate_random_hexadecimal(params: str = "") -> str:
    return _random_string(HEXADECIMAL, params)


def generate_random_email(params: str = "") -> str:
    username = generate_random_alphabetic("8")
    domain = generate_random_alphabetic("6")
    tld = generate_random_alphabetic("3")
    return f"{username}@{domain}.{tld}"


GENERATORS = {
    "uuid": generate_uuid,
    "random.uuid": generate_uuid,
    "timestamp": generate_timestamp,
    "isoTimestamp": generate_iso_timestamp,
    "randomInt": generate_random_int,
    "random.integer": generate_random_int,
    "random.float": generate_random_float,
    "random.alphabetic": generate_random_alphabetic,
    "random.alphanumeric": generate_random_alphanumeric,
    "random.hexadecimal": generate_random_hexadecimal,
    "random.email": generate_random_email,
}


def resolve_dynamic(expression: str) -> str:
    """Resolve a '$name' or '$name(args)' expression to a generated value.

    Returns an empty string for unknown generator names and for an opening
    paren without a closing one.
    """
    expr = expression[1:] if expression.startswith("$") else expression

    open_pos = expr.find("(")
    if open_pos == -1:
        name, params = expr, ""
    else:
        close_pos = expr.find(")", open_pos + 1)
        if close_pos == -1:
            return ""
        name, params = expr[:open_pos], expr[open_pos + 1 : close_pos]

    generator = GENERATORS.get(name)
    if generator is None:
        return ""
    return generator(params)


# ── Placeholder substitution ─────────────────────────────────────────────


class Substitutor:
    """Replaces {{...}} placeholders using a variable table and generators.

    The variable table is shared by reference, so declarations made by the
    owner after construction are visible to later substitutions.
    """

    def __init__(self, variables: dict[str, str] | None = None):
        self.variables: dict[str, str] = variables if variables is not None else {}

    def resolve(self, placeholder: str) -> str:
        """Resolve the inner text of a placeholder.

        '$'-prefixed text goes to the dynamic generators; anything else is a
        variable lookup, empty string if undeclared.
        """
        if placeholder.startswith("$"):
            return resolve_dynamic(placeholder)
        return self.variables.get(placeholder, "")

    def substitute(self, text: str) -> str:
        """Replace every {{...}} span in text, left to right.

        Inserted values are not rescanned. An opening marker with no closing
        marker leaves the rest of the text as is.
        """
        result = text
        pos = 0
        while pos < len(result):
            start = result.find("{{", pos)
            if start == -1:
                break
            end = result.find("}}", start)
            if end == -1:
                break
            replacement = self.resolve(result[start + 2 : end])
            result = result[:start] + replacement + result[end + 2 :]
            pos = start + len(replacement)
        return result
