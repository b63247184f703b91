"""
Printf-style message formatting that never raises.

Conversions follow Python's ``%`` operator. When an argument does not fit its
conversion, or arguments are missing or left over, the output carries a marker
in place of the value instead of failing:

    >>> sprintf("value %d", ["not-a-number"])
    'value %!d(str=not-a-number)'
    >>> sprintf("%s and %s", ["a"])
    'a and %!s(MISSING)'
    >>> sprintf("done", [3])
    'done%!(EXTRA int=3)'
"""

import re
from typing import Any, Sequence

# flags, width, precision, length modifier, conversion type
_SPEC = re.compile(
    r"%(?P<key>\([^)]*\))?(?P<flags>[#0\- +]*)(?P<width>\*|\d+)?"
    r"(?:\.(?P<precision>\*|\d+))?[hlL]?(?P<verb>[diouxXeEfFgGcrsa%])?"
)


def _describe(arg: Any) -> str:
    try:
        text = str(arg)
    except Exception:
        text = object.__repr__(arg)
    return f"{type(arg).__name__}={text}"


def sprintf(message: str, args: Sequence[Any]) -> str:
    """Substitute ``args`` into ``message`` one conversion at a time."""
    message = str(message)
    args = list(args)
    out = []
    pos = 0
    index = 0

    for match in _SPEC.finditer(message):
        out.append(message[pos:match.start()])
        pos = match.end()
        verb = match.group("verb")

        if verb is None:
            out.append("%!(NOVERB)")
            continue
        if verb == "%" and match.group(0) == "%%":
            out.append("%")
            continue

        spec = match.group(0)
        if match.group("key") is not None:
            # mapping keys are not positional
            out.append(f"%!{verb}(BADKEY)")
            continue
        if "*" in spec:
            out.append(f"%!{verb}(BADWIDTH)")
            continue
        if index >= len(args):
            out.append(f"%!{verb}(MISSING)")
            continue

        arg = args[index]
        index += 1
        try:
            out.append(spec % (arg,))
        except Exception:
            out.append(f"%!{verb}({_describe(arg)})")

    out.append(message[pos:])

    if index < len(args):
        extra = ", ".join(_describe(arg) for arg in args[index:])
        out.append(f"%!(EXTRA {extra})")

    return "".join(out)
