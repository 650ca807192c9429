"""Command-line option scanning in the style of classic getopt."""

from __future__ import annotations


class GetoptError(ValueError):
    """Raised for an unknown option or an option missing its argument."""

    def __init__(self, message: str, option: str) -> None:
        super().__init__(message)
        self.option = option


def getopt(
    argv: list[str], optstring: str
) -> tuple[list[tuple[str, str | None]], list[str]]:
    """Scan ``argv`` (without the program name) for options.

    Returns the list of ``(option, argument)`` pairs and the remaining
    operands. Scanning stops at the first non-option, at a lone ``-``
    (left in place) or after ``--`` (consumed). The long forms
    ``-help``/``--help`` and ``-version``/``--version`` yield ``h`` and ``v``.
    """
    args = list(argv)
    options: list[tuple[str, str | None]] = []
    i = 0
    while i < len(args):
        arg = args[i]
        if not arg.startswith("-"):
            break
        if arg in ("-help", "--help"):
            options.append(("h", None))
            i += 1
            continue
        if arg in ("-version", "--version"):
            options.append(("v", None))
            i += 1
            continue
        if arg == "-":
            break
        if arg.startswith("--"):
            i += 1
            break

        i += 1
        rest = arg[1:]
        while rest:
            c = rest[0]
            pos = optstring.find(c)
            if c == ":" or pos < 0:
                raise GetoptError(f"illegal option -- {c}", c)
            if optstring[pos + 1 : pos + 2] == ":":
                if len(rest) > 1:
                    value = rest[1:]
                elif i < len(args):
                    value = args[i]
                    i += 1
                else:
                    raise GetoptError(f"Missing argument after -{c}", c)
                options.append((c, value))
                break
            options.append((c, None))
            rest = rest[1:]
    return options, args[i:]