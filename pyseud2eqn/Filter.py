# Filter.py
"""""
Line filter for troff documents.

Responsibilities
----------------
- Pass every line outside a .EQPY / .ENPY region through unchanged
- Translate each line inside a region: parse -> autocalc -> render
- Wrap results in .EQ / .EN, report bad lines as "Invalid EQ" and carry on
- Keep one Scope for the whole pass so later lines see earlier bindings
"""""

import argparse
import re
import sys

from . import config_manager
from . import error as E
from . import tracing
from . import Parser
from .ExprEngine import Scope
from .tracing import trace


def marker(name):
    """Regex for a region marker line such as '.EQPY' (case insensitive)."""
    return re.compile(r"^\." + re.escape(name), re.IGNORECASE)


def translate(scope, line):
    """Main API: parse -> autocalc -> render one line into eqn markup.

    Returns the markup, or None for a configuration directive.
    Raises EqnError (with the line attached) for anything that cannot be shown.
    """
    try:
        target = Parser.parse_target(scope, line)
        scope.process_target(target)
        if target.is_config:
            return None
        return target.render(scope)

    # Re-raise our domain errors after attaching the source line
    except E.EqnError as e:
        e.equation = line
        raise e
    # Convert unexpected Python exceptions to our unified error type
    except (ValueError, ArithmeticError, TypeError, RecursionError) as e:
        raise E.EqnError(message=E.describe("9999") + str(e).strip(), code="9999", equation=line)


class DocumentFilter:
    """Stateful line filter; one instance per document pass."""

    def __init__(self, scope=None, begin="EQPY", end="ENPY"):
        self.scope = scope if scope is not None else Scope()
        self.begin = marker(begin)
        self.end = marker(end)
        self.on = False

    def feed(self, line):
        """Return the output lines for one input line (without newlines)."""
        if self.end.match(line):
            self.on = False
            return []
        elif self.begin.match(line):
            self.on = True
            return []
        elif not self.on or not line.strip():
            return [line]

        try:
            markup = translate(self.scope, line)
        except E.EqnError as e:
            trace(f"invalid line {line!r}: {e.code} {e.message}")
            return [".LP", f"Invalid EQ, {e.message}"]

        if markup is None:
            return []
        return [".EQ", markup, ".EN"]

    def run(self, lines, out):
        for line in lines:
            for output in self.feed(line.rstrip("\r\n")):
                out.write(output + "\n")
        trace(f"known at exit: {self.scope.known}")


def build_arg_parser():
    parser = argparse.ArgumentParser(
        prog="pyseud2eqn",
        description="Translate shorthand equations inside .EQPY/.ENPY regions into eqn markup.",
    )
    parser.add_argument("files", nargs="*", help="input documents (default: stdin)")
    parser.add_argument("--config", help="settings file (default: config.json)")
    parser.add_argument("--style", choices=["SiSuffix", "TenExp", "Scientific", "Verbatim"],
                        help="number display style")
    parser.add_argument("--precision", type=int, help="working precision in bits")
    parser.add_argument("--digits", type=int, help="maximum digits after the decimal point")
    parser.add_argument("--autocalc-ident", help="placeholder name to compute (default: ?)")
    parser.add_argument("--debug", action="store_true", help="trace evaluation to stderr")
    return parser


def load_settings(args):
    """Settings file values, overridden by command line flags."""
    settings = config_manager.load_setting_value("all", path=args.config,
                                                strict=args.config is not None)
    overrides = {
        "repstyle": args.style,
        "precision": args.precision,
        "max_digits_after_zero": args.digits,
        "autocalc_ident": args.autocalc_ident,
    }
    for key, value in overrides.items():
        if value is not None:
            settings[key] = value
    if args.debug:
        settings["debug"] = True
    return settings


def main(argv=None):
    args = build_arg_parser().parse_args(argv)
    try:
        settings = load_settings(args)
        tracing.debug = bool(settings.get("debug"))
        trace(f"settings {settings}")
        scope = Scope.from_settings(settings)
    except E.ConfigError as e:
        print(f"Configuration error [{e.code}]: {e.message}", file=sys.stderr)
        return 2

    doc_filter = DocumentFilter(scope, settings["begin_marker"], settings["end_marker"])
    if not args.files:
        doc_filter.run(sys.stdin, sys.stdout)
        return 0

    for path in args.files:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                doc_filter.run(f, sys.stdout)
        except OSError as e:
            print(f"{path}: {e.strerror}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
