# tracing.py
"""""
Diagnostic output for the equation filter.

Everything goes to stderr, stdout belongs to the document being filtered.
Toggle with the module level `debug` flag (set from the settings or --debug).
"""""

import sys
import inspect

# Debug toggle for the trace prints in all modules
debug = False


def get_line_number():
    """Return the line number of the caller's caller."""
    return inspect.currentframe().f_back.f_back.f_lineno


def trace(message):
    """Print a message tagged with the calling line, when debugging is on."""
    if not debug:
        return
    line_num = get_line_number()
    print(f"[line {line_num}] {message}", file=sys.stderr)
