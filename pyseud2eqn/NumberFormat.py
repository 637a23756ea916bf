# NumberFormat.py
"""""
Number rendering for eqn output.

Pipeline
--------
1) closest_common_exp: normalize the magnitude into [1, 10^group) and count
   the grouping steps taken.
2) style_suffix: pick the group size and the decoration for a display style.
3) render_number: fixed digit string, truncation, point repositioning for
   verbatim output, trailing zero cleanup.
"""""

from decimal import Decimal, Context, ROUND_HALF_EVEN
from enum import Enum

from .tracing import trace

# Raw significant digits printed before truncation
RAW_DIGITS = 3 * 8


class RepStyle(Enum):
    SiSuffix = "SiSuffix"
    TenExp = "TenExp"
    Scientific = "Scientific"
    Verbatim = "Verbatim"

    @classmethod
    def from_name(cls, name):
        """Case insensitive lookup, returns None for unknown names."""
        if isinstance(name, RepStyle):
            return name
        for style in cls:
            if style.value.lower() == str(name).strip().lower():
                return style
        return None


# (name, symbol) for n = -8 .. 8, index n + 8
SI_SUFF_LUT = [
    ("yocto", "y"),
    ("zepto", "z"),
    ("atto" , "a"),
    ("femto", "f"),
    ("pico" , "p"),
    ("nano" , "n"),
    ("micro", "µ"),
    ("milli", "m"),
    None,
    ("kilo" , "k"),
    ("mega" , "M"),
    ("giga" , "G"),
    ("tera" , "T"),
    ("peta" , "P"),
    ("exa"  , "E"),
    ("zetta", "Z"),
    ("yotta", "Y"),
]


def _context(scope):
    ctx = getattr(scope, "context", None)
    if ctx is None:
        ctx = Context(prec=78, rounding=ROUND_HALF_EVEN, traps=[])
    return ctx


def closest_common_exp(value, group, ctx=None):
    """Return (normalized_value, n) with |normalized_value| in [1, 10^group).

    n counts steps of 10^group, so value == normalized_value * 10^(group*n).
    Zero and non-finite values come back unchanged with n = 0.
    """
    if ctx is None:
        ctx = Context(prec=78, traps=[])
    if value.is_nan() or value.is_infinite() or value == 0:
        return (value, 0)

    negative = value.is_signed()
    val = value.copy_abs()
    n = 0
    one = Decimal(1)
    step = Decimal(10) ** group
    limit = Decimal(10) ** (group - 1)

    while val > limit:
        val = ctx.divide(val, step)
        n += 1
    while val < one:
        val = ctx.multiply(val, step)
        n -= 1

    normalized = val.copy_negate() if negative else val
    trace(f"closest common exp for {value} is ({normalized}, {n})")
    return (normalized, n)


def style_suffix(value, style, ctx=None, long_form=False):
    """Return (normalized_value, suffix or None, n) for a display style."""
    if style is RepStyle.SiSuffix:
        nval, n = closest_common_exp(value, 3, ctx)
        if n == 0:
            return (nval, None, n)
        elif n > 8 or n < -8:
            # Outside the prefix table
            return style_suffix(value, RepStyle.TenExp, ctx)
        name, symbol = SI_SUFF_LUT[n + 8]
        return (nval, f" {name}" if long_form else symbol, n)

    nval, n = closest_common_exp(value, 1, ctx)
    if n == 0:
        return (nval, None, n)
    if style is RepStyle.TenExp:
        return (nval, f" times 10 sup {{ {n} }}", n)
    if style is RepStyle.Scientific:
        return (nval, f"e{n}", n)
    return (nval, None, n)


def digit_string(value, digits=RAW_DIGITS):
    """Fixed point text of value rounded to `digits` significant digits.

    Always contains a decimal point for finite values.
    """
    if value == 0:
        return "0." + "0" * (digits - 1)
    rounded = Context(prec=digits, rounding=ROUND_HALF_EVEN, traps=[]).plus(value)
    places = max(digits - 1 - rounded.adjusted(), 1)
    return format(rounded, f".{places}f")


def _move_point(vstr, n):
    """Shift the decimal point of an unsigned digit string right by n places."""
    dotidx = vstr.find('.')
    vstr = vstr[:dotidx] + vstr[dotidx + 1:]
    new_dotidx = dotidx + n
    if new_dotidx <= 0:
        vstr = "0" * (abs(new_dotidx) + 1) + vstr
        return vstr[:1] + "." + vstr[1:]
    if new_dotidx >= len(vstr):
        vstr = vstr + "0" * (new_dotidx - len(vstr))
        return vstr + "."
    return vstr[:new_dotidx] + "." + vstr[new_dotidx:]


def render_number(value, scope):
    """Render a Decimal as an eqn token using the scope's display settings."""
    trace(f"render number {value}")
    if value.is_nan():
        return "NaN"
    if value.is_infinite():
        return "-infinity" if value.is_signed() else "infinity"

    style = scope.repstyle
    ctx = _context(scope)
    # Round first, so a carry (0.999... -> 1) is normalized like any other value
    value = Context(prec=RAW_DIGITS, rounding=ROUND_HALF_EVEN, traps=[]).plus(value)
    val, suffix, n = style_suffix(value, style, ctx, getattr(scope, "si_long_form", False))

    negative = val.is_signed() and val != 0
    vstr = digit_string(val.copy_abs())

    if '.' in vstr:
        if style is RepStyle.Verbatim:
            vstr = _move_point(vstr, n)
        else:
            maxidx = vstr.find('.') + scope.max_digits_after_zero
            vstr = vstr[:maxidx + 1]
        vstr = vstr.rstrip('0').rstrip('.')

    if vstr == "":
        vstr = "0"
    if negative and vstr != "0":
        vstr = "-" + vstr
    return vstr + (suffix or "")
