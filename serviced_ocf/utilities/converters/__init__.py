"""
Converters, used by the resource parameters parser.
"""


def convert_integer(s):
    """
    Return <s> cast to int.
    """
    if s is None:
        return
    try:
        return int(float(s))
    except ValueError:
        raise ValueError("convert integer error: %s" % s)


def convert_boolean(s):
    """
    Return a boolean from <s>.
    """
    true_vals = (
        "yes",
        "y",
        "true",
        "t",
        "1"
    )
    false_vals = (
        "no",
        "n",
        "false",
        "f",
        "0",
        "",
        "none",
    )
    s = str(s).lower()
    if s in true_vals:
        return True
    if s in false_vals:
        return False
    raise ValueError('convert boolean error: ' + s)


def convert_duration(s, _to="s", _from="s"):
    """
    Convert a string representation of a duration to seconds.
    Supported units (case insensitive):
      h: hour
      m: minute
      s: second
    Example:
      1h => 3600
      1m30s => 90
      1 => 1
    """
    if s is None:
        return

    units = {
        "h": 3600,
        "m": 60,
        "s": 1,
    }

    if _from not in units:
        raise ValueError("convert duration error: unsupported input unit %s" % _from)
    if _to not in units:
        raise ValueError("convert duration error: unsupported target unit %s" % _to)

    try:
        s = int(s)
        return s * units[_from] // units[_to]
    except ValueError:
        pass

    s = s.lower()
    duration = 0
    prev = 0
    for idx, unit in enumerate(s):
        if unit not in units:
            continue
        _duration = s[prev:idx]
        try:
            _duration = int(_duration)
        except ValueError:
            raise ValueError("convert duration error: invalid format %s at index %d" % (s, idx))
        duration += _duration * units[unit]
        prev = idx + 1
    if prev != len(s):
        raise ValueError("convert duration error: trailing garbage in %s" % s)

    return duration // units[_to]


CONVERTERS = {
    "integer": convert_integer,
    "boolean": convert_boolean,
    "duration": convert_duration,
}


def convert(name, s):
    """
    Apply the <name> converter to <s>. A None <name> returns <s> as-is.
    """
    if name is None:
        return s
    return CONVERTERS[name](s)
