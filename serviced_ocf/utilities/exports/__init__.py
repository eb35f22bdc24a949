"""
Scrub entries from the line-oriented nfs export table.

An entry references a path when its first field, the exported directory,
is the path itself or a directory below it.
"""
from serviced_ocf.utilities.files import read_lines, write_atomic
from serviced_ocf.utilities.string import unescape_octal


def entry_path(line):
    words = line.split()
    if not words or words[0].startswith("#"):
        return
    return unescape_octal(words[0])


def references(line, prefix):
    path = entry_path(line)
    if path is None:
        return False
    prefix = prefix.rstrip("/")
    path = path.rstrip("/")
    return path == prefix or path.startswith(prefix + "/")


def scrub(table, prefix, log=None):
    """
    Remove from <table> the entries referencing the <prefix> directory.

    A missing table has nothing to scrub. Return the list of removed
    lines.
    """
    lines = read_lines(table)
    if lines is None:
        if log:
            log.info("export table %s does not exist, nothing to scrub", table)
        return []
    kept = []
    removed = []
    for line in lines:
        if references(line, prefix):
            removed.append(line)
        else:
            kept.append(line)
    if not removed:
        if log:
            log.info("no %s entry in export table %s", prefix, table)
        return removed
    buff = "\n".join(kept)
    if kept:
        buff += "\n"
    write_atomic(table, buff)
    if log:
        for line in removed:
            log.info("scrubbed from %s: %s", table, line)
    return removed
