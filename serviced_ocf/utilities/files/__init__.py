import os
import tempfile


def makedirs(path, mode=None):
    """
    Wraps os.makedirs with a more restrictive 755 mode and ignore
    already exists errors.
    """
    if not path:
        return
    try:
        mode = mode or 0o755
        os.makedirs(path, mode)
    except OSError as exc:
        if exc.errno == 17:
            pass
        else:
            raise


def read_lines(path):
    """
    Return the lines of <path>, or None if the file does not exist.
    """
    try:
        with open(path, "r") as ofile:
            return ofile.read().splitlines()
    except IOError as exc:
        if exc.errno == 2:
            return
        raise


def write_atomic(path, buff):
    """
    Replace <path> content with <buff>, so concurrent readers see either
    the old or the new content. The file mode is preserved.
    """
    dirname = os.path.dirname(path) or "."
    try:
        mode = os.stat(path).st_mode & 0o7777
    except OSError:
        mode = 0o644
    fd, tmpf = tempfile.mkstemp(prefix=".%s." % os.path.basename(path), dir=dirname)
    try:
        with os.fdopen(fd, "w") as ofile:
            ofile.write(buff)
        os.chmod(tmpf, mode)
        os.rename(tmpf, path)
    except Exception:
        if os.path.exists(tmpf):
            os.unlink(tmpf)
        raise
