def bdecode(buff):
    """
    Convert bytes to string using utf-8, ignoring undecodable bytes.
    """
    if buff is None:
        return buff
    if type(buff) == str:
        return buff
    return buff.decode("utf-8", errors="ignore")


def empty_string(buff):
    b = buff.strip(' ').strip('\n')
    if len(b) == 0:
        return True
    return False


def unescape_octal(buff):
    """
    Decode the \\040-style octal escapes the kernel uses for blanks in the
    mount table and export table fields.
    """
    if "\\" not in buff:
        return buff
    out = ""
    idx = 0
    while idx < len(buff):
        chunk = buff[idx:idx+4]
        if len(chunk) == 4 and chunk[0] == "\\" and chunk[1:].isdigit():
            out += chr(int(chunk[1:], 8))
            idx += 4
            continue
        out += buff[idx]
        idx += 1
    return out
