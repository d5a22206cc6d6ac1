from lxml import etree


def xmlstring(root):
    if isinstance(root, str):
        return root
    if isinstance(root, bytes):
        return root.decode("utf-8", errors="replace")
    if hasattr(root, "xmlelement"):
        root = root.xmlelement()
    try:
        return etree.tostring(root, pretty_print=True).decode("utf-8")
    except TypeError:
        return str(root)


def hexdump(data: bytes, width: int = 16) -> str:
    """Render bytes the way curl --trace does: offset, hex, printable chars"""
    lines = []
    for offset in range(0, len(data), width):
        chunk = data[offset : offset + width]
        hexpart = " ".join("%02x" % b for b in chunk)
        textpart = "".join(chr(b) if 0x20 <= b < 0x7F else "." for b in chunk)
        lines.append("%04x: %-*s %s" % (offset, width * 3 - 1, hexpart, textpart))
    return "\n".join(lines)
