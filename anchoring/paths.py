"""Conversion between elements and root-relative element paths.

Paths take the simple form ``/tag[n]/tag[n]``: lowercase local tag names with
1-based positions among same-named element siblings. The root itself is the
empty path. Paths that are not in the simple form are evaluated as XPath
relative to the root.
"""

from __future__ import annotations

import re

from lxml import etree

from anchoring.document import is_element

__all__ = ["element_from_xpath", "local_name", "xpath_from_element"]

# One /tag[n] step of a simple path
SIMPLE_STEP = re.compile(r"/([A-Za-z0-9_.:-]+)\[([1-9][0-9]*)\]")
SIMPLE_PATH = re.compile(rf"^(?:{SIMPLE_STEP.pattern})*$")


def local_name(element: etree._Element) -> str:
    """Lowercase tag name without namespace."""
    return etree.QName(element).localname.lower()


def xpath_from_element(element: etree._Element, root: etree._Element) -> str:
    """Build the path of ``element`` relative to ``root``.

    Raises:
        ValueError: If ``element`` is not ``root`` or one of its descendants
    """
    steps: list[str] = []
    node = element
    while node is not root:
        parent = node.getparent()
        if parent is None:
            raise ValueError("element is not a descendant of the root")
        name = local_name(node)
        position = 1
        for sibling in node.itersiblings(preceding=True):
            if is_element(sibling) and local_name(sibling) == name:
                position += 1
        steps.append(f"/{name}[{position}]")
        node = parent
    return "".join(reversed(steps))


def element_from_xpath(path: str, root: etree._Element) -> etree._Element | None:
    """Find the element a path refers to, or None when nothing matches.

    Raises:
        etree.XPathError: If a non-simple path is not valid XPath
    """
    if SIMPLE_PATH.match(path):
        return _walk_simple_path(path, root)

    result = root.xpath("." + path if path.startswith("/") else path)
    if isinstance(result, list):
        for item in result:
            if isinstance(item, etree._Element) and is_element(item):
                return item
    return None


def _walk_simple_path(path: str, root: etree._Element) -> etree._Element | None:
    node = root
    for name, position in SIMPLE_STEP.findall(path):
        name = name.lower()
        remaining = int(position)
        found = None
        for child in node:
            if is_element(child) and local_name(child) == name:
                remaining -= 1
                if remaining == 0:
                    found = child
                    break
        if found is None:
            return None
        node = found
    return node
