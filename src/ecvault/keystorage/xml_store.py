"""A name/value store persisted as a small XML document.

Document layout::

    <?xml version='1.0' encoding='utf-8'?>
    <values>
      <pair>
        <name>public</name>
        <value>...</value>
      </pair>
    </values>

Names and values must be text that XML 1.0 can carry. Carriage returns do
not survive an XML parser, so ``\\r\\n`` and lone ``\\r`` are stored as ``\\n``.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from pathlib import Path

from ..errors import KeyStorageError

logger = logging.getLogger("ecvault")

XML_ROOT = "values"
XML_PAIR = "pair"
XML_NAME = "name"
XML_VALUE = "value"

_INVALID_XML_CHARS = re.compile("[^\t\n\r\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")
_CARRIAGE_RETURN = re.compile("\r\n?")


def check_text(text: str) -> str:
    """Return ``text`` with line breaks normalized to ``\\n``.

    Raises:
        ValueError: If ``text`` holds a character XML 1.0 does not allow.
    """
    match = _INVALID_XML_CHARS.search(text)
    if match is not None:
        raise ValueError(
            f"Character {match.group()!r} at position {match.start()} cannot be stored in XML"
        )
    return _CARRIAGE_RETURN.sub("\n", text)


class XmlStore:
    """In-memory name/value pairs with whole-document load and persist."""

    def __init__(self, pairs: Mapping[str, str] | None = None) -> None:
        self._pairs: dict[str, str] = {}
        for name, value in (pairs or {}).items():
            self.put(name, value)

    def put(self, name: str, value: str) -> str | None:
        """Set ``name`` to ``value`` and return the previous value, if any.

        Raises:
            ValueError: If either is None or holds a character XML cannot carry.
        """
        if name is None:
            raise ValueError("name must not be None")
        if value is None:
            raise ValueError("value must not be None")
        name = check_text(name)
        previous = self._pairs.get(name)
        self._pairs[name] = check_text(value)
        return previous

    def get(self, name: str) -> str | None:
        if name is None:
            raise ValueError("name must not be None")
        return self._pairs.get(name)

    def names(self) -> set[str]:
        return set(self._pairs)

    def items(self) -> dict[str, str]:
        return dict(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    @classmethod
    def load(cls, path: str | os.PathLike[str]) -> XmlStore:
        """Read a store from an XML file.

        Raises:
            KeyStorageError: If the file cannot be read or is not a valid store document.
        """
        try:
            root = ET.parse(path).getroot()
        except (OSError, ET.ParseError) as e:
            raise KeyStorageError(f"Failed to read keystore {path}: {e}") from e

        if root.tag != XML_ROOT:
            raise KeyStorageError(f"Unexpected root element <{root.tag}> in {path}")

        store = cls()
        for pair in root.findall(XML_PAIR):
            name = pair.find(XML_NAME)
            value = pair.find(XML_VALUE)
            if name is None or value is None:
                raise KeyStorageError(f"Incomplete name/value pair in {path}")
            store.put(name.text or "", value.text or "")
        logger.debug("Loaded %d entries from %s", len(store), path)
        return store

    def to_element(self) -> ET.Element:
        root = ET.Element(XML_ROOT)
        for name in sorted(self._pairs):
            pair = ET.SubElement(root, XML_PAIR)
            ET.SubElement(pair, XML_NAME).text = name
            ET.SubElement(pair, XML_VALUE).text = self._pairs[name]
        ET.indent(root, space="  ")
        return root

    def persist(self, path: str | os.PathLike[str]) -> None:
        """Write the store to ``path``, replacing any existing file atomically.

        Raises:
            KeyStorageError: If the file cannot be written.
        """
        target = Path(path)
        tree = ET.ElementTree(self.to_element())
        tmp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "wb", dir=target.parent or ".", prefix=f".{target.name}.", delete=False
            ) as tmp:
                tmp_name = tmp.name
                tree.write(tmp, encoding="utf-8", xml_declaration=True)
                tmp.write(b"\n")
            os.replace(tmp_name, target)
            tmp_name = None
        except OSError as e:
            raise KeyStorageError(f"Failed to write keystore {target}: {e}") from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
        logger.debug("Wrote %d entries to %s", len(self), target)
