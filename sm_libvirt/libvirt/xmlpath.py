"""Pull a single text value out of a libvirt XML descriptor."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import List, Sequence

from .errors import XmlPathNotFoundError

logger = logging.getLogger(__name__)

# Innermost tag first: <volume><target><path>...</path></target></volume>
VOLUME_TARGET_PATH = ["path", "target", "volume"]


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def read_xml_path(xml_desc: str, path: Sequence[str]) -> str:
    """Return the text of the first element whose ancestry matches ``path``.

    ``path`` lists tags innermost first, i.e. the element's own tag followed by
    its ancestors up to the document root. Attributes are ignored and the
    document is not validated beyond what is needed to reach the match.
    """
    wanted = list(path)
    stack: List[str] = []
    parser = ET.XMLPullParser(events=("start", "end"))
    parser.feed(xml_desc)

    try:
        for event, element in parser.read_events():
            if event == "start":
                stack.insert(0, _local_name(element.tag))
                continue
            if stack == wanted and element.text is not None:
                return element.text
            stack.pop(0)
        parser.close()
    except ET.ParseError as exc:
        logger.debug("Descriptor ended before %s was found: %s", wanted, exc)
        raise XmlPathNotFoundError(wanted) from exc

    raise XmlPathNotFoundError(wanted)
