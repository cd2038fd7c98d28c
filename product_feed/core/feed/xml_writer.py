"""
XML Writer for Google Merchant (RSS 2.0) product feeds.
"""

import logging
import re
from typing import Any, Dict, List
from xml.dom import minidom

from .models import FeedItem, FeedOptions


# Google Shopping namespace
G_NS = 'http://base.google.com/ns/1.0'

# Text that would need escaping is wrapped in CDATA instead
_NEEDS_CDATA = re.compile(r'[&<>]')

logger = logging.getLogger(__name__)


def build_rss_tree(items: List[FeedItem], options: FeedOptions) -> Dict[str, Any]:
    """
    Wrap feed items in the RSS envelope.

    Keys starting with ``@`` are attributes; list values become repeated
    elements with the same tag.
    """
    return {
        'rss': {
            '@xmlns:g': G_NS,
            '@version': '2.0',
            'channel': {
                'title': options.title,
                'link': options.link,
                'description': options.description,
                'item': list(items),
            },
        },
    }


def _text_value(value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def _append_text(doc: minidom.Document, elem, text: str, cdata: bool):
    # A CDATA section cannot contain its own terminator
    if cdata and _NEEDS_CDATA.search(text) and ']]>' not in text:
        elem.appendChild(doc.createCDATASection(text))
    else:
        elem.appendChild(doc.createTextNode(text))


def _append_node(doc: minidom.Document, parent, tag: str, value: Any, cdata: bool):
    if isinstance(value, list):
        for entry in value:
            _append_node(doc, parent, tag, entry, cdata)
        return

    elem = doc.createElement(tag)
    parent.appendChild(elem)

    if isinstance(value, dict):
        for key, child in value.items():
            if key.startswith('@'):
                elem.setAttribute(key[1:], _text_value(child))
            else:
                _append_node(doc, elem, key, child, cdata)
    elif value is not None:
        _append_text(doc, elem, _text_value(value), cdata)


def tree_to_xml(tree: Dict[str, Any], cdata: bool = True, pretty: bool = True) -> str:
    """
    Serialize a record tree with exactly one root key to an XML document.

    The document always carries an XML prolog.
    """
    if len(tree) != 1:
        raise ValueError(f"XML tree must have exactly one root element, got {len(tree)}")

    doc = minidom.Document()
    root_tag, root_value = next(iter(tree.items()))
    _append_node(doc, doc, root_tag, root_value, cdata)

    if pretty:
        return doc.toprettyxml(indent='  ', encoding='utf-8').decode('utf-8')
    return doc.toxml(encoding='utf-8').decode('utf-8')


def write_feed_xml(tree: Dict[str, Any], pretty: bool = True) -> str:
    """
    Generate the RSS feed document from an assembled envelope.

    Args:
        tree: Envelope from ``build_rss_tree`` (item keys may carry ``g:``)
        pretty: Indent the output

    Returns:
        XML string with prolog; text needing escapes is CDATA-wrapped
    """
    xml_string = tree_to_xml(tree, cdata=True, pretty=pretty)
    logger.debug(f"Rendered XML feed ({len(xml_string)} chars)")
    return xml_string
