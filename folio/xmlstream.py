from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from lxml import etree

from .errors import DocumentParseFailure

_CHUNK_SIZE = 64 * 1024


def local_name(name: str) -> str:
    if name.startswith("{"):
        name = name.rsplit("}", 1)[-1]
    if ":" in name:
        name = name.rsplit(":", 1)[-1]
    return name


class XmlHandler:
    """Start, text and end events for one document, names without namespaces."""

    def on_start(self, name: str, attrs: Dict[str, str]) -> None:
        pass

    def on_text(self, text: str) -> None:
        pass

    def on_end(self, name: str) -> None:
        pass

    def result(self) -> Any:
        return None

    # lxml parser-target protocol

    def start(self, tag: str, attrib: Dict[str, str]) -> None:
        attrs = {local_name(str(key)): str(value) for key, value in attrib.items()}
        self.on_start(local_name(str(tag)), attrs)

    def data(self, text: str) -> None:
        self.on_text(text)

    def end(self, tag: str) -> None:
        self.on_end(local_name(str(tag)))

    def close(self) -> Any:
        return self.result()


def parse_xml(path: Path, handler: XmlHandler, stage: str) -> Any:
    parser = etree.XMLParser(target=handler, no_network=True, load_dtd=False)
    try:
        with open(path, "rb") as fh:
            while True:
                chunk = fh.read(_CHUNK_SIZE)
                if not chunk:
                    break
                parser.feed(chunk)
        return parser.close()
    except OSError as exc:
        raise DocumentParseFailure(stage, path, str(exc)) from exc
    except etree.XMLSyntaxError as exc:
        raise DocumentParseFailure(stage, path, str(exc)) from exc
