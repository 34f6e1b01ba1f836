"""Reading controller details and contents from a controller directory."""

from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
from collections import deque
from pathlib import Path

from workspace_analyser.models.controller import ContentItem, ControllerDetails

log = logging.getLogger(__name__)

NOT_FOUND = "not found"
XML_ERROR = "error reading XML"
NO_COMPILE_FILE = "no compile file found"

_LDOPEN = Path("upl") / "ldopen.xml"
_COMPILE_FILE = "neuueber.txt"


def get_controller_details(path: Path | str) -> ControllerDetails:
    """Collect macro counts, hardware info and compile state of a controller.

    A ``.utf`` file counts as a macro when a ``.u`` file with the same stem
    sits next to it, and as an FUP sheet otherwise.
    """
    controller = Path(path)
    details = ControllerDetails(path=controller)

    for utf_file in controller.glob("*.utf"):
        if utf_file.with_suffix(".u").exists():
            details.macro_count += 1
        else:
            details.fup_sheet_count += 1

    _read_ldopen(controller / _LDOPEN, details)

    compile_file = controller / _COMPILE_FILE
    details.compiled = compile_file.is_file()
    if details.compiled:
        details.compile_text = _last_lines(compile_file, 2)
    else:
        details.compile_text = NO_COMPILE_FILE

    return details


def _read_ldopen(ldopen: Path, details: ControllerDetails) -> None:
    if not ldopen.is_file():
        return
    try:
        root = ET.parse(ldopen).getroot()
    except (ET.ParseError, OSError) as e:
        log.warning("Could not read %s: %s", ldopen, e)
        details.hardware_type = XML_ERROR
        return
    details.hardware_type = _child_text(root, "HardwareType")
    details.cp_version = _child_text(root, "Version")
    details.ip_address = _child_text(root, "IP")


def _child_text(root: ET.Element, tag: str) -> str:
    element = root.find(tag)
    if element is None:
        return NOT_FOUND
    return "".join(element.itertext())


def _last_lines(path: Path, count: int) -> str:
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            lines = deque((line.rstrip("\r\n") for line in f), maxlen=count)
    except OSError as e:
        log.warning("Could not read %s: %s", path, e)
        return ""
    return "\n".join(lines)


def list_controller_contents(path: Path | str, filter_text: str = "") -> list[ContentItem]:
    """List every file and directory under a controller.

    Entries are sorted by relative path.  A non-empty *filter_text* keeps
    only entries whose relative path contains it, ignoring case.
    """
    root = Path(path)
    if not root.is_dir():
        return []

    items: list[ContentItem] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        for name in dirnames:
            full = Path(dirpath) / name
            items.append(ContentItem(os.path.relpath(full, root), full, is_dir=True))
        for name in filenames:
            full = Path(dirpath) / name
            items.append(ContentItem(os.path.relpath(full, root), full))

    needle = filter_text.strip().casefold()
    if needle:
        items = [i for i in items if needle in i.relative_path.casefold()]
    items.sort(key=lambda i: i.relative_path)
    return items


def _log_walk_error(error: OSError) -> None:
    log.debug("Cannot read directory: %s", error.filename)
