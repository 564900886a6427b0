"""Extract outlet cards from assistant markdown.

The backend answers location queries with blocks like::

    1. **Outlet Name** (0.84 km away)
    **Address:** 1 Jalan Example, Kuala Lumpur
    **Operating Hours:** 24 hours
    **Waze Link:** https://waze.com/ul?ll=3.15,101.71

Each block becomes an :class:`OutletInfo`; blocks without a name and an
address are skipped.
"""

from __future__ import annotations

import logging
import re

from pyoutlets.models.outlet import OutletInfo

_logger = logging.getLogger(__name__)

_LABELS = r"(?:Address|Distance|Operating Hours|Waze Link|Navigation Link|Hours)"

_BLOCK_START = re.compile(
    rf"^[ \t]*(?:\d+\.[ \t]*)?\*\*(?!{_LABELS}:?\*\*)(?P<name>[^*\n]+?)\*\*",
    re.MULTILINE,
)
_NAME_DISTANCE = re.compile(r"\(([^)\n]*km[^)\n]*)\)", re.IGNORECASE)
_ADDRESS = re.compile(r"(?:\*\*)?Address:(?:\*\*)?[ \t]*(?P<value>[^\n]+)", re.IGNORECASE)
_DISTANCE = re.compile(r"(?:\*\*)?Distance:(?:\*\*)?[ \t]*(?P<value>[^\n*]+)", re.IGNORECASE)
_HOURS = re.compile(r"(?:\*\*)?Operating Hours:(?:\*\*)?[ \t]*(?P<value>[^\n]+)", re.IGNORECASE)
_LINK = re.compile(r"(?:\*\*)?(?:Waze|Navigation) Link:(?:\*\*)?[ \t]*(?P<value>https?://\S+)", re.IGNORECASE)
_WAZE_URL = re.compile(r"(?P<value>https?://\S*waze\S*)", re.IGNORECASE)
_TRAILING_FIELDS = re.compile(r"\s*(?:\*\*)?(?:Operating Hours|Waze Link|Navigation Link):.*$", re.IGNORECASE)


def _search(pattern: re.Pattern[str], block: str) -> str:
    match = pattern.search(block)
    return match.group("value").strip() if match else ""


def is_outlet_message(text: str) -> bool:
    return bool(_BLOCK_START.search(text)) and "address:" in text.lower()


def _parse_block(block: str, name: str) -> OutletInfo | None:
    first_line = block.split("\n", 1)[0]
    name_distance = _NAME_DISTANCE.search(first_line)

    address = _TRAILING_FIELDS.sub("", _search(_ADDRESS, block)).strip()
    if not name or not address:
        return None

    distance = _search(_DISTANCE, block)
    if not distance and name_distance:
        distance = name_distance.group(1).strip()

    hours = _TRAILING_FIELDS.sub("", _search(_HOURS, block).replace("**", "")).strip()
    link = _search(_LINK, block) or _search(_WAZE_URL, block)

    return OutletInfo(
        name=name,
        address=address,
        distance=distance,
        operating_hours=hours,
        navigation_link=link.rstrip(").,"),
    )


def parse_outlet_info(text: str) -> list[OutletInfo] | None:
    """Return the outlet cards found in *text*, or ``None`` if there are none."""
    if not is_outlet_message(text):
        return None

    starts = list(_BLOCK_START.finditer(text))
    outlets: list[OutletInfo] = []
    for position, match in enumerate(starts):
        end = starts[position + 1].start() if position + 1 < len(starts) else len(text)
        block = text[match.start() : end]
        info = _parse_block(block, match.group("name").strip().rstrip(":"))
        if info is not None:
            outlets.append(info)

    _logger.debug("Parsed %d outlet cards from message", len(outlets))
    return outlets or None
