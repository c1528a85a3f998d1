"""
XML rendering of the score view, for broadcast overlays that poll an XML feed.
"""
from typing import Any, Dict
from xml.sax.saxutils import escape

_ENTITIES = {"'": "&apos;", '"': "&quot;"}


def _text(value: Any) -> str:
    if value is None:
        return ""
    return escape(str(value), _ENTITIES)


def render_score_xml(score_view: Dict[str, Any], last_updated: str = "") -> str:
    """
    Render a score view (see build_score_view) as an XML document.

    Args:
        score_view: Output of build_score_view
        last_updated: ISO timestamp stamped by the caller

    Returns:
        XML string with a <match> root and one <player> per table row
    """
    is_doubles = "true" if score_view.get("isDoubles") else "false"
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        "<match>",
        f"  <matchId>{_text(score_view.get('matchId'))}</matchId>",
        f"  <lastUpdated>{_text(last_updated)}</lastUpdated>",
        f"  <matchStatus>{_text(score_view.get('matchStatus'))}</matchStatus>",
        f"  <isDoubles>{is_doubles}</isDoubles>",
        "  <players>",
    ]
    for index, row in enumerate(score_view.get("tableData", []), start=1):
        lines.extend([
            f'    <player id="{index}">',
            f"      <playerName>{_text(row.get('playerName'))}</playerName>",
            f"      <teamName>{_text(row.get('teamName'))}</teamName>",
            f"      <teamLogoUrl>{_text(row.get('teamLogoUrl'))}</teamLogoUrl>",
            f"      <points>{_text(row.get('points'))}</points>",
            f"      <serve>{_text(row.get('serve'))}</serve>",
            "    </player>",
        ])
    lines.extend(["  </players>", "</match>"])
    return "\n".join(lines)
