from __future__ import annotations

from xml.sax.saxutils import escape, quoteattr

from src.domain.models.catalog import Line, Pattern, Shape
from src.domain.models.itinerary import direction_label

GPX_NAMESPACE = "http://www.topografix.com/GPX/1/1"
GPX_MEDIA_TYPE = "application/gpx+xml"
DEFAULT_CREATOR = "LineTrack"


def _coord(value: float | str) -> str:
    return quoteattr(str(value))


def build_gpx(
    pattern: Pattern,
    shape: Shape,
    *,
    include_stops: bool = False,
    creator: str = DEFAULT_CREATOR,
) -> str:
    """Render a pattern as a GPX 1.1 document.

    Shape coordinates are GeoJSON (lon, lat); GPX wants lat/lon attributes.
    Values are written as given, without range checks.
    """

    name = escape(pattern.display_name)
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<gpx version="1.1" creator={quoteattr(creator)} xmlns="{GPX_NAMESPACE}">',
        "  <metadata>",
        f"    <name>{name}</name>",
        "  </metadata>",
    ]

    if include_stops:
        for visit in pattern.path:
            if not visit.has_coordinates:
                continue
            lines.append(f"  <wpt lat={_coord(visit.lat)} lon={_coord(visit.lon)}>")
            lines.append(f"    <name>{escape(visit.name)}</name>")
            lines.append(f"    <desc>Stop Sequence: {visit.stop_sequence}</desc>")
            lines.append("  </wpt>")

    lines.append("  <trk>")
    lines.append(f"    <name>{name} ({direction_label(pattern.direction)})</name>")
    lines.append("    <trkseg>")
    for lon, lat in shape.coordinates:
        lines.append(f"      <trkpt lat={_coord(lat)} lon={_coord(lon)}></trkpt>")
    lines.append("    </trkseg>")
    lines.append("  </trk>")
    lines.append("</gpx>")

    return "\n".join(lines)


def gpx_filename(pattern: Pattern, line: Line | None = None) -> str:
    prefix = line.short_name if line is not None else pattern.line_id
    return f"{prefix}_{pattern.id}.gpx"
