"""
GPX Export

Builds GPX 1.1 documents from recorded track points.
"""

import logging
import re
from datetime import datetime
from typing import Optional, Sequence
from xml.sax.saxutils import escape, unescape

import gpxpy
import gpxpy.gpx

from survey_api.config import settings
from survey_api.shared.timeutils import as_utc

logger = logging.getLogger(__name__)

GPX_CONTENT_TYPE = "application/gpx+xml"

# gpxpy escapes & < > only
QUOTE_ENTITIES = {"'": "&apos;", '"': "&quot;"}
_QUOTE_REFERENCES = {"&apos;": "'", "&quot;": '"', "&#39;": "'", "&#34;": '"'}
_NAME_ELEMENT = re.compile(r"<name>(.*?)</name>", re.DOTALL)


def escape_text(value: str) -> str:
    """Escape all five XML special characters."""
    return escape(value, QUOTE_ENTITIES)


def _escape_names(xml: str) -> str:
    def rewrite(match: re.Match) -> str:
        text = unescape(match.group(1), _QUOTE_REFERENCES)
        return f"<name>{escape_text(text)}</name>"

    return _NAME_ELEMENT.sub(rewrite, xml)


class GPXExportService:
    """Service for building GPX documents."""

    @staticmethod
    def build(
        project_name: str,
        points: Sequence,
        exported_at: Optional[datetime] = None,
        creator: Optional[str] = None,
    ) -> gpxpy.gpx.GPX:
        """
        Build a GPX object with one track and one segment.

        Args:
            project_name: Used for the metadata and track names
            points: TrackPoint rows ordered by recorded_at
            exported_at: Metadata time
            creator: GPX creator attribute

        Returns:
            gpxpy GPX object
        """
        gpx = gpxpy.gpx.GPX()
        gpx.creator = creator or settings.gpx_creator
        gpx.name = f"{project_name} Track"
        gpx.time = as_utc(exported_at)

        track = gpxpy.gpx.GPXTrack(name=project_name)
        segment = gpxpy.gpx.GPXTrackSegment()
        track.segments.append(segment)
        gpx.tracks.append(track)

        for point in points:
            segment.points.append(
                gpxpy.gpx.GPXTrackPoint(
                    latitude=point.latitude,
                    longitude=point.longitude,
                    elevation=point.elevation,
                    time=as_utc(point.recorded_at),
                    horizontal_dilution=point.accuracy,  # written as <hdop>
                )
            )

        return gpx

    @staticmethod
    def to_xml(
        project_name: str,
        points: Sequence,
        exported_at: Optional[datetime] = None,
        creator: Optional[str] = None,
    ) -> str:
        """
        Serialize points as a GPX 1.1 document.

        Names are escaped for & < > ' " and times carry a Z suffix.
        """
        gpx = GPXExportService.build(project_name, points, exported_at, creator)
        xml = _escape_names(gpx.to_xml(version="1.1"))
        logger.debug(f"Exported {len(points)} points for '{project_name}'")
        return xml

    @staticmethod
    def filename(project_name: str, track_id: Optional[str] = None) -> str:
        """Attachment filename for a download."""
        safe = "".join(c if c.isalnum() or c in "-_" else "_" for c in project_name).strip("_")
        stem = safe or "project"
        if track_id:
            stem = f"{stem}_track_{track_id[:8]}"
        return f"{stem}.gpx"
