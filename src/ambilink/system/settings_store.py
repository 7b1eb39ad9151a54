"""Read-only access to the bridge helper's settings file.

The helper keeps its light groups and named static colors in an XML file
next to its executable::

    <Settings>
      <LedLocation><Location>Living room</Location></LedLocation>
      <LedStaticColor><Name>Warm white</Name></LedStaticColor>
    </Settings>
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

logger = logging.getLogger(__name__)


class HelperSettingsStore:
    """Lists group and static color names from the helper settings."""

    def __init__(self, path: Path | None):
        self._path = path

    @property
    def path(self) -> Path | None:
        return self._path

    def _read_names(self, element: str, child: str, what: str) -> list[str]:
        if self._path is None or not self._path.is_file():
            logger.debug(f"No helper settings at {self._path}, no {what}")
            return []

        try:
            root = ET.parse(self._path).getroot()
        except (ET.ParseError, OSError) as e:
            logger.error(f"Error during reading {what} config: {e}")
            return []

        names = []
        for node in root.iter(element):
            value = node.find(f".//{child}")
            if value is not None and value.text:
                names.append(value.text.strip())
        return names

    def load_groups(self) -> list[str]:
        """Names of the configured light groups."""
        return self._read_names("LedLocation", "Location", "group")

    def load_static_colors(self) -> list[str]:
        """Names of the configured static colors."""
        return self._read_names("LedStaticColor", "Name", "static color")
