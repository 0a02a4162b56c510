"""
ID generation utilities for TalkGraph.

Provides consistent ID generation for stored entities:
- Saved graphs: graph_xxx
- Uploaded files: <milliseconds>_xxx<ext>
"""

import re
import time
from pathlib import PurePath
from uuid import uuid4

_EXTENSION_PATTERN = re.compile(r"^\.[A-Za-z0-9]+$")


def generate_graph_key() -> str:
    """
    Generate unique storage key for a saved graph.

    Returns:
        Key in format "graph_xxx" where xxx is 12 hex characters
    """
    return f"graph_{uuid4().hex[:12]}"


def generate_upload_filename(original_name: str) -> str:
    """
    Generate stored filename for an uploaded file.

    The original extension is kept when it is plain ASCII letters and digits;
    any other extension is dropped so the stored name is always a valid key.

    Args:
        original_name: Name of the file as uploaded by the user

    Returns:
        Filename in format "<milliseconds>_xxx<ext>" where xxx is 6 hex characters
    """
    extension = PurePath(original_name).suffix
    if not _EXTENSION_PATTERN.match(extension):
        extension = ""
    return f"{int(time.time() * 1000)}_{uuid4().hex[:6]}{extension}"
