from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from curve2icc.config import DEFAULT_DESCRIPTION
from curve2icc.export.icc_writer import write_profile
from curve2icc.models.tables import ChannelTables

logger = logging.getLogger(__name__)


def write_calibration_profile(
    tables: ChannelTables,
    out_path: str | Path,
    description: str = DEFAULT_DESCRIPTION,
    created: Optional[datetime] = None,
) -> Path:
    """Embed the R, G, B tables unchanged as the vcgt tag of a new monitor profile."""
    logger.info("Writing vcgt profile '%s' to %s", description, out_path)
    out = write_profile(out_path, tables, description, created=created)
    logger.info("Saved %d bytes to %s", out.stat().st_size, out)
    return out
