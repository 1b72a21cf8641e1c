from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional


@dataclass
class ArticleStatistics:
    total_count: int
    source_counts: Dict[str, int]
    today_count: int
    latest_created_at: Optional[datetime]
