from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel


class HealthCheckResponse(BaseModel):
    status: str
    now: datetime
    uptime_seconds: float
    db_ok: bool
    scheduler_running: bool
    requests_count: int
    extra: Optional[Dict[str, Any]] = None
