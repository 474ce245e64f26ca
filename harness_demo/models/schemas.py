# ================================
# FILE: harness_demo/models/schemas.py
# ================================

from pydantic import BaseModel, ConfigDict, Field


class AppInfo(BaseModel):
    """Application info snapshot, computed on every request"""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    version: str
    commit: str = ""
    environment: str
    build_time: str = Field(default="", alias="buildTime")
    uptime: str = Field(..., description="Time since start, truncated to whole seconds")
    hostname: str
