from datetime import datetime
from typing import Optional, Any, Literal
from pydantic import BaseModel, Field, AliasChoices, ConfigDict

class ReadingCreate(BaseModel):
    temperature: float = Field(validation_alias=AliasChoices("temperature", "temp"))
    ph: float = Field(validation_alias=AliasChoices("ph", "pH"))
    tds_level: float = Field(validation_alias=AliasChoices("tds_level", "tdsLevel", "tds", "TDS"))

class ReadingOut(BaseModel):
    id: int
    timestamp: datetime
    temperature: float
    ph: float
    tds_level: float
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)

class SystemStatusOut(BaseModel):
    id: str
    connection_status: Literal["connected", "disconnected", "error"]
    last_update: datetime
    data_points: int = 0
    cpu_usage: int = 0
    memory_usage: int = 0
    storage_usage: int = 0
    uptime: str = "0d 0h 0m"
    model_config = ConfigDict(from_attributes=True)

class AlertSettingsUpdate(BaseModel):
    temperature_alerts: Optional[bool] = Field(default=None, validation_alias=AliasChoices("temperature_alerts", "temperatureAlerts"))
    ph_alerts: Optional[bool] = Field(default=None, validation_alias=AliasChoices("ph_alerts", "phAlerts"))
    tds_level_alerts: Optional[bool] = Field(default=None, validation_alias=AliasChoices("tds_level_alerts", "tdsLevelAlerts"))

class AlertSettingsOut(BaseModel):
    id: str
    temperature_alerts: bool
    ph_alerts: bool
    tds_level_alerts: bool
    model_config = ConfigDict(from_attributes=True)

class SyncOut(BaseModel):
    success: bool = True
    reading: ReadingOut
    source: str
    uncalibrated: bool = False
    warnings: list[dict[str, Any]] = []
    alerts: list[dict[str, Any]] = []
    triggered_by: Optional[str] = None
    timestamp: Optional[datetime] = None
