from datetime import datetime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import Integer, String, Boolean, TIMESTAMP, BigInteger, Float, CheckConstraint, func

CONNECTION_STATES = ("connected", "disconnected", "error")

class Base(DeclarativeBase):
    pass

class SensorReading(Base):
    __tablename__ = "sensor_readings"
    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    timestamp: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False, index=True)
    temperature: Mapped[float] = mapped_column(Float, nullable=False)
    ph: Mapped[float] = mapped_column(Float, nullable=False)
    tds_level: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

class SystemStatus(Base):
    __tablename__ = "system_status"
    __table_args__ = (
        CheckConstraint(
            "connection_status IN ('connected', 'disconnected', 'error')",
            name="ck_system_status_connection_status",
        ),
    )
    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    connection_status: Mapped[str] = mapped_column(String(16), nullable=False)
    last_update: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
    data_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    cpu_usage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    memory_usage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    storage_usage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    uptime: Mapped[str] = mapped_column(String(32), nullable=False, default="0d 0h 0m")

class AlertSettings(Base):
    __tablename__ = "alert_settings"
    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    temperature_alerts: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    ph_alerts: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    tds_level_alerts: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
