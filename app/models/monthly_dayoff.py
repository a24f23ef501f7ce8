from sqlalchemy import (
    Column, Integer, ForeignKey, TIMESTAMP, UniqueConstraint, CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class MonthlyDayoffPattern(Base):
    __tablename__ = "driver_monthly_dayoff"
    __table_args__ = (
        UniqueConstraint("driverId", "month", "year", name="uq_dayoff_driver_month_year"),
        CheckConstraint("month >= 1 AND month <= 12", name="ck_dayoff_month"),
        CheckConstraint('"dayOfWeek" >= 0 AND "dayOfWeek" <= 6', name="ck_dayoff_day_of_week"),
    )

    id        = Column(Integer, primary_key=True, index=True)
    driverId  = Column(Integer, ForeignKey("drivers.id", ondelete="CASCADE"), nullable=False, index=True)
    month     = Column(Integer, nullable=False)
    year      = Column(Integer, nullable=False)
    dayOfWeek = Column(Integer, nullable=False)   # 0 = Sunday ... 6 = Saturday
    createdAt = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updatedAt = Column(TIMESTAMP(timezone=True), server_default=func.now(),
                       onupdate=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    driver = relationship("Driver", back_populates="dayoff_patterns")

    def __repr__(self):
        return f"<MonthlyDayoffPattern id={self.id} driverId={self.driverId} {self.year}-{self.month:02d} dow={self.dayOfWeek}>"
