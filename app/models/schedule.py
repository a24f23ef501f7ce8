from sqlalchemy import Column, Integer, Boolean, Date, Text, ForeignKey, TIMESTAMP, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Schedule(Base):
    __tablename__ = "schedules"
    __table_args__ = (UniqueConstraint("driverId", "date", name="uq_schedule_driver_date"),)

    id            = Column(Integer, primary_key=True, index=True)
    driverId      = Column(Integer, ForeignKey("drivers.id", ondelete="CASCADE"), nullable=False, index=True)
    date          = Column(Date, nullable=False, index=True)
    isDayOff      = Column(Boolean, default=False, nullable=False)
    isAnnualLeave = Column(Boolean, default=False, nullable=False)
    remark        = Column(Text, nullable=True)
    createdAt     = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updatedAt     = Column(TIMESTAMP(timezone=True), server_default=func.now(),
                           onupdate=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    driver       = relationship("Driver", back_populates="schedules")
    replacements = relationship("Replacement", back_populates="schedule",
                                cascade="all, delete-orphan", passive_deletes=True)

    @property
    def is_absent(self) -> bool:
        return bool(self.isDayOff or self.isAnnualLeave)

    @property
    def status_label(self) -> str:
        if self.isAnnualLeave: return "Annual Leave"
        if self.isDayOff:      return "Day Off"
        return "Working"

    def __repr__(self):
        return f"<Schedule id={self.id} driverId={self.driverId} date={self.date} off={self.isDayOff} al={self.isAnnualLeave}>"
