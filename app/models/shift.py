from sqlalchemy import Column, Integer, String, Boolean, Time, ForeignKey, TIMESTAMP, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Shift(Base):
    __tablename__ = "shifts"

    id        = Column(Integer, primary_key=True, index=True)
    name      = Column(String(100), unique=True, nullable=False)
    startTime = Column(Time, nullable=False)
    endTime   = Column(Time, nullable=False)   # may be earlier than startTime (crosses midnight)
    createdAt = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    drivers = relationship("DriverShift", back_populates="shift",
                           cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Shift id={self.id} name={self.name}>"


class DriverShift(Base):
    __tablename__ = "driver_shifts"
    __table_args__ = (UniqueConstraint("driverId", "shiftId", name="uq_driver_shift"),)

    id        = Column(Integer, primary_key=True, index=True)
    driverId  = Column(Integer, ForeignKey("drivers.id", ondelete="CASCADE"), nullable=False, index=True)
    shiftId   = Column(Integer, ForeignKey("shifts.id", ondelete="CASCADE"), nullable=False)
    isPrimary = Column(Boolean, default=False, nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    driver = relationship("Driver", back_populates="shifts")
    shift  = relationship("Shift", back_populates="drivers")

    def __repr__(self):
        return f"<DriverShift driverId={self.driverId} shiftId={self.shiftId} isPrimary={self.isPrimary}>"
