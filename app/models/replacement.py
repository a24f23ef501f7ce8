from sqlalchemy import Column, Integer, ForeignKey, TIMESTAMP, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Replacement(Base):
    __tablename__ = "replacements"
    # One replacement driver per (schedule, shift)
    __table_args__ = (UniqueConstraint("scheduleId", "shiftId", name="uq_replacement_schedule_shift"),)

    id                  = Column(Integer, primary_key=True, index=True)
    scheduleId          = Column(Integer, ForeignKey("schedules.id", ondelete="CASCADE"), nullable=False, index=True)
    replacementDriverId = Column(Integer, ForeignKey("drivers.id", ondelete="CASCADE"), nullable=False, index=True)
    shiftId             = Column(Integer, ForeignKey("shifts.id", ondelete="CASCADE"), nullable=False)
    createdAt           = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updatedAt           = Column(TIMESTAMP(timezone=True), server_default=func.now(),
                                 onupdate=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    schedule           = relationship("Schedule", back_populates="replacements")
    replacement_driver = relationship("Driver", back_populates="replacements")
    shift              = relationship("Shift")

    def __repr__(self):
        return f"<Replacement id={self.id} scheduleId={self.scheduleId} shiftId={self.shiftId} by={self.replacementDriverId}>"
