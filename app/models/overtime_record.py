import enum
from sqlalchemy import Column, Integer, Date, Numeric, Enum, ForeignKey, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class OTType(str, enum.Enum):
    REPLACEMENT = "replacement"   # accrued automatically when covering a shift
    NORMAL      = "normal"
    HOLIDAY     = "holiday"
    DAY_OFF     = "day_off"
    NIGHT       = "night"


OT_RATES = {
    OTType.REPLACEMENT: 1.5,
    OTType.NORMAL:      1.5,
    OTType.HOLIDAY:     2.0,
    OTType.DAY_OFF:     2.0,
    OTType.NIGHT:       2.0,
}

OT_LABELS = {
    OTType.REPLACEMENT: "Replacement OT (150%)",
    OTType.NORMAL:      "Normal OT (150%)",
    OTType.HOLIDAY:     "Holiday OT (200%)",
    OTType.DAY_OFF:     "Day-off OT (200%)",
    OTType.NIGHT:       "Night OT (200%)",
}


class OvertimeRecord(Base):
    __tablename__ = "overtime_records"

    id        = Column(Integer, primary_key=True, index=True)
    driverId  = Column(Integer, ForeignKey("drivers.id", ondelete="CASCADE"), nullable=False, index=True)
    date      = Column(Date, nullable=False, index=True)
    hours     = Column(Numeric(6, 2), nullable=False)
    otType    = Column(Enum(OTType, name="ot_type", values_callable=lambda e: [m.value for m in e]),
                       nullable=False)
    otRate    = Column(Numeric(3, 2), nullable=False, default=1.5)
    createdAt = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updatedAt = Column(TIMESTAMP(timezone=True), server_default=func.now(),
                       onupdate=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    driver = relationship("Driver", back_populates="overtime_records")

    @property
    def total(self) -> float:
        return round(float(self.hours) * float(self.otRate), 2)

    def __repr__(self):
        return f"<OvertimeRecord id={self.id} driverId={self.driverId} date={self.date} hours={self.hours} type={self.otType}>"
