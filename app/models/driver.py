from sqlalchemy import Column, Integer, String, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Driver(Base):
    __tablename__ = "drivers"

    id            = Column(Integer, primary_key=True, index=True)
    name          = Column(String(150), nullable=False)
    staffId       = Column(String(50), unique=True, nullable=False, index=True)
    carNumber     = Column(String(50), nullable=True)
    contactNumber = Column(String(30), nullable=True)
    createdAt     = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updatedAt     = Column(TIMESTAMP(timezone=True), server_default=func.now(),
                           onupdate=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    shifts           = relationship("DriverShift", back_populates="driver",
                                    cascade="all, delete-orphan", passive_deletes=True)
    schedules        = relationship("Schedule", back_populates="driver",
                                    cascade="all, delete-orphan", passive_deletes=True)
    overtime_records = relationship("OvertimeRecord", back_populates="driver",
                                    cascade="all, delete-orphan", passive_deletes=True)
    dayoff_patterns  = relationship("MonthlyDayoffPattern", back_populates="driver",
                                    cascade="all, delete-orphan", passive_deletes=True)
    replacements     = relationship("Replacement", back_populates="replacement_driver",
                                    cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Driver id={self.id} staffId={self.staffId}>"
