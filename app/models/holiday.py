from sqlalchemy import Column, Integer, String, Date, TIMESTAMP
from sqlalchemy.sql import func
from app.database import Base


class Holiday(Base):
    __tablename__ = "holidays"

    id        = Column(Integer, primary_key=True, index=True)
    name      = Column(String(150), nullable=False)
    date      = Column(Date, unique=True, nullable=False, index=True)
    createdAt = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Holiday id={self.id} date={self.date} name={self.name}>"
