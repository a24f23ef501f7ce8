from sqlalchemy import Column, Integer, String, Boolean, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class User(Base):
    __tablename__ = "users"

    id        = Column(Integer, primary_key=True, index=True)
    username  = Column(String(100), unique=True, nullable=False, index=True)
    name      = Column(String(150), nullable=False)
    password  = Column(String(255), nullable=False)
    isActive  = Column(Boolean, default=True, nullable=False)
    createdAt = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updatedAt = Column(TIMESTAMP(timezone=True), server_default=func.now(),
                       onupdate=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    refresh_tokens = relationship("RefreshToken", back_populates="user", cascade="all, delete-orphan")
    audit_logs     = relationship("AuditLog", back_populates="user")

    def __repr__(self):
        return f"<User id={self.id} username={self.username}>"
