from datetime import datetime

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship

from config.db import Base

ROLE_CUSTOMER = "customer"
ROLE_ADMIN = "admin"

ROLE_IDS = {
    ROLE_CUSTOMER: 1,
    ROLE_ADMIN: 2,
}


class Role(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True)
    name = Column(String(50), nullable=False, unique=True)

    users = relationship("User", back_populates="role")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    email = Column(String(120), nullable=False, unique=True)
    password = Column(String(200), nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    role = relationship("Role", back_populates="users", lazy="joined")

    @property
    def role_name(self):
        return self.role.name if self.role else None

    def to_summary(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
        }

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role_name,
        }
