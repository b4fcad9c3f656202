from datetime import datetime, timezone
from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, Enum as SQLEnum,
)
from sqlalchemy.orm import relationship
from complaint_desk.db.base import Base

from complaint_desk.models.enums import RoleEnum

class User(Base):
    """Accounts with role-based access control"""
    __tablename__ = 'users'
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(SQLEnum(RoleEnum, name='role_enum'), nullable=False, default=RoleEnum.USER, index=True)
    department_id = Column(Integer, ForeignKey('departments.id', ondelete='SET NULL'), index=True, comment="Relevant for STAFF")
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
    
    # Relationships
    department = relationship("Department", back_populates="members")
    reported_complaints = relationship("Complaint", foreign_keys="Complaint.reporter_id", back_populates="reporter")
    assigned_complaints = relationship("Complaint", foreign_keys="Complaint.assigned_to_id", back_populates="assigned_to")
    comments = relationship("Comment", back_populates="author")
    
    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
