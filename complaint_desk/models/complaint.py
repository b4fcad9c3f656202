
from datetime import datetime, timezone
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, ForeignKey, Enum as SQLEnum,
)
from sqlalchemy.orm import relationship
from complaint_desk.db.base import Base

from complaint_desk.models.enums import ComplaintStatusEnum, PriorityEnum


class Complaint(Base):
    """Filed issue; aggregate root for its comments and attachments"""
    __tablename__ = 'complaints'
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category_id = Column(Integer, ForeignKey('categories.id', ondelete='RESTRICT'), nullable=False, index=True)

    reporter_id = Column(Integer, ForeignKey('users.id', ondelete='RESTRICT'), nullable=False, index=True, comment="User who filed the complaint")
    assigned_to_id = Column(Integer, ForeignKey('users.id', ondelete='SET NULL'), index=True, comment="STAFF or ADMIN handling the complaint")
    status = Column(SQLEnum(ComplaintStatusEnum, name='complaint_status_enum'), nullable=False, default=ComplaintStatusEnum.OPEN, index=True)
    priority = Column(SQLEnum(PriorityEnum, name='priority_enum'), nullable=False, default=PriorityEnum.MEDIUM, index=True)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc), index=True)
    updated_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
    resolved_at = Column(DateTime)
    
    # Relationships
    category = relationship("Category", back_populates="complaints")
    reporter = relationship("User", foreign_keys=[reporter_id], back_populates="reported_complaints")
    assigned_to = relationship("User", foreign_keys=[assigned_to_id], back_populates="assigned_complaints")
    comments = relationship(
        "Comment", back_populates="complaint", cascade="all, delete-orphan",
        order_by="[Comment.created_at, Comment.id]",
    )
    attachments = relationship("Attachment", back_populates="complaint", cascade="all, delete-orphan")
    
    def __repr__(self):
        return f"<Complaint(id={self.id}, title='{self.title}', status='{self.status}')>"
