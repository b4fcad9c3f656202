from datetime import datetime, timezone
from sqlalchemy import (
    Column, Integer, String, DateTime,
    BigInteger, ForeignKey, CheckConstraint
)
from sqlalchemy.orm import relationship
from complaint_desk.db.base import Base


class Attachment(Base):
    """Metadata for a file stored by the external file-storage service"""
    __tablename__ = 'attachments'
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    complaint_id = Column(Integer, ForeignKey('complaints.id', ondelete='CASCADE'), nullable=False, index=True)
    original_name = Column(String(255), nullable=False)
    stored_path = Column(String(500), nullable=False, unique=True, comment="Storage reference")
    size_bytes = Column(BigInteger, nullable=False)
    mime_type = Column(String(100))
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    
    # Relationships
    complaint = relationship("Complaint", back_populates="attachments")
    
    # Constraints
    __table_args__ = (
        CheckConstraint('size_bytes > 0', name='check_attachment_size'),
    )
    
    def __repr__(self):
        return f"<Attachment(id={self.id}, name='{self.original_name}', complaint_id={self.complaint_id})>"
