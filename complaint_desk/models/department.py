from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from complaint_desk.db.base import Base


class Department(Base):
    """Organizational unit owning complaint categories (reference data)"""
    __tablename__ = 'departments'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)
    description = Column(Text)

    # Relationships
    categories = relationship("Category", back_populates="department", cascade="all, delete-orphan", order_by="Category.id")
    members = relationship("User", back_populates="department")

    def __repr__(self):
        return f"<Department(id={self.id}, name='{self.name}')>"


class Category(Base):
    """Subject area of a complaint, owned by exactly one department"""
    __tablename__ = 'categories'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    department_id = Column(Integer, ForeignKey('departments.id', ondelete='CASCADE'), nullable=False, index=True)

    # Relationships
    department = relationship("Department", back_populates="categories")
    complaints = relationship("Complaint", back_populates="category")

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}', department_id={self.department_id})>"
