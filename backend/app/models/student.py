"""
Student model - one row per student, holding the four assessment scores.

The integer id is the storage primary key, but every lookup goes
through the unique name column.
"""

from sqlalchemy import Column, Integer, Text
from app.database import Base


class Student(Base):
    """
    SQLAlchemy model for the students table.

    Rows are created with all scores at 0 and afterwards only have
    their four scores overwritten together. Rows are never deleted.
    """
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, autoincrement=True,
                doc="System-assigned student identifier")
    name = Column(Text, nullable=False, unique=True,
                  doc="Student name, the lookup key (case-sensitive)")
    aptitude = Column(Integer, nullable=False, default=0,
                      doc="Aptitude test score")
    coding = Column(Integer, nullable=False, default=0,
                    doc="Coding assessment score")
    resume = Column(Integer, nullable=False, default=0,
                    doc="Resume review score")
    interview = Column(Integer, nullable=False, default=0,
                       doc="Mock interview score")

    def to_dict(self) -> dict:
        """Serialize to the JSON shape returned by the API."""
        return {
            "id": self.id,
            "name": self.name,
            "aptitude": self.aptitude,
            "coding": self.coding,
            "resume": self.resume,
            "interview": self.interview
        }

    def __repr__(self):
        return f"<Student(id={self.id}, name='{self.name}')>"
