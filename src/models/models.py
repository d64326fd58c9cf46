from typing import List
import uuid
import enum

from sqlalchemy import (
    JSON, Column, Float, ForeignKey, String, Table, Text, DateTime, Uuid,
    Enum as SAEnum,
    func,
)
from sqlalchemy.orm import declarative_base, relationship, column_property, Mapped

Base = declarative_base()

course_instructors = Table(
    "course_instructors",
    Base.metadata,
    Column("course_id", String(32), ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
    Column("instructor_id", String(32), ForeignKey("instructors.ucinetid", ondelete="CASCADE"), primary_key=True),
)

class CourseLevel(enum.Enum):
    LOWER_DIVISION = "Lower Division (1-99)"
    UPPER_DIVISION = "Upper Division (100-199)"
    GRADUATE = "Graduate/Professional Only (200+)"

class Course(Base):
    __tablename__ = "courses"

    # e.g. "COMPSCI161"
    id = Column(String(32), primary_key=True)
    department = Column(String(32), nullable=False, index=True)
    course_number = Column(String(16), nullable=False)
    department_name = Column(String(255), nullable=False, default="")
    school = Column(String(255), nullable=False, default="")
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    course_level = Column(SAEnum(CourseLevel), nullable=False, default=CourseLevel.LOWER_DIVISION)
    min_units = Column(Float, nullable=False, default=4.0)
    max_units = Column(Float, nullable=False, default=4.0)

    # Text matched and scored by the search repository
    search_text = column_property(department + " " + course_number + " " + title)

    instructors: Mapped[List["Instructor"]] = relationship(
        "Instructor",
        secondary=course_instructors,
        back_populates="courses",
        order_by="Instructor.ucinetid",
    )

    def __repr__(self):
        return f"<Course(id={self.id}, title={self.title})>"

class Instructor(Base):
    __tablename__ = "instructors"

    ucinetid = Column(String(32), primary_key=True)
    name = Column(String(255), nullable=False)
    title = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    department = Column(String(255), nullable=False, default="")

    search_text = column_property(name + " " + department)

    courses: Mapped[List[Course]] = relationship(
        "Course",
        secondary=course_instructors,
        back_populates="instructors",
        order_by="Course.id",
    )

    @property
    def id(self) -> str:
        return self.ucinetid

    def __repr__(self):
        return f"<Instructor(ucinetid={self.ucinetid}, name={self.name})>"

class DegreeDivision(enum.Enum):
    UNDERGRADUATE = "Undergraduate"
    GRADUATE = "Graduate"

class Degree(Base):
    __tablename__ = "degrees"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)
    name = Column(String(255), unique=True, nullable=False, index=True)
    division = Column(SAEnum(DegreeDivision, values_callable=lambda e: [m.value for m in e]), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    majors: Mapped[List["Major"]] = relationship(
        "Major",
        back_populates="degree",
        order_by="Major.name",
        cascade="all, delete-orphan",
    )
    minors: Mapped[List["Minor"]] = relationship(
        "Minor",
        back_populates="degree",
        order_by="Minor.name",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Degree(id={self.id}, name={self.name}, division={self.division.value})>"

class Major(Base):
    __tablename__ = "majors"

    id = Column(String(64), primary_key=True)
    degree_id = Column(Uuid(as_uuid=True), ForeignKey("degrees.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    code = Column(String(32), nullable=False)
    requirements = Column(JSON, nullable=True)

    degree: Mapped[Degree] = relationship("Degree", back_populates="majors")
    specializations: Mapped[List["Specialization"]] = relationship(
        "Specialization",
        back_populates="major",
        order_by="Specialization.name",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Major(id={self.id}, name={self.name})>"

class Minor(Base):
    __tablename__ = "minors"

    id = Column(String(64), primary_key=True)
    degree_id = Column(Uuid(as_uuid=True), ForeignKey("degrees.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    requirements = Column(JSON, nullable=True)

    degree: Mapped[Degree] = relationship("Degree", back_populates="minors")

    def __repr__(self):
        return f"<Minor(id={self.id}, name={self.name})>"

class Specialization(Base):
    __tablename__ = "specializations"

    id = Column(String(64), primary_key=True)
    major_id = Column(String(64), ForeignKey("majors.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    requirements = Column(JSON, nullable=True)

    major: Mapped[Major] = relationship("Major", back_populates="specializations")

    def __repr__(self):
        return f"<Specialization(id={self.id}, name={self.name})>"
