import os

# Settings are read at import time; configure the test environment first.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ADMIN_API_KEY"] = "test-admin-key"
os.environ["APP_ENV"] = "test"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from src.common.database.database import get_session_factory
from src.main import app
from src.models.models import (
    Base, Course, CourseLevel, Degree, DegreeDivision, Instructor, Major, Minor, Specialization,
)
from src.modules.search.dependencies import build_search_service


def _course(course_id, department, number, title, level=CourseLevel.UPPER_DIVISION, **extra):
    return Course(
        id=course_id,
        department=department,
        course_number=number,
        department_name=extra.pop("department_name", ""),
        school=extra.pop("school", "Donald Bren School of Information and Computer Sciences"),
        title=title,
        course_level=level,
        min_units=4.0,
        max_units=4.0,
        **extra,
    )

def build_catalog():
    eppstein = Instructor(ucinetid="eppstein", name="David Eppstein", title="Distinguished Professor",
                          email="eppstein@uci.edu", department="Computer Science")
    mikes = Instructor(ucinetid="mikes", name="Michael Shindler", title="Associate Professor of Teaching",
                       email="mikes@uci.edu", department="Computer Science")
    pattis = Instructor(ucinetid="pattis", name="Richard Pattis", title="Professor of Teaching",
                        email="pattis@uci.edu", department="Computer Science")
    sameer = Instructor(ucinetid="sameer", name="Sameer Singh", title="Associate Professor",
                        email="sameer@uci.edu", department="Data Science")

    courses = [
        _course("COMPSCI161", "COMPSCI", "161", "Design and Analysis of Algorithms",
                department_name="Computer Science", instructors=[eppstein, mikes]),
        _course("COMPSCI162", "COMPSCI", "162", "Formal Languages and Automata",
                department_name="Computer Science"),
        _course("COMPSCI163", "COMPSCI", "163", "Graph Algorithms",
                department_name="Computer Science", instructors=[eppstein]),
        _course("I&CSCI46", "I&C SCI", "46", "Data Structure Implementation and Analysis",
                level=CourseLevel.LOWER_DIVISION, department_name="Information and Computer Science",
                instructors=[pattis]),
        _course("MATH2A", "MATH", "2A", "Single-Variable Calculus",
                level=CourseLevel.LOWER_DIVISION, department_name="Mathematics", school="School of Physical Sciences"),
        _course("ARTHIS40C", "ART HIS", "40C", "Renaissance Sculpture: Donatello to David",
                level=CourseLevel.LOWER_DIVISION, department_name="Art History", school="School of Humanities"),
    ]

    bs_cs = Degree(name="B.S. Computer Science", division=DegreeDivision.UNDERGRADUATE,
                   description="Bachelor of Science in Computer Science")
    ms_cs = Degree(name="M.S. Computer Science", division=DegreeDivision.GRADUATE)
    cs_major = Major(id="BS-201", name="Computer Science", code="201", requirements={"units": 180})
    cs_major.specializations = [
        Specialization(id="BS-201A", name="Algorithms", requirements={"courses": ["COMPSCI161", "COMPSCI163"]}),
        Specialization(id="BS-201B", name="Systems and Software"),
    ]
    bs_cs.majors = [cs_major]
    bs_cs.minors = [Minor(id="MN-INF", name="Informatics")]
    ms_cs.majors = [Major(id="MS-CS", name="Computer Science", code="MS-CS")]

    return [*courses, eppstein, mikes, pattis, sameer, bs_cs, ms_cs]

@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        session.add_all(build_catalog())
        await session.commit()

    yield factory
    await engine.dispose()

@pytest_asyncio.fixture
async def client(session_factory):
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.state.search_service = build_search_service(session_factory)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

@pytest.fixture
def production(monkeypatch):
    from src.common.config import settings
    monkeypatch.setattr(settings, "APP_ENV", "production")
