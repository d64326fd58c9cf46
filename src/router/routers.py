# src/router/routers.py

from fastapi import FastAPI
from src.graphql_api.router import graphql_router
from src.modules.courses.course_controller import router as course_router
from src.modules.degrees.degree_controller import router as degree_router
from src.modules.instructors.instructor_controller import router as instructor_router
from src.modules.search.search_controller import router as search_router

def include_routers(app: FastAPI) -> None:
    app.include_router(course_router)
    app.include_router(degree_router)
    app.include_router(instructor_router)
    app.include_router(search_router)
    app.include_router(graphql_router, prefix="/graphql", tags=["graphql"])
