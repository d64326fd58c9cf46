import pytest

from src.common.errors import RepositoryError
from src.main import app
from src.modules.search.search_service import SearchService

SEARCH = """
query Search($query: SearchQueryInput!) {
  search(query: $query) {
    totalCount
    items {
      __typename
      ... on CourseResult { id title type score instructors { ucinetid } }
      ... on InstructorResult { ucinetid name type score }
    }
  }
}
"""

DEGREES = """
query Degrees($query: DegreesQuery) {
  degrees(query: $query) {
    totalCount
    degrees {
      name
      division
      majors { id code specializations { name } }
      minors { name }
      specializations { id }
    }
  }
}
"""

CREATE_DEGREE = """
mutation Create($input: CreateDegreeInput!) {
  createDegree(input: $input) { id name division }
}
"""

async def execute(client, query, variables=None, headers=None):
    response = await client.post("/graphql", json={"query": query, "variables": variables or {}}, headers=headers)
    assert response.status_code == 200
    return response.json()

@pytest.mark.asyncio
async def test_search_returns_union_items(client):
    body = await execute(client, SEARCH, {"query": {"queryText": "david"}})

    search = body["data"]["search"]
    assert search["totalCount"] == 2
    assert [item["__typename"] for item in search["items"]] == ["InstructorResult", "CourseResult"]
    assert search["items"][0]["type"] == "INSTRUCTOR"
    assert search["items"][1]["type"] == "COURSE"
    assert search["items"][1]["id"] == "ARTHIS40C"

@pytest.mark.asyncio
async def test_search_course_results_resolve_instructors(client):
    body = await execute(
        client, SEARCH, {"query": {"queryText": "algorithms", "resultTypes": ["COURSE"], "take": 5}}
    )

    items = body["data"]["search"]["items"]
    assert [item["id"] for item in items] == ["COMPSCI161", "COMPSCI163"]
    assert [i["ucinetid"] for i in items[0]["instructors"]] == ["eppstein", "mikes"]
    assert [i["ucinetid"] for i in items[1]["instructors"]] == ["eppstein"]

@pytest.mark.asyncio
async def test_blank_search_is_bad_user_input(client):
    body = await execute(client, SEARCH, {"query": {"queryText": "  "}})

    assert body["data"] is None
    assert body["errors"][0]["extensions"]["code"] == "BAD_USER_INPUT"

@pytest.mark.asyncio
async def test_repository_failure_is_internal_error_without_data(client):
    class Failing:
        async def find_by_text(self, text, limit, offset=0):
            raise RepositoryError("instructor")

    class Empty:
        async def find_by_text(self, text, limit, offset=0):
            return [], 0

    app.state.search_service = SearchService(Empty(), Failing())

    body = await execute(client, SEARCH, {"query": {"queryText": "david"}})

    assert body["data"] is None
    assert body["errors"][0]["message"] == "Server error occurred"
    assert body["errors"][0]["extensions"]["code"] == "INTERNAL_SERVER_ERROR"

@pytest.mark.asyncio
async def test_degrees_resolve_nested_records(client):
    body = await execute(client, DEGREES, {"query": {"division": "UNDERGRADUATE"}})

    page = body["data"]["degrees"]
    assert page["totalCount"] == 1
    degree = page["degrees"][0]
    assert degree["name"] == "B.S. Computer Science"
    assert degree["division"] == "UNDERGRADUATE"
    assert degree["majors"] == [
        {"id": "BS-201", "code": "201", "specializations": [{"name": "Algorithms"}, {"name": "Systems and Software"}]}
    ]
    assert degree["minors"] == [{"name": "Informatics"}]
    assert [s["id"] for s in degree["specializations"]] == ["BS-201A", "BS-201B"]

@pytest.mark.asyncio
async def test_unknown_degree_is_not_found(client):
    body = await execute(client, 'query { degree(id: "not-a-uuid") { name } }')

    assert body["errors"][0]["extensions"]["code"] == "NOT_FOUND"

@pytest.mark.asyncio
async def test_instructor_resolves_courses(client):
    body = await execute(client, 'query { instructor(ucinetid: "eppstein") { name courses { id } } }')

    assert body["data"]["instructor"] == {
        "name": "David Eppstein",
        "courses": [{"id": "COMPSCI161"}, {"id": "COMPSCI163"}],
    }

@pytest.mark.asyncio
async def test_create_degree_requires_admin_key(client):
    variables = {"input": {"name": "B.A. Art History", "division": "UNDERGRADUATE"}}

    anonymous = await execute(client, CREATE_DEGREE, variables)
    forbidden = await execute(client, CREATE_DEGREE, variables, headers={"X-Admin-Key": "wrong"})

    assert anonymous["errors"][0]["extensions"]["code"] == "UNAUTHENTICATED"
    assert forbidden["errors"][0]["extensions"]["code"] == "FORBIDDEN"

@pytest.mark.asyncio
async def test_create_and_delete_degree(client):
    headers = {"X-Admin-Key": "test-admin-key"}
    created = await execute(
        client, CREATE_DEGREE, {"input": {"name": "B.A. Art History", "division": "UNDERGRADUATE"}}, headers
    )
    degree = created["data"]["createDegree"]
    assert degree["name"] == "B.A. Art History"

    duplicate = await execute(
        client, CREATE_DEGREE, {"input": {"name": "B.A. Art History", "division": "UNDERGRADUATE"}}, headers
    )
    assert duplicate["errors"][0]["extensions"]["code"] == "CONFLICT"

    deleted = await execute(
        client, f'mutation {{ deleteDegree(id: "{degree["id"]}") {{ message }} }}', headers=headers
    )
    assert deleted["data"]["deleteDegree"]["message"] == "Degree deleted successfully."
