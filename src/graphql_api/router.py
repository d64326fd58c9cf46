# src/graphql_api/router.py

from strawberry.fastapi import GraphQLRouter

from src.graphql_api.context import get_graphql_context
from src.graphql_api.schema import schema

graphql_router = GraphQLRouter(schema, context_getter=get_graphql_context)
