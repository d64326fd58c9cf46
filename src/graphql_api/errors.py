# src/graphql_api/errors.py

import functools
import logging

from fastapi import status
from graphql import GraphQLError

from src.auth.dependencies import AccessDenied
from src.common.errors import AppError, ConflictError, NotFoundError, RepositoryError, ValidationError

logger = logging.getLogger(__name__)

_ERROR_CODES = {
    ValidationError: "BAD_USER_INPUT",
    NotFoundError: "NOT_FOUND",
    ConflictError: "CONFLICT",
}

def _error(message: str, code: str) -> GraphQLError:
    return GraphQLError(message, extensions={"code": code})

def translate_errors(resolver):
    """
    Wrap an async resolver so application errors surface as GraphQL errors
    carrying an ``extensions.code``. Anything unexpected is logged and
    reported with a generic message.
    """
    @functools.wraps(resolver)
    async def wrapper(*args, **kwargs):
        try:
            return await resolver(*args, **kwargs)
        except GraphQLError:
            raise
        except AccessDenied as exc:
            code = "UNAUTHENTICATED" if exc.status_code == status.HTTP_401_UNAUTHORIZED else "FORBIDDEN"
            raise _error(exc.detail, code)
        except RepositoryError as exc:
            logger.error("GraphQL %s failed: %s", resolver.__name__, exc, exc_info=exc.__cause__ or exc)
            raise _error("Server error occurred", "INTERNAL_SERVER_ERROR")
        except AppError as exc:
            raise _error(exc.message, _ERROR_CODES.get(type(exc), "INTERNAL_SERVER_ERROR"))
        except Exception:
            logger.exception("GraphQL %s failed", resolver.__name__)
            raise _error("Server error occurred", "INTERNAL_SERVER_ERROR")
    return wrapper
