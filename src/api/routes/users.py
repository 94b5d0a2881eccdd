"""
User API routes
Each route runs its validators in order, then the handler, then maps the result to HTTP.
"""

import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from database.users_gateway import UsersGateway
from models.user import UserCreateRequest, UserFilterQuery, UserIdParams, UserUpdateRequest
from services.base_service import ServiceResult, RESOURCE_NOT_FOUND, CONFLICT
from services.users_service import UsersService
from utils.error_handling import log_business_error, server_error_response, set_endpoint_context
from utils.request_validation import ValidationFailure, validate_request, validation_error_response

router = APIRouter()
logger = logging.getLogger(__name__)

def get_users_service(request: Request) -> UsersService:
    """Build the service over the process-wide users collection"""
    return UsersService(UsersGateway(request.app.state.users_collection))

def to_response(result: ServiceResult, success_status: int = 200) -> JSONResponse:
    """Map a service result to the HTTP status and body for the User API"""
    if result.success:
        return JSONResponse(status_code=success_status, content=result.data)

    if result.error_type == RESOURCE_NOT_FOUND:
        return JSONResponse(status_code=404, content={"message": result.error})
    elif result.error_type == CONFLICT:
        log_business_error("conflict", result.error)
        return JSONResponse(status_code=409, content={"message": result.error})
    else:
        return server_error_response(result.error)

@router.get("")
async def list_users(request: Request, service: UsersService = Depends(get_users_service)):
    """Get a paginated list of users, optionally filtered by name"""
    set_endpoint_context("users.list")

    query = await validate_request(request, "query", UserFilterQuery)
    if isinstance(query, ValidationFailure):
        return validation_error_response(query, "users.list")

    return to_response(await service.list_users(query.value))

@router.post("")
async def create_user(request: Request, service: UsersService = Depends(get_users_service)):
    """Create a new user"""
    set_endpoint_context("users.create")

    body = await validate_request(request, "body", UserCreateRequest)
    if isinstance(body, ValidationFailure):
        return validation_error_response(body, "users.create")

    return to_response(await service.create_user(body.value), success_status=201)

@router.get("/{id}")
async def get_user(request: Request, service: UsersService = Depends(get_users_service)):
    """Get user by ID"""
    set_endpoint_context("users.get")

    params = await validate_request(request, "params", UserIdParams)
    if isinstance(params, ValidationFailure):
        return validation_error_response(params, "users.get")

    return to_response(await service.get_user(params.value.id))

@router.put("/{id}")
async def update_user(request: Request, service: UsersService = Depends(get_users_service)):
    """Update user details"""
    set_endpoint_context("users.update")

    params = await validate_request(request, "params", UserIdParams)
    if isinstance(params, ValidationFailure):
        return validation_error_response(params, "users.update")

    body = await validate_request(request, "body", UserUpdateRequest)
    if isinstance(body, ValidationFailure):
        return validation_error_response(body, "users.update")

    return to_response(await service.update_user(params.value.id, body.value))

@router.delete("/{id}")
async def delete_user(request: Request, service: UsersService = Depends(get_users_service)):
    """Delete a user; responds with the deleted record"""
    set_endpoint_context("users.delete")

    params = await validate_request(request, "params", UserIdParams)
    if isinstance(params, ValidationFailure):
        return validation_error_response(params, "users.delete")

    return to_response(await service.delete_user(params.value.id))
