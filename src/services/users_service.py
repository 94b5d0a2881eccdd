"""
Users service - request handling logic for the User resource
"""

import logging
from services.base_service import ServiceResult, RESOURCE_NOT_FOUND, CONFLICT, DATABASE_ERROR
from database.users_gateway import UsersGateway, StorageError, DuplicateEmailError
from models.user import (
    UserCreateRequest,
    UserFilterQuery,
    UserListResponse,
    UserResponse,
    UserUpdateRequest,
)

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found"
USER_EXISTS = "User already exists"
EMAIL_EXISTS = "Email already exists"

class UsersService:
    """Validate-then-persist operations for users; each call is a single pass with no retries"""

    def __init__(self, gateway: UsersGateway):
        self.gateway = gateway

    async def list_users(self, query: UserFilterQuery) -> ServiceResult:
        """
        List one page of users, optionally filtered by name

        Args:
            query: Validated filter with page and perPage as ints

        Returns:
            ServiceResult whose data is the page payload; an empty page is still a success
        """
        try:
            items, total = await self.gateway.list(query.name, query.skip, query.perPage)
        except StorageError as e:
            logger.error(f"List users failed: {e}")
            return ServiceResult.fail(DATABASE_ERROR, str(e))

        payload = UserListResponse(
            page=query.page,
            perPage=query.perPage,
            totalItems=total,
            users=[UserResponse.from_document(item) for item in items]
        )
        return ServiceResult.ok(payload.to_json(), count=len(items))

    async def get_user(self, user_id: str) -> ServiceResult:
        try:
            document = await self.gateway.get_by_id(user_id)
        except StorageError as e:
            logger.error(f"Get user {user_id} failed: {e}")
            return ServiceResult.fail(DATABASE_ERROR, str(e))

        if document is None:
            return ServiceResult.fail(RESOURCE_NOT_FOUND, USER_NOT_FOUND)
        return ServiceResult.ok(UserResponse.from_document(document).to_json())

    async def create_user(self, request: UserCreateRequest) -> ServiceResult:
        """
        Create a user after checking that the email is free

        A taken email ends the operation with CONFLICT; nothing is inserted.
        """
        try:
            if await self.gateway.exists_by_email(request.email):
                return ServiceResult.fail(CONFLICT, USER_EXISTS)

            logger.info(f"Creating new user: {request.email}")
            document = await self.gateway.insert(request.to_fields())
        except DuplicateEmailError:
            # Lost the race against a concurrent create
            return ServiceResult.fail(CONFLICT, USER_EXISTS)
        except StorageError as e:
            logger.error(f"Create user failed: {e}")
            return ServiceResult.fail(DATABASE_ERROR, str(e))

        return ServiceResult.ok(UserResponse.from_document(document).to_json())

    async def update_user(self, user_id: str, request: UserUpdateRequest) -> ServiceResult:
        """
        Apply a partial update to a user

        When the patch changes the email, it must not belong to another user.
        The conflict check runs before the existence check.
        """
        patch = request.to_patch()
        try:
            if "email" in patch and await self.gateway.exists_by_email(patch["email"], exclude_id=user_id):
                return ServiceResult.fail(CONFLICT, EMAIL_EXISTS)

            logger.info(f"Updating user {user_id}: {sorted(patch)}")
            document = await self.gateway.update_by_id(user_id, patch)
        except DuplicateEmailError:
            return ServiceResult.fail(CONFLICT, EMAIL_EXISTS)
        except StorageError as e:
            logger.error(f"Update user {user_id} failed: {e}")
            return ServiceResult.fail(DATABASE_ERROR, str(e))

        if document is None:
            return ServiceResult.fail(RESOURCE_NOT_FOUND, USER_NOT_FOUND)
        return ServiceResult.ok(UserResponse.from_document(document).to_json())

    async def delete_user(self, user_id: str) -> ServiceResult:
        try:
            logger.info(f"Deleting user {user_id}")
            document = await self.gateway.delete_by_id(user_id)
        except StorageError as e:
            logger.error(f"Delete user {user_id} failed: {e}")
            return ServiceResult.fail(DATABASE_ERROR, str(e))

        if document is None:
            return ServiceResult.fail(RESOURCE_NOT_FOUND, USER_NOT_FOUND)
        return ServiceResult.ok(UserResponse.from_document(document).to_json())
