"""
Single-endpoint dispatch used by the browser client.

PUT / with {operation, name, email, code, token, doSend}. The operation
names are part of the client contract:

- register  -> register(name, email, doSend)
- register2 -> confirm_registration(code, email)
- login     -> login(email, doSend)
- login2    -> finish_login(code, email)
- jwt       -> verify_token(token)
"""

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError as RequestValidationError

from src.api.dependencies import get_operations
from src.api.models import OperationRequest, OperationResponse
from src.domain.operations import AuthOperations
from src.domain.ports import OperationResult

router = APIRouter(tags=["dispatch"])


def _dispatch(operations: AuthOperations, body: OperationRequest) -> OperationResult:
    if body.operation == "jwt":
        return operations.verify_token(body.token)
    if body.operation == "register":
        return operations.register(body.name, body.email, body.do_send)
    if body.operation == "register2":
        return operations.confirm_registration(body.code, body.email)
    if body.operation == "login":
        return operations.login(body.email, body.do_send)
    if body.operation == "login2":
        return operations.finish_login(body.code, body.email)
    return OperationResult(success=False, output="Unknown operation")


@router.put("/", response_model=OperationResponse, summary="Dispatch an operation")
async def dispatch(
    request: Request,
    operations: AuthOperations = Depends(get_operations),
) -> OperationResponse:
    try:
        body = OperationRequest.model_validate(await request.json())
    except (ValueError, RequestValidationError):
        return OperationResponse(success=False, output="Invalid JSON")

    result = await run_in_threadpool(_dispatch, operations, body)
    return OperationResponse(success=result.success, output=result.output)


@router.api_route("/", methods=["GET", "POST", "PATCH", "DELETE"], include_in_schema=False)
async def illegal_method() -> OperationResponse:
    return OperationResponse(success=False, output="Illegal method")
