from fastapi import APIRouter

from approvals.api.admin import admin_balances_router, admin_leave_types_router
from approvals.api.approvals import approvals_router
from approvals.api.holidays import admin_holidays_router, holidays_router
from approvals.api.leaves import leave_helpers_router, leave_types_router
from approvals.api.requests import expenses_router, leaves_router, timesheets_router
from approvals.api.users import users_router

api_router = APIRouter()
# Static /leaves/* paths first so they are not captured by /leaves/{request_id}.
api_router.include_router(leave_helpers_router)
api_router.include_router(timesheets_router)
api_router.include_router(expenses_router)
api_router.include_router(leaves_router)
api_router.include_router(approvals_router)
api_router.include_router(leave_types_router)
api_router.include_router(holidays_router)
api_router.include_router(admin_leave_types_router)
api_router.include_router(admin_holidays_router)
api_router.include_router(admin_balances_router)
api_router.include_router(users_router)
