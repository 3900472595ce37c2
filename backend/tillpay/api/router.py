from fastapi import APIRouter

from tillpay.api.cash_float import cash_float_router
from tillpay.api.holidays import holidays_router
from tillpay.api.payroll import payroll_router
from tillpay.api.schedules import schedules_router

api_router = APIRouter()
api_router.include_router(holidays_router)
api_router.include_router(schedules_router)
api_router.include_router(payroll_router)
api_router.include_router(cash_float_router)
