"""
Dashboard API endpoints.
"""
from ninja import Router
from django.http import HttpRequest

from apps.identity.api import require_auth
from .schemas import DashboardOut
from . import services

router = Router(tags=["Dashboard"])


@router.get("/admin", response=DashboardOut, auth=None)
def admin_dashboard(request: HttpRequest):
    """
    Statistics over every task of the admin's tenant.
    """
    user = require_auth(request)
    return services.get_admin_dashboard(user)


@router.get("/member", response=DashboardOut, auth=None)
def member_dashboard(request: HttpRequest):
    """
    Statistics over the tasks assigned to the calling member.
    """
    user = require_auth(request)
    return services.get_member_dashboard(user)
