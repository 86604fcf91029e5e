# Decorators in this file:
# 1. admin_required - Only tenant admins can access
# 2. tenant_required - User must have a tenant (or a superuser selection)
#
# Stack them under @login_required:
#
#   @login_required
#   @tenant_required
#   @admin_required
#   def pipeline_settings_view(request): ...
# ==============================================================================

from functools import wraps
from django.shortcuts import redirect
from django.contrib import messages
from django.http import JsonResponse
from django.utils.translation import gettext_lazy as _

from apps.core.utils import get_user_tenant


def is_ajax(request):
    return request.headers.get('X-Requested-With') == 'XMLHttpRequest'


# ROLE-BASED DECORATORS
def admin_required(view_func):
    """
    Decorator: Only admins can access this view

    Checks:
    1. User is authenticated (logged in)
    2. User role is 'admin' OR is superuser

    Non-admins are redirected to the dashboard, or get a 403 JSON error
    for AJAX requests.
    """

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            messages.error(request, _('Please login to continue.'))
            return redirect('accounts:login')

        if request.user.is_admin():
            return view_func(request, *args, **kwargs)

        if is_ajax(request):
            # AJAX request → return JSON error
            return JsonResponse({
                'success': False,
                'error': 'Admin access required'
            }, status=403)

        messages.error(
            request,
            _('You do not have permission to access this page. Admin access required.')
        )
        return redirect('core:dashboard')

    return wrapper


# TENANT-BASED DECORATORS
def tenant_required(view_func):
    """
    Checks:
    1. User is authenticated
    2. User has a tenant assigned (superusers: a tenant selected in session)

    On success the tenant is attached as request.tenant, so views scope
    every query with it:

        deal = get_object_or_404(Deal, pk=pk, tenant=request.tenant)

    Superusers without a selection are sent to the tenant selector.
    """

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            messages.error(request, _('Please login to continue.'))
            return redirect('accounts:login')

        tenant = get_user_tenant(request)
        if tenant is not None:
            request.tenant = tenant
            return view_func(request, *args, **kwargs)

        if request.user.is_superuser:
            return redirect('core:tenant_selector')

        if is_ajax(request):
            return JsonResponse({'success': False, 'error': 'No tenant'}, status=403)

        messages.error(
            request,
            _('You must belong to an organisation to access this page.')
        )
        return redirect('accounts:login')

    return wrapper
