"""
Helper utilities for tenant selection
"""
from apps.core.models import Tenant


def get_user_tenant(request):
    """
    Get the tenant for the current user:
    - Superuser without a tenant: from session (selected tenant)
    - Everyone else: from user.tenant

    Returns:
        Tenant object or None
    """
    if not request.user.is_authenticated:
        return None

    if request.user.tenant_id:
        return request.user.tenant

    # Superuser can select any tenant
    if request.user.is_superuser:
        tenant_id = request.session.get('selected_tenant_id')
        if tenant_id:
            try:
                return Tenant.objects.get(pk=tenant_id)
            except Tenant.DoesNotExist:
                # Tenant deleted - clear session
                request.session.pop('selected_tenant_id', None)
                return None
    return None


def set_selected_tenant(request, tenant_id):
    """
    Set the selected tenant in session (Superuser only)

    Returns:
        True if successful, False otherwise
    """
    if not request.user.is_superuser:
        return False

    try:
        tenant = Tenant.objects.get(pk=tenant_id)
    except (Tenant.DoesNotExist, ValueError):
        return False

    request.session['selected_tenant_id'] = tenant.id
    return True


def clear_selected_tenant(request):
    """Clear selected tenant from session"""
    request.session.pop('selected_tenant_id', None)
