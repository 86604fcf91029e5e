from .branding import get_tenant_color_css
from .models import DEFAULT_ENTITY_LABELS
from .utils import get_user_tenant


def tenant_branding(request):
    """Expose the current tenant, its entity labels and colour CSS to templates."""
    tenant = get_user_tenant(request) if hasattr(request, 'user') else None

    return {
        'current_tenant': tenant,
        'entity_labels': tenant.get_entity_labels() if tenant else dict(DEFAULT_ENTITY_LABELS),
        'tenant_color_css': get_tenant_color_css(tenant),
    }
