from django.shortcuts import render, redirect
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.core.exceptions import ValidationError
from django.db.models import Sum

from apps.accounts.decorators import admin_required, tenant_required
from apps.activities.models import Activity
from apps.contacts.models import Contact, Company
from apps.deals.models import Deal, format_cents
from .branding import COLOR_PRESETS
from .forms import BrandingForm, EntityLabelsForm
from .models import Tenant
from .utils import get_user_tenant, set_selected_tenant


@login_required
def tenant_selector_view(request):
    """
    Tenant selector for superusers without a tenant.
    The choice is kept in the session (see utils.get_user_tenant).
    """
    if not request.user.is_superuser:
        return redirect('core:dashboard')

    tenant_id = request.GET.get('tenant_id')
    if tenant_id:
        if set_selected_tenant(request, tenant_id):
            return redirect('core:dashboard')
        messages.error(request, 'Tenant not found')

    context = {
        'tenants': Tenant.objects.all().order_by('name'),
        'selected_tenant': get_user_tenant(request),
    }

    return render(request, 'core/tenant_selector.html', context)


@login_required
@tenant_required
def dashboard_view(request):
    tenant = request.tenant

    deals = Deal.objects.filter(tenant=tenant)
    total_value = deals.aggregate(total=Sum('value_cents'))['total'] or 0
    won_value = deals.filter(stage__is_won=True).aggregate(total=Sum('value_cents'))['total'] or 0

    recent_activities = Activity.objects.filter(tenant=tenant).select_related(
        'created_by', 'deal', 'contact'
    ).order_by('-created_at', '-id')[:10]

    context = {
        'contacts_count': Contact.objects.filter(tenant=tenant).count(),
        'companies_count': Company.objects.filter(tenant=tenant).count(),
        'deals_count': deals.count(),
        'total_value_cents': total_value,
        'won_value_cents': won_value,
        'total_value': format_cents(total_value),
        'won_value': format_cents(won_value),
        'recent_activities': recent_activities,
        'active_page': 'dashboard',
    }

    return render(request, 'core/dashboard.html', context)


@login_required
@tenant_required
@admin_required
def branding_settings_view(request):
    tenant = request.tenant

    if request.method == 'POST':
        form = BrandingForm(request.POST)

        if form.is_valid():
            try:
                tenant.update_branding(
                    logo_url=form.cleaned_data['logo_url'],
                    color_scheme=form.cleaned_data['color_scheme'],
                )
            except ValidationError as e:
                messages.error(request, e.messages[0])
            else:
                messages.success(request, 'Branding updated successfully')
                return redirect('core:branding')
        else:
            messages.error(request, 'Please correct the errors below.')
    else:
        form = BrandingForm(initial={
            'logo_url': tenant.logo_url or '',
            'color_scheme': tenant.color_scheme,
        })

    context = {
        'form': form,
        'presets': COLOR_PRESETS,
        'active_page': 'branding',
    }

    return render(request, 'core/branding.html', context)


@login_required
@tenant_required
@admin_required
def entity_labels_view(request):
    tenant = request.tenant

    if request.method == 'POST':
        form = EntityLabelsForm(request.POST)

        if form.is_valid():
            try:
                tenant.update_entity_labels(**form.cleaned_data)
            except ValidationError as e:
                for field, errors in e.message_dict.items():
                    for error in errors:
                        form.add_error(field, error)
                messages.error(request, 'Please correct the errors below.')
            else:
                messages.success(request, 'Labels updated successfully')
                return redirect('core:entity_labels')
        else:
            messages.error(request, 'Please correct the errors below.')
    else:
        form = EntityLabelsForm(initial=tenant.get_entity_labels())

    context = {
        'form': form,
        'active_page': 'entity_labels',
    }

    return render(request, 'core/entity_labels.html', context)
