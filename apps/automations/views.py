from django.shortcuts import render, redirect, get_object_or_404
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.core.paginator import Paginator
from django.http import JsonResponse
from django.views.decorators.http import require_POST

from apps.accounts.decorators import admin_required, is_ajax, tenant_required
from .forms import AutomationTemplateForm
from .models import AutomationDelivery, AutomationTemplate


@login_required
@tenant_required
@admin_required
def template_list_view(request):
    templates = AutomationTemplate.objects.filter(tenant=request.tenant).order_by('-created_at')

    context = {
        'templates': templates,
        'active_page': 'automation_templates',
    }

    return render(request, 'automations/template_list.html', context)


@login_required
@tenant_required
@admin_required
def template_create_view(request):
    if request.method == 'POST':
        form = AutomationTemplateForm(request.POST)

        if form.is_valid():
            template = form.save(commit=False)
            template.tenant = request.tenant
            template.save()

            messages.success(request, f'Template "{template.name}" created successfully')
            return redirect('automations:template_list')

        messages.error(request, 'Please correct the errors in the form')
    else:
        form = AutomationTemplateForm()

    context = {
        'form': form,
        'form_title': 'New Automation Template',
        'active_page': 'automation_templates',
    }
    return render(request, 'automations/template_form.html', context)


@login_required
@tenant_required
@admin_required
def template_edit_view(request, pk):
    template = get_object_or_404(AutomationTemplate, pk=pk, tenant=request.tenant)

    if request.method == 'POST':
        form = AutomationTemplateForm(request.POST, instance=template)

        if form.is_valid():
            form.save()
            messages.success(request, f'Template "{template.name}" updated successfully')
            return redirect('automations:template_list')

        messages.error(request, 'Please correct the errors in the form')
    else:
        form = AutomationTemplateForm(instance=template)

    context = {
        'form': form,
        'template': template,
        'form_title': f'Edit Template: {template.name}',
        'active_page': 'automation_templates',
    }
    return render(request, 'automations/template_form.html', context)


@login_required
@tenant_required
@admin_required
@require_POST
def template_delete_view(request, pk):
    template = get_object_or_404(AutomationTemplate, pk=pk, tenant=request.tenant)
    template_name = template.name
    template.delete()

    if is_ajax(request):
        return JsonResponse({'success': True})

    messages.success(request, f'Template "{template_name}" deleted successfully')
    return redirect('automations:template_list')


@login_required
@tenant_required
@admin_required
@require_POST
def template_toggle_view(request, pk):
    template = get_object_or_404(AutomationTemplate, pk=pk, tenant=request.tenant)
    template.enabled = not template.enabled
    template.save(update_fields=['enabled', 'updated_at'])

    if is_ajax(request):
        return JsonResponse({'success': True, 'enabled': template.enabled})

    state = 'enabled' if template.enabled else 'disabled'
    messages.success(request, f'Template "{template.name}" {state}')
    return redirect('automations:template_list')


@login_required
@tenant_required
@admin_required
def delivery_list_view(request):
    deliveries = AutomationDelivery.objects.filter(tenant=request.tenant).select_related('template', 'deal')

    status = request.GET.get('status', '')
    if status in dict(AutomationDelivery.STATUS_CHOICES):
        deliveries = deliveries.filter(status=status)

    paginator = Paginator(deliveries, 50)
    page_obj = paginator.get_page(request.GET.get('page', 1))

    context = {
        'deliveries': page_obj,
        'page_obj': page_obj,
        'status': status,
        'status_choices': AutomationDelivery.STATUS_CHOICES,
        'active_page': 'automation_deliveries',
    }

    return render(request, 'automations/delivery_list.html', context)
