from django.shortcuts import render, redirect, get_object_or_404
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.core.exceptions import ValidationError
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from apps.accounts.decorators import admin_required, is_ajax, tenant_required
from .forms import CustomFieldForm
from .models import CustomField, OBJECT_TYPE_CHOICES
from .services import create_custom_field, get_fields


@login_required
@tenant_required
@admin_required
def field_list_view(request):
    fields_by_type = [
        {
            'object_type': object_type,
            'label': label,
            'fields': get_fields(request.tenant, object_type),
        }
        for object_type, label in OBJECT_TYPE_CHOICES
    ]

    if request.method == 'POST':
        form = CustomFieldForm(request.POST)

        if form.is_valid():
            try:
                field = create_custom_field(tenant=request.tenant, **form.cleaned_data)
            except ValidationError as e:
                for name, errors in e.message_dict.items():
                    for error in errors:
                        form.add_error(name if name in form.fields else None, error)
                messages.error(request, 'Please correct the errors in the form')
            else:
                messages.success(request, f'Custom field "{field.label}" created successfully')
                return redirect('customfields:field_list')
        else:
            messages.error(request, 'Please correct the errors in the form')
    else:
        form = CustomFieldForm(initial={'object_type': request.GET.get('object_type')})

    context = {
        'form': form,
        'fields_by_type': fields_by_type,
        'active_page': 'custom_fields',
    }

    return render(request, 'customfields/field_list.html', context)


@login_required
@tenant_required
@admin_required
@require_POST
def field_delete_view(request, pk):
    field = get_object_or_404(CustomField, pk=pk, tenant=request.tenant)
    field_label = field.label
    field.delete()

    if is_ajax(request):
        return JsonResponse({'success': True})

    messages.success(request, f'Custom field "{field_label}" deleted successfully')
    return redirect('customfields:field_list')


@login_required
@tenant_required
@require_GET
def field_api_view(request):
    """GET ?objectType=contact|company|deal → the tenant's fields by position."""
    object_type = request.GET.get('objectType')
    if not object_type:
        return JsonResponse({'error': 'objectType required'}, status=400)

    fields = [field.to_json() for field in get_fields(request.tenant, object_type)]
    return JsonResponse(fields, safe=False)
