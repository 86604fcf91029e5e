import logging

from django.conf import settings
from django.shortcuts import render, redirect, get_object_or_404
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.core.paginator import Paginator
from django.db import transaction
from django.http import JsonResponse
from django.views.decorators.http import require_POST

from apps.accounts.decorators import is_ajax, tenant_required
from apps.automations.engine import InvalidStageTransition, move_deal_to_stage
from apps.automations.models import AutomationDelivery
from apps.customfields.models import OBJECT_TYPE_DEAL
from apps.customfields.services import delete_values_for, get_display_values
from apps.pipeline.models import Pipeline, Stage
from .forms import DealForm, DealFilterForm
from .models import Deal, format_cents
from .services import DealError, build_board, create_deal, filter_deals

logger = logging.getLogger(__name__)


def _tenant_deals(tenant):
    return Deal.objects.filter(tenant=tenant).select_related('stage', 'owner', 'contact', 'company')


def _report_failures(request, deliveries):
    failed = [d for d in deliveries if d.status == AutomationDelivery.STATUS_FAILED]
    if failed:
        messages.warning(request, f'{len(failed)} automation email(s) could not be sent')


@login_required
@tenant_required
def deal_list_view(request):
    filter_form = DealFilterForm(request.GET, tenant=request.tenant)

    search_query = ''
    stage = None
    if filter_form.is_valid():
        search_query = filter_form.cleaned_data.get('search', '').strip()
        stage = filter_form.cleaned_data.get('stage')

    deals = filter_deals(_tenant_deals(request.tenant), search_query, stage)

    paginator = Paginator(deals, settings.PAGINATION_SIZE)
    page_obj = paginator.get_page(request.GET.get('page', 1))

    context = {
        'deals': page_obj,
        'page_obj': page_obj,
        'filter_form': filter_form,
        'total_count': paginator.count,
        'search_query': search_query,
        'active_page': 'deals',
    }

    return render(request, 'deals/deal_list.html', context)


@login_required
@tenant_required
def deal_kanban_view(request):
    pipeline = Pipeline.objects.for_tenant(request.tenant)
    if pipeline is None:
        messages.error(request, 'No pipeline found')
        return redirect('core:dashboard')

    search_query = request.GET.get('search', '').strip()
    deals = list(filter_deals(_tenant_deals(request.tenant).filter(pipeline=pipeline), search_query))

    columns = build_board(pipeline, deals)
    for column in columns:
        column['total_display'] = format_cents(column['total_cents'])

    context = {
        'pipeline': pipeline,
        'columns': columns,
        'total_count': len(deals),
        'search_query': search_query,
        'active_page': 'kanban',
    }

    return render(request, 'deals/deal_kanban.html', context)


@login_required
@tenant_required
def deal_detail_view(request, pk):
    deal = get_object_or_404(_tenant_deals(request.tenant), pk=pk)

    context = {
        'deal': deal,
        'stages': deal.pipeline.get_stages(),
        'activities': deal.activities.select_related('created_by', 'assigned_user').order_by('-created_at')[:20],
        'deliveries': AutomationDelivery.objects.filter(deal=deal).select_related('template')[:20],
        'custom_values': get_display_values(request.tenant, OBJECT_TYPE_DEAL, deal.pk),
        'active_page': 'deals',
    }

    return render(request, 'deals/deal_detail.html', context)


@login_required
@tenant_required
def deal_create_view(request):
    pipeline = Pipeline.objects.for_tenant(request.tenant)
    if pipeline is None:
        messages.error(request, 'No pipeline found')
        return redirect('deals:deal_list')

    if request.method == 'POST':
        form = DealForm(request.POST, tenant=request.tenant, pipeline=pipeline)

        if form.is_valid():
            try:
                with transaction.atomic():
                    unsaved = form.save(commit=False)
                    deal = create_deal(
                        tenant=request.tenant,
                        owner=request.user,
                        title=unsaved.title,
                        value_cents=unsaved.value_cents,
                        stage=form.cleaned_data['stage'],
                        contact=unsaved.contact,
                        company=unsaved.company,
                    )
                    form.save_custom_fields(deal)
            except (DealError, InvalidStageTransition) as e:
                messages.error(request, str(e))
            else:
                messages.success(request, f'Deal "{deal.title}" created successfully')
                return redirect('deals:deal_detail', pk=deal.pk)
        else:
            messages.error(request, 'Please correct the errors in the form')
    else:
        initial = {}
        if request.GET.get('stage'):
            initial['stage'] = request.GET.get('stage')
        form = DealForm(tenant=request.tenant, pipeline=pipeline, initial=initial)

    context = {
        'form': form,
        'form_title': 'New Deal',
        'submit_text': 'Create',
        'active_page': 'deals',
    }
    return render(request, 'deals/deal_form.html', context)


@login_required
@tenant_required
def deal_edit_view(request, pk):
    deal = get_object_or_404(Deal, pk=pk, tenant=request.tenant)

    if request.method == 'POST':
        form = DealForm(request.POST, instance=deal, tenant=request.tenant)

        if form.is_valid():
            with transaction.atomic():
                deal = form.save()
                form.save_custom_fields(deal)

            # Stage changes take the same path as a board move
            try:
                deliveries = move_deal_to_stage(deal, form.cleaned_data['stage'], user=request.user)
            except InvalidStageTransition as e:
                messages.error(request, str(e))
            else:
                _report_failures(request, deliveries)
                messages.success(request, f'Deal "{deal.title}" updated successfully')
                return redirect('deals:deal_detail', pk=deal.pk)
        else:
            messages.error(request, 'Please correct the errors in the form')
    else:
        form = DealForm(instance=deal, tenant=request.tenant)

    context = {
        'form': form,
        'deal': deal,
        'form_title': f'Edit Deal: {deal.title}',
        'submit_text': 'Save Changes',
        'active_page': 'deals',
    }
    return render(request, 'deals/deal_form.html', context)


@login_required
@tenant_required
@require_POST
def deal_delete_view(request, pk):
    deal = get_object_or_404(Deal, pk=pk, tenant=request.tenant)
    deal_title = deal.title

    with transaction.atomic():
        delete_values_for(request.tenant, OBJECT_TYPE_DEAL, deal.pk)
        deal.delete()

    messages.success(request, f'Deal "{deal_title}" deleted successfully')
    return redirect('deals:deal_list')


@login_required
@tenant_required
@require_POST
def deal_move_view(request, pk):
    """Kanban move. AJAX gets JSON; plain form posts redirect back."""
    deal = get_object_or_404(Deal, pk=pk, tenant=request.tenant)

    stage_id = request.POST.get('stage', '')
    stage = Stage.objects.filter(pk=stage_id).first() if stage_id.isdigit() else None

    try:
        deliveries = move_deal_to_stage(deal, stage, user=request.user)
    except InvalidStageTransition as e:
        logger.warning(f"Rejected move of deal {deal.pk} to stage {stage_id!r}: {e}")
        if is_ajax(request):
            return JsonResponse({'success': False, 'error': str(e)}, status=400)
        messages.error(request, str(e))
        return redirect('deals:deal_kanban')

    if is_ajax(request):
        return JsonResponse({
            'success': True,
            'deal': deal.pk,
            'stage': deal.stage_id,
            'stage_name': deal.stage.name,
            'deliveries': [
                {'template': d.template_id, 'status': d.status, 'error': d.error}
                for d in deliveries
            ],
        })

    _report_failures(request, deliveries)
    messages.success(request, f'Deal moved to stage "{deal.stage.name}"')
    next_url = request.POST.get('next')
    if next_url and next_url.startswith('/'):
        return redirect(next_url)
    return redirect('deals:deal_kanban')
