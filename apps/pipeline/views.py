import logging

from django.shortcuts import render, redirect, get_object_or_404
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.core.exceptions import ValidationError
from django.db.models import Count
from django.http import JsonResponse
from django.views.decorators.http import require_POST

from apps.accounts.decorators import admin_required, is_ajax, tenant_required
from apps.automations.models import AutomationTemplate
from .forms import StageForm
from .models import Pipeline, Stage
from .services import (
    StageAutomationError,
    StageDeletionError,
    create_stage,
    delete_stage,
    update_stage,
    update_stage_automations,
)

logger = logging.getLogger(__name__)


def _get_pipeline(request):
    pipeline = Pipeline.objects.for_tenant(request.tenant)
    if pipeline is None:
        pipeline = Pipeline.objects.create_default(request.tenant)
        logger.info(f"Created default pipeline for tenant {request.tenant.pk}")
    return pipeline


@login_required
@tenant_required
@admin_required
def pipeline_settings_view(request):
    pipeline = _get_pipeline(request)

    templates = list(AutomationTemplate.objects.filter(tenant=request.tenant).order_by('name'))

    stages = []
    for stage in pipeline.get_stages().annotate(deals_count=Count('deals')):
        template_ids = [automation.template_id for automation in stage.get_automations()]
        # Attached templates first, in send order, so re-posting keeps the order
        by_id = {template.pk: template for template in templates}
        choices = [(by_id[pk], True) for pk in template_ids if pk in by_id]
        choices += [(template, False) for template in templates if template.pk not in template_ids]
        stages.append({
            'stage': stage,
            'deals_count': stage.deals_count,
            'template_ids': template_ids,
            'template_choices': choices,
        })

    context = {
        'pipeline': pipeline,
        'stages': stages,
        'templates': templates,
        'active_page': 'pipeline_settings',
    }

    return render(request, 'pipeline/settings.html', context)


@login_required
@tenant_required
@admin_required
def stage_create_view(request):
    pipeline = _get_pipeline(request)

    if request.method == 'POST':
        form = StageForm(request.POST)

        if form.is_valid():
            try:
                stage = create_stage(pipeline, **form.cleaned_data)
            except ValidationError as e:
                messages.error(request, e.messages[0])
            else:
                messages.success(request, f'Stage "{stage.name}" created successfully')
                return redirect('pipeline:settings')
        else:
            messages.error(request, 'Please correct the errors in the form')
    else:
        form = StageForm(initial={'position': pipeline.stages.count()})

    context = {
        'form': form,
        'form_title': 'New Stage',
        'active_page': 'pipeline_settings',
    }
    return render(request, 'pipeline/stage_form.html', context)


@login_required
@tenant_required
@admin_required
def stage_edit_view(request, pk):
    stage = get_object_or_404(Stage, pk=pk, pipeline__tenant=request.tenant)

    if request.method == 'POST':
        form = StageForm(request.POST, instance=stage)

        if form.is_valid():
            try:
                update_stage(stage, **form.cleaned_data)
            except ValidationError as e:
                messages.error(request, e.messages[0])
            else:
                messages.success(request, f'Stage "{stage.name}" updated successfully')
                return redirect('pipeline:settings')
        else:
            messages.error(request, 'Please correct the errors in the form')
    else:
        form = StageForm(instance=stage)

    context = {
        'form': form,
        'stage': stage,
        'form_title': f'Edit Stage: {stage.name}',
        'active_page': 'pipeline_settings',
    }
    return render(request, 'pipeline/stage_form.html', context)


@login_required
@tenant_required
@admin_required
@require_POST
def stage_delete_view(request, pk):
    stage = get_object_or_404(Stage, pk=pk, pipeline__tenant=request.tenant)
    stage_name = stage.name

    try:
        delete_stage(stage)
    except StageDeletionError as e:
        if is_ajax(request):
            return JsonResponse({'success': False, 'error': str(e)}, status=400)
        messages.error(request, str(e))
        return redirect('pipeline:settings')

    if is_ajax(request):
        return JsonResponse({'success': True})

    messages.success(request, f'Stage "{stage_name}" deleted successfully')
    return redirect('pipeline:settings')


@login_required
@tenant_required
@admin_required
@require_POST
def stage_automations_view(request, pk):
    """Replace the stage's automations with the posted template_ids, in order."""
    template_ids = request.POST.getlist('template_ids')

    try:
        stage = update_stage_automations(request.tenant, pk, template_ids)
    except StageAutomationError as e:
        if is_ajax(request):
            status = 404 if str(e) == 'Stage not found' else 400
            return JsonResponse({'success': False, 'error': str(e)}, status=status)
        messages.error(request, str(e))
        return redirect('pipeline:settings')

    if is_ajax(request):
        return JsonResponse({
            'success': True,
            'template_ids': [automation.template_id for automation in stage.get_automations()],
        })

    messages.success(request, f'Automations for "{stage.name}" saved')
    return redirect('pipeline:settings')
