import logging

from django.conf import settings
from django.shortcuts import render, redirect, get_object_or_404
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.core.paginator import Paginator
from django.db import transaction
from django.http import Http404, JsonResponse
from django.views.decorators.http import require_POST

from apps.accounts.decorators import is_ajax, tenant_required
from apps.accounts.models import User
from apps.automations.models import AutomationDelivery
from .forms import ACTIVITY_FORMS
from .models import Activity

logger = logging.getLogger(__name__)


def _tenant_activities(tenant):
    return Activity.objects.filter(tenant=tenant).select_related(
        'created_by', 'assigned_user', 'deal', 'contact', 'template'
    )


def _redirect_after_save(request, activity):
    next_url = request.POST.get('next') or request.GET.get('next')
    if next_url and next_url.startswith('/'):
        return redirect(next_url)
    if activity.is_task:
        return redirect('activities:task_list')
    return redirect('activities:activity_list')


def _apply_status(request, task, status):
    """Route status changes through update_status so automations run."""
    delivery = task.update_status(status)
    if delivery is not None and delivery.status == AutomationDelivery.STATUS_FAILED:
        messages.warning(request, 'Task completed, but the automation email could not be sent')
    return delivery


@login_required
@tenant_required
def activity_list_view(request):
    activities = _tenant_activities(request.tenant).order_by('-created_at', '-id')

    activity_type = request.GET.get('type', '')
    if activity_type in ACTIVITY_FORMS:
        activities = activities.filter(type=activity_type)

    paginator = Paginator(activities, settings.PAGINATION_SIZE)
    page_obj = paginator.get_page(request.GET.get('page', 1))

    context = {
        'activities': page_obj,
        'page_obj': page_obj,
        'activity_type': activity_type,
        'type_choices': Activity.TYPE_CHOICES,
        'active_page': 'activities',
    }

    return render(request, 'activities/activity_list.html', context)


@login_required
@tenant_required
def task_list_view(request):
    tasks = _tenant_activities(request.tenant).filter(type=Activity.TYPE_TASK)

    status = request.GET.get('status', '')
    if status in dict(Activity.STATUS_CHOICES):
        tasks = tasks.filter(status=status)

    assignee = request.GET.get('assignee', '')
    if assignee == 'me':
        tasks = tasks.filter(assigned_user=request.user)
    elif assignee.isdigit():
        tasks = tasks.filter(assigned_user_id=int(assignee))

    tasks = tasks.order_by('status', 'due_at', '-created_at')

    paginator = Paginator(tasks, settings.PAGINATION_SIZE)
    page_obj = paginator.get_page(request.GET.get('page', 1))

    context = {
        'tasks': page_obj,
        'page_obj': page_obj,
        'status': status,
        'assignee': assignee,
        'status_choices': Activity.STATUS_CHOICES,
        'members': User.objects.filter(tenant=request.tenant, is_active=True).order_by('first_name'),
        'active_page': 'tasks',
    }

    return render(request, 'activities/task_list.html', context)


@login_required
@tenant_required
def activity_create_view(request, activity_type):
    form_class = ACTIVITY_FORMS.get(activity_type)
    if form_class is None:
        raise Http404('Unknown activity type')

    if request.method == 'POST':
        form = form_class(request.POST, tenant=request.tenant)

        if form.is_valid():
            with transaction.atomic():
                activity = form.save(commit=False)
                activity.tenant = request.tenant
                activity.type = activity_type
                activity.created_by = request.user

                status = None
                if activity.is_task:
                    if activity.assigned_user is None:
                        activity.assigned_user = request.user
                    status = activity.status
                    activity.status = Activity.STATUS_TODO

                activity.save()

            if status and status != Activity.STATUS_TODO:
                _apply_status(request, activity, status)

            messages.success(request, f'{activity.get_type_display()} created successfully')
            return _redirect_after_save(request, activity)

        messages.error(request, 'Please correct the errors in the form')
    else:
        initial = {
            'deal': request.GET.get('deal'),
            'contact': request.GET.get('contact'),
        }
        form = form_class(tenant=request.tenant, initial=initial)

    context = {
        'form': form,
        'activity_type': activity_type,
        'form_title': f'New {dict(Activity.TYPE_CHOICES)[activity_type]}',
        'active_page': 'tasks' if activity_type == Activity.TYPE_TASK else 'activities',
    }
    return render(request, 'activities/activity_form.html', context)


@login_required
@tenant_required
def activity_edit_view(request, pk):
    activity = get_object_or_404(Activity, pk=pk, tenant=request.tenant)
    form_class = ACTIVITY_FORMS[activity.type]
    original_status = activity.status

    if request.method == 'POST':
        form = form_class(request.POST, instance=activity, tenant=request.tenant)

        if form.is_valid():
            activity = form.save(commit=False)
            if 'due_at' in form.changed_data:
                # Rescheduled tasks can be reminded again
                activity.reminder_sent_at = None
            new_status = activity.status
            activity.status = original_status
            activity.save()

            if activity.is_task and new_status != original_status:
                _apply_status(request, activity, new_status)

            messages.success(request, f'{activity.get_type_display()} updated successfully')
            return _redirect_after_save(request, activity)

        messages.error(request, 'Please correct the errors in the form')
    else:
        form = form_class(instance=activity, tenant=request.tenant)

    context = {
        'form': form,
        'activity': activity,
        'activity_type': activity.type,
        'form_title': f'Edit {activity.get_type_display()}',
        'active_page': 'tasks' if activity.is_task else 'activities',
    }
    return render(request, 'activities/activity_form.html', context)


@login_required
@tenant_required
@require_POST
def activity_delete_view(request, pk):
    activity = get_object_or_404(Activity, pk=pk, tenant=request.tenant)
    type_display = activity.get_type_display()
    was_task = activity.is_task
    activity.delete()

    if is_ajax(request):
        return JsonResponse({'success': True})

    messages.success(request, f'{type_display} deleted successfully')
    return redirect('activities:task_list' if was_task else 'activities:activity_list')


@login_required
@tenant_required
@require_POST
def task_status_view(request, pk):
    task = get_object_or_404(Activity, pk=pk, tenant=request.tenant, type=Activity.TYPE_TASK)

    status = request.POST.get('status')
    if status not in dict(Activity.STATUS_CHOICES):
        if is_ajax(request):
            return JsonResponse({'success': False, 'error': 'Invalid status'}, status=400)
        messages.error(request, 'Invalid status')
        return redirect('activities:task_list')

    delivery = _apply_status(request, task, status)

    if is_ajax(request):
        return JsonResponse({
            'success': True,
            'status': task.status,
            'completed_at': task.completed_at.isoformat() if task.completed_at else None,
            'delivery': delivery.status if delivery else None,
        })

    messages.success(request, f'Task marked as {task.get_status_display()}')
    return _redirect_after_save(request, task)
