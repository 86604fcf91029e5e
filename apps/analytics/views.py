from django.shortcuts import render, redirect
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.http import HttpResponse

from apps.accounts.decorators import tenant_required
from apps.deals.models import format_cents
from .forms import DealExportForm
from .services import (
    export_deals_csv,
    export_deals_workbook,
    export_filename,
    filter_export_deals,
    get_export_summary,
    get_forecast,
    get_overview,
    get_performance,
    get_revenue_over_time,
    get_win_rate_trend,
    tenant_stages,
    visible_deals,
)


@login_required
@tenant_required
def analytics_view(request):
    deals = list(visible_deals(request.tenant, request.user))

    overview = get_overview(deals, tenant_stages(request.tenant))
    forecast = get_forecast(deals)
    performance = get_performance(deals)
    revenue_over_time = get_revenue_over_time(deals)
    win_rate_trend = get_win_rate_trend(deals)

    for row in overview['by_stage']:
        row['value_display'] = format_cents(row['value_cents'])
    for row in forecast['rows']:
        row['weighted_display'] = format_cents(row['weighted_cents'])
    for entry in performance['leaderboard']:
        entry['won_value_display'] = format_cents(entry['won_value_cents'])
    for row in revenue_over_time:
        row['value_display'] = format_cents(row['value_cents'])

    # The export tab summarises the deals matching its filters
    export_form = DealExportForm(request.GET or None, tenant=request.tenant, user=request.user)
    export_deals = visible_deals(request.tenant, request.user)
    if export_form.is_bound and export_form.is_valid():
        export_deals = _filtered_export_deals(request, export_form)
    export_summary = get_export_summary(export_deals)
    export_summary['total_value_display'] = format_cents(export_summary['total_value_cents'])

    context = {
        'tab': request.GET.get('tab', 'overview'),
        'overview': overview,
        'forecast': forecast,
        'performance': performance,
        'revenue_over_time': revenue_over_time,
        'win_rate_trend': win_rate_trend,
        'pipeline_value': format_cents(overview['pipeline_value_cents']),
        'average_deal': format_cents(overview['average_deal_cents']),
        'weighted_value': format_cents(forecast['weighted_value_cents']),
        'export_form': export_form,
        'export_summary': export_summary,
        'active_page': 'analytics',
    }

    return render(request, 'analytics/analytics.html', context)


def _filtered_export_deals(request, form):
    owner = form.cleaned_data.get('owner')
    stage = form.cleaned_data.get('stage')
    return filter_export_deals(
        visible_deals(request.tenant, request.user),
        request.user,
        start_date=form.cleaned_data.get('start_date'),
        end_date=form.cleaned_data.get('end_date'),
        owner_id=owner.pk if owner else None,
        stage_id=stage.pk if stage else None,
    )


@login_required
@tenant_required
def export_view(request):
    form = DealExportForm(request.GET, tenant=request.tenant, user=request.user)
    if not form.is_valid():
        messages.error(request, 'Invalid export filters')
        return redirect('analytics:analytics')

    deals = _filtered_export_deals(request, form)

    if form.cleaned_data.get('format') == 'excel':
        response = HttpResponse(
            content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        )
        response['Content-Disposition'] = f'attachment; filename="{export_filename("xlsx")}"'
        export_deals_workbook(deals).save(response)
        return response

    response = HttpResponse(export_deals_csv(deals), content_type='text/csv; charset=utf-8')
    response['Content-Disposition'] = f'attachment; filename="{export_filename("csv")}"'
    return response
