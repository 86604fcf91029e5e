"""
Sales analytics and deal exports.

Members only ever see their own deals; admins see the whole tenant.
Metrics are computed in Python over one deal query per request.
"""

import csv
import io
from datetime import date, timedelta

from django.utils import timezone
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from apps.deals.models import Deal, format_cents
from apps.pipeline.models import Stage

WIN_RATE_WINDOW_DAYS = 90
TREND_MONTHS = 6

EXPORT_HEADERS = [
    'Deal Title', 'Stage', 'Value', 'Owner', 'Contact',
    'Company', 'Created Date', 'Updated Date', 'Status',
]


def visible_deals(tenant, user):
    deals = Deal.objects.filter(tenant=tenant).select_related('stage', 'owner', 'contact', 'company')
    if not user.is_admin():
        deals = deals.filter(owner=user)
    return deals.order_by('-created_at')


def _is_open(deal):
    return not deal.stage.is_won and not deal.stage.is_lost


def _age_days(deal):
    return (deal.updated_at - deal.created_at).total_seconds() / 86400


# OVERVIEW
def get_overview(deals, stages, now=None):
    """
    Args:
        deals: iterable of Deal with stage loaded
        stages: the tenant's stages in position order

    Returns:
        dict with cents amounts, percentages and day counts
    """
    now = now or timezone.now()
    window_start = now - timedelta(days=WIN_RATE_WINDOW_DAYS)
    deals = list(deals)

    open_deals = [deal for deal in deals if _is_open(deal)]
    pipeline_value_cents = sum(deal.value_cents for deal in open_deals)
    average_deal_cents = pipeline_value_cents / len(open_deals) if open_deals else 0

    recent_closed = [
        deal for deal in deals
        if deal.created_at >= window_start and not _is_open(deal)
    ]
    recent_won = [deal for deal in recent_closed if deal.stage.is_won]
    win_rate = len(recent_won) / len(recent_closed) * 100 if recent_closed else 0

    won_in_window = [deal for deal in deals if deal.stage.is_won and deal.updated_at >= window_start]
    sales_velocity_days = (
        round(sum(int(_age_days(deal)) for deal in won_in_window) / len(won_in_window))
        if won_in_window else 0
    )

    by_stage = []
    for stage in stages:
        if stage.is_won or stage.is_lost:
            continue
        stage_deals = [deal for deal in open_deals if deal.stage_id == stage.pk]
        by_stage.append({
            'stage': stage,
            'count': len(stage_deals),
            'value_cents': sum(deal.value_cents for deal in stage_deals),
        })

    return {
        'pipeline_value_cents': pipeline_value_cents,
        'active_deal_count': len(open_deals),
        'average_deal_cents': average_deal_cents,
        'win_rate': win_rate,
        'sales_velocity_days': sales_velocity_days,
        'by_stage': by_stage,
    }


# TRENDS
def _month_start(value):
    local = timezone.localtime(value)
    return date(local.year, local.month, 1)


def get_revenue_over_time(deals, months=TREND_MONTHS):
    """
    Won value per month of creation, oldest first.

    Only months that have won deals are listed; the last `months` of them
    are kept.
    """
    totals = {}
    for deal in deals:
        if not deal.stage.is_won:
            continue
        month = _month_start(deal.created_at)
        totals[month] = totals.get(month, 0) + deal.value_cents

    return [
        {'month': month, 'label': month.strftime('%b %Y'), 'value_cents': totals[month]}
        for month in sorted(totals)[-months:]
    ]


def get_win_rate_trend(deals, months=TREND_MONTHS):
    """Won / closed per month of creation, oldest first."""
    stats = {}
    for deal in deals:
        if _is_open(deal):
            continue
        entry = stats.setdefault(_month_start(deal.created_at), {'closed': 0, 'won': 0})
        entry['closed'] += 1
        if deal.stage.is_won:
            entry['won'] += 1

    return [
        {
            'month': month,
            'label': month.strftime('%b %Y'),
            'deals': stats[month]['closed'],
            'win_rate': stats[month]['won'] / stats[month]['closed'] * 100,
        }
        for month in sorted(stats)[-months:]
    ]


# FORECAST
def get_forecast(deals):
    """Weighted pipeline: Σ value × stage probability / 100 over open deals."""
    rows = []
    for deal in deals:
        if not _is_open(deal):
            continue
        rows.append({
            'deal': deal,
            'probability': deal.stage.probability_percent,
            'weighted_cents': deal.value_cents * deal.stage.probability_percent / 100,
        })

    return {
        'rows': rows,
        'pipeline_value_cents': sum(row['deal'].value_cents for row in rows),
        'weighted_value_cents': sum(row['weighted_cents'] for row in rows),
    }


# PERFORMANCE
def get_performance(deals):
    deals = list(deals)
    won_deals = [deal for deal in deals if deal.stage.is_won]
    average_cycle_days = sum(_age_days(deal) for deal in won_deals) / len(won_deals) if won_deals else 0

    owners = {}
    for deal in deals:
        entry = owners.setdefault(deal.owner_id, {
            'name': deal.owner.get_full_name(),
            'won': 0,
            'closed': 0,
            'won_value_cents': 0,
        })
        if deal.stage.is_won:
            entry['won'] += 1
            entry['won_value_cents'] += deal.value_cents
        if not _is_open(deal):
            entry['closed'] += 1

    leaderboard = []
    for entry in owners.values():
        if entry['won'] == 0:
            continue
        entry['win_rate'] = entry['won'] / entry['closed'] * 100
        leaderboard.append(entry)
    leaderboard.sort(key=lambda entry: entry['won_value_cents'], reverse=True)

    return {
        'average_cycle_days': round(average_cycle_days),
        'leaderboard': leaderboard,
    }


# EXPORT
def filter_export_deals(deals, user, start_date=None, end_date=None, owner_id=None, stage_id=None):
    """Dates are inclusive; the owner filter applies to admins only."""
    if start_date:
        deals = deals.filter(created_at__date__gte=start_date)
    if end_date:
        deals = deals.filter(created_at__date__lte=end_date)
    if owner_id and user.is_admin():
        deals = deals.filter(owner_id=owner_id)
    if stage_id:
        deals = deals.filter(stage_id=stage_id)
    return deals


def get_export_summary(deals):
    """Total value and won / lost / open counts of a filtered deal set."""
    summary = {'total_value_cents': 0, 'won': 0, 'lost': 0, 'open': 0, 'count': 0}
    for deal in deals:
        summary['total_value_cents'] += deal.value_cents
        summary['count'] += 1
        summary[deal.status.lower()] += 1
    return summary


def export_row(deal):
    return [
        deal.title,
        deal.stage.name,
        format_cents(deal.value_cents, thousands=False),
        deal.owner.get_full_name(),
        deal.contact.get_full_name() if deal.contact_id else '',
        deal.company.name if deal.company_id else '',
        timezone.localtime(deal.created_at).strftime('%Y-%m-%d'),
        timezone.localtime(deal.updated_at).strftime('%Y-%m-%d'),
        deal.status,
    ]


def export_filename(extension='csv', today=None):
    today = today or timezone.localdate()
    return f'deals-export-{today.isoformat()}.{extension}'


def export_deals_csv(deals):
    """CSV text; fields with commas, quotes or newlines are quoted."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator='\n')
    writer.writerow(EXPORT_HEADERS)
    for deal in deals:
        writer.writerow(export_row(deal))
    return output.getvalue().rstrip('\n')


def export_deals_workbook(deals):
    wb = Workbook()
    ws = wb.active
    ws.title = 'Deals'

    for col, header in enumerate(EXPORT_HEADERS, start=1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.font = Font(bold=True, color='FFFFFF')
        cell.fill = PatternFill(start_color='667eea', end_color='667eea', fill_type='solid')

    for row, deal in enumerate(deals, start=2):
        for col, value in enumerate(export_row(deal), start=1):
            ws.cell(row=row, column=col, value=value)

    for column_cells in ws.columns:
        max_length = max(len(str(cell.value or '')) for cell in column_cells)
        ws.column_dimensions[column_cells[0].column_letter].width = min(max_length + 2, 50)

    return wb


def tenant_stages(tenant):
    return Stage.objects.filter(pipeline__tenant=tenant).order_by('position', 'id')
