from django.conf import settings
from django.shortcuts import render, redirect, get_object_or_404
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.core.paginator import Paginator
from django.db import transaction
from django.db.models import Q, Count
from django.views.decorators.http import require_POST

from apps.accounts.decorators import tenant_required
from apps.customfields.models import OBJECT_TYPE_COMPANY, OBJECT_TYPE_CONTACT
from apps.customfields.services import delete_values_for, get_display_values
from .forms import ContactForm, CompanyForm
from .models import Contact, Company


# CONTACTS
@login_required
@tenant_required
def contact_list_view(request):
    contacts = Contact.objects.filter(tenant=request.tenant).select_related('owner').prefetch_related('tags')

    search_query = request.GET.get('search', '').strip()
    if search_query:
        contacts = contacts.filter(
            Q(first_name__icontains=search_query) |
            Q(last_name__icontains=search_query) |
            Q(email__icontains=search_query)
        )

    paginator = Paginator(contacts, settings.PAGINATION_SIZE)
    page_obj = paginator.get_page(request.GET.get('page', 1))

    context = {
        'contacts': page_obj,
        'page_obj': page_obj,
        'total_count': paginator.count,
        'search_query': search_query,
        'active_page': 'contacts',
    }

    return render(request, 'contacts/contact_list.html', context)


@login_required
@tenant_required
def contact_detail_view(request, pk):
    contact = get_object_or_404(
        Contact.objects.select_related('owner'),
        pk=pk,
        tenant=request.tenant
    )

    context = {
        'contact': contact,
        'deals': contact.deals.select_related('stage').order_by('-created_at'),
        'activities': contact.activities.select_related('created_by', 'assigned_user').order_by('-created_at')[:20],
        'custom_values': get_display_values(request.tenant, OBJECT_TYPE_CONTACT, contact.pk),
        'active_page': 'contacts',
    }

    return render(request, 'contacts/contact_detail.html', context)


@login_required
@tenant_required
def contact_create_view(request):
    if request.method == 'POST':
        form = ContactForm(request.POST, tenant=request.tenant)

        if form.is_valid():
            with transaction.atomic():
                contact = form.save(commit=False)
                contact.tenant = request.tenant
                contact.owner = request.user
                contact.save()
                form.save_m2m()
                form.save_custom_fields(contact)

            messages.success(request, f'Contact "{contact.get_full_name()}" created successfully')
            return redirect('contacts:contact_detail', pk=contact.pk)

        messages.error(request, 'Please correct the errors in the form')
    else:
        form = ContactForm(tenant=request.tenant)

    context = {
        'form': form,
        'form_title': 'New Contact',
        'submit_text': 'Create',
        'active_page': 'contacts',
    }
    return render(request, 'contacts/contact_form.html', context)


@login_required
@tenant_required
def contact_edit_view(request, pk):
    contact = get_object_or_404(Contact, pk=pk, tenant=request.tenant)

    if request.method == 'POST':
        form = ContactForm(request.POST, instance=contact, tenant=request.tenant)

        if form.is_valid():
            with transaction.atomic():
                contact = form.save()
                form.save_custom_fields(contact)

            messages.success(request, f'Contact "{contact.get_full_name()}" updated successfully')
            return redirect('contacts:contact_detail', pk=contact.pk)

        messages.error(request, 'Please correct the errors in the form')
    else:
        form = ContactForm(instance=contact, tenant=request.tenant)

    context = {
        'form': form,
        'contact': contact,
        'form_title': f'Edit Contact: {contact.get_full_name()}',
        'submit_text': 'Save Changes',
        'active_page': 'contacts',
    }
    return render(request, 'contacts/contact_form.html', context)


@login_required
@tenant_required
@require_POST
def contact_delete_view(request, pk):
    contact = get_object_or_404(Contact, pk=pk, tenant=request.tenant)
    contact_name = contact.get_full_name()

    with transaction.atomic():
        delete_values_for(request.tenant, OBJECT_TYPE_CONTACT, contact.pk)
        contact.delete()

    messages.success(request, f'Contact "{contact_name}" deleted successfully')
    return redirect('contacts:contact_list')


# COMPANIES
@login_required
@tenant_required
def company_list_view(request):
    companies = Company.objects.filter(tenant=request.tenant).select_related('owner').annotate(
        deals_count=Count('deals')
    ).order_by('-created_at', '-id')

    search_query = request.GET.get('search', '').strip()
    if search_query:
        companies = companies.filter(
            Q(name__icontains=search_query) |
            Q(website__icontains=search_query)
        )

    paginator = Paginator(companies, settings.PAGINATION_SIZE)
    page_obj = paginator.get_page(request.GET.get('page', 1))

    context = {
        'companies': page_obj,
        'page_obj': page_obj,
        'total_count': paginator.count,
        'search_query': search_query,
        'active_page': 'companies',
    }

    return render(request, 'contacts/company_list.html', context)


@login_required
@tenant_required
def company_detail_view(request, pk):
    company = get_object_or_404(
        Company.objects.select_related('owner'),
        pk=pk,
        tenant=request.tenant
    )

    context = {
        'company': company,
        'deals': company.deals.select_related('stage').order_by('-created_at'),
        'custom_values': get_display_values(request.tenant, OBJECT_TYPE_COMPANY, company.pk),
        'active_page': 'companies',
    }

    return render(request, 'contacts/company_detail.html', context)


@login_required
@tenant_required
def company_create_view(request):
    if request.method == 'POST':
        form = CompanyForm(request.POST, tenant=request.tenant)

        if form.is_valid():
            with transaction.atomic():
                company = form.save(commit=False)
                company.tenant = request.tenant
                company.owner = request.user
                company.save()
                form.save_custom_fields(company)

            messages.success(request, f'Company "{company.name}" created successfully')
            return redirect('contacts:company_detail', pk=company.pk)

        messages.error(request, 'Please correct the errors in the form')
    else:
        form = CompanyForm(tenant=request.tenant)

    context = {
        'form': form,
        'form_title': 'New Company',
        'submit_text': 'Create',
        'active_page': 'companies',
    }
    return render(request, 'contacts/company_form.html', context)


@login_required
@tenant_required
def company_edit_view(request, pk):
    company = get_object_or_404(Company, pk=pk, tenant=request.tenant)

    if request.method == 'POST':
        form = CompanyForm(request.POST, instance=company, tenant=request.tenant)

        if form.is_valid():
            with transaction.atomic():
                company = form.save()
                form.save_custom_fields(company)

            messages.success(request, f'Company "{company.name}" updated successfully')
            return redirect('contacts:company_detail', pk=company.pk)

        messages.error(request, 'Please correct the errors in the form')
    else:
        form = CompanyForm(instance=company, tenant=request.tenant)

    context = {
        'form': form,
        'company': company,
        'form_title': f'Edit Company: {company.name}',
        'submit_text': 'Save Changes',
        'active_page': 'companies',
    }
    return render(request, 'contacts/company_form.html', context)


@login_required
@tenant_required
@require_POST
def company_delete_view(request, pk):
    company = get_object_or_404(Company, pk=pk, tenant=request.tenant)
    company_name = company.name

    with transaction.atomic():
        delete_values_for(request.tenant, OBJECT_TYPE_COMPANY, company.pk)
        company.delete()

    messages.success(request, f'Company "{company_name}" deleted successfully')
    return redirect('contacts:company_list')
