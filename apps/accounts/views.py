
from django.shortcuts import render, redirect, get_object_or_404
from django.contrib.auth import authenticate, login, logout
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.db.models import Count, Q
from django.utils.translation import gettext_lazy as _
from django.views.decorators.http import require_POST
from django.views.decorators.cache import never_cache

from .models import User
from .forms import LoginForm, SignupForm, TeamMemberForm, ProfileForm
from .decorators import admin_required, tenant_required
from .services import (
    TeamManagementError,
    register_tenant,
    create_team_member,
    update_team_member,
    delete_team_member,
)



# AUTHENTICATION VIEWS
@never_cache
def login_view(request):
    # If already logged in, redirect to dashboard
    if request.user.is_authenticated:
        return redirect('core:dashboard')

    if request.method == 'POST':
        form = LoginForm(request.POST)

        if form.is_valid():
            email = form.cleaned_data['email']
            password = form.cleaned_data['password']
            remember = form.cleaned_data.get('remember', False)

            # Returns User object if valid, None if invalid or inactive
            user = authenticate(request, username=email, password=password)

            if user is not None:
                login(request, user)

                if remember:
                    # Session expires in 30 days
                    request.session.set_expiry(30 * 24 * 60 * 60)
                else:
                    # Session expires when browser closes
                    request.session.set_expiry(0)

                messages.success(
                    request,
                    _('Welcome back, {}!').format(user.get_full_name())
                )

                next_url = request.GET.get('next')
                if next_url and next_url.startswith('/'):
                    return redirect(next_url)
                return redirect('core:dashboard')

            messages.error(
                request,
                _('Invalid email or password. Please try again.')
            )
        else:
            messages.error(request, _('Please correct the errors below.'))

    else:
        form = LoginForm()

    context = {
        'form': form,
        'page_title': _('Login'),
    }

    return render(request, 'accounts/login.html', context)


@never_cache
def signup_view(request):
    if request.user.is_authenticated:
        return redirect('core:dashboard')

    if request.method == 'POST':
        form = SignupForm(request.POST)

        if form.is_valid():
            user = register_tenant(
                tenant_name=form.cleaned_data['tenant_name'],
                name=form.cleaned_data['name'],
                email=form.cleaned_data['email'],
                password=form.cleaned_data['password'],
            )
            login(request, user, backend='django.contrib.auth.backends.ModelBackend')

            messages.success(request, _('Welcome! Your workspace is ready.'))
            return redirect('core:dashboard')

        messages.error(request, _('Please correct the errors below.'))
    else:
        form = SignupForm()

    return render(request, 'accounts/signup.html', {'form': form, 'page_title': _('Sign Up')})


@login_required
def logout_view(request):
    logout(request)

    messages.success(request, _('You have been logged out successfully.'))

    return redirect('accounts:login')


# PROFILE VIEWS
@login_required
def profile_view(request):

    if request.method == 'POST':
        form = ProfileForm(request.POST, request.FILES, instance=request.user)
        if form.is_valid():
            form.save()
            messages.success(request, _('Your profile has been updated successfully!'))
            return redirect('accounts:profile')

        messages.error(request, _('Please correct the errors below.'))
    else:
        form = ProfileForm(instance=request.user)

    return render(request, 'accounts/profile.html', {'form': form, 'page_title': _('My Profile')})


# TEAM MANAGEMENT VIEWS (Admin Only)
@login_required
@tenant_required
@admin_required
def team_list_view(request):

    members = User.objects.filter(tenant=request.tenant).annotate(
        contacts_count=Count('owned_contacts', distinct=True),
        companies_count=Count('owned_companies', distinct=True),
        deals_count=Count('owned_deals', distinct=True),
        tasks_count=Count('assigned_activities', filter=Q(assigned_activities__type='task'), distinct=True),
    ).order_by('-date_joined')

    context = {
        'members': members,
        'active_page': 'team',
        'page_title': _('Team'),
    }

    return render(request, 'accounts/team_list.html', context)


@login_required
@tenant_required
@admin_required
def team_create_view(request):
    if request.method == 'POST':
        form = TeamMemberForm(request.POST)

        if form.is_valid():
            member = create_team_member(
                tenant=request.tenant,
                name=form.cleaned_data['name'],
                email=form.cleaned_data['email'],
                password=form.cleaned_data['password'],
                role=form.cleaned_data['role'],
            )
            messages.success(
                request,
                _('User {} has been created successfully!').format(member.get_full_name())
            )
            return redirect('accounts:team')

        messages.error(request, _('Please correct the errors below.'))
    else:
        form = TeamMemberForm()

    context = {
        'form': form,
        'form_title': _('Add Team Member'),
        'active_page': 'team',
    }

    return render(request, 'accounts/team_form.html', context)


@login_required
@tenant_required
@admin_required
def team_edit_view(request, pk):

    member = get_object_or_404(User, pk=pk, tenant=request.tenant)

    if request.method == 'POST':
        form = TeamMemberForm(request.POST, instance=member)

        if form.is_valid():
            try:
                update_team_member(
                    member,
                    name=form.cleaned_data['name'],
                    email=form.cleaned_data['email'],
                    role=form.cleaned_data['role'],
                    password=form.cleaned_data['password'] or None,
                )
            except TeamManagementError as e:
                messages.error(request, str(e))
            else:
                messages.success(request, _('User has been updated successfully!'))
                return redirect('accounts:team')
        else:
            messages.error(request, _('Please correct the errors below.'))
    else:
        form = TeamMemberForm(instance=member)

    context = {
        'form': form,
        'member': member,
        'form_title': _('Edit {}').format(member.get_full_name()),
        'active_page': 'team',
    }

    return render(request, 'accounts/team_form.html', context)


@login_required
@tenant_required
@admin_required
@require_POST
def team_delete_view(request, pk):

    member = get_object_or_404(User, pk=pk, tenant=request.tenant)
    member_name = member.get_full_name()

    try:
        delete_team_member(member, acting_user=request.user)
    except TeamManagementError as e:
        messages.error(request, str(e))
        return redirect('accounts:team')

    messages.success(
        request,
        _('User {} has been deleted successfully.').format(member_name)
    )

    return redirect('accounts:team')
