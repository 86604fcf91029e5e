"""
Signup and team management.

Views call these after form validation; the guard rules that depend on
other users (last admin, owned records) live here and raise
TeamManagementError with a message suitable for the user.
"""

import logging
import re

from django.db import transaction

from apps.core.models import Tenant
from apps.pipeline.models import Pipeline
from .models import User, ROLE_ADMIN, ROLE_MEMBER

logger = logging.getLogger(__name__)


class TeamManagementError(Exception):
    """Raised when a team change would break a tenant invariant."""
    pass


def tenant_slug(name):
    """
    'Acme  Corp!' -> 'acme-corp'

    Lowercase, every non [a-z0-9] char becomes '-', runs of '-' collapse,
    leading/trailing '-' are trimmed.
    """
    slug = re.sub(r'[^a-z0-9]', '-', name.lower())
    slug = re.sub(r'-+', '-', slug)
    return slug.strip('-')


def split_full_name(name):
    """'Dana Scully Mulder' -> ('Dana', 'Scully Mulder')"""
    parts = name.strip().split(None, 1)
    if not parts:
        return '', ''
    if len(parts) == 1:
        return parts[0], ''
    return parts[0], parts[1]


@transaction.atomic
def register_tenant(tenant_name, name, email, password):
    """
    Create a tenant, its first admin user and the default pipeline.

    Everything is created in one transaction; callers validate input first
    (see SignupForm).
    """
    tenant = Tenant.objects.create(
        name=tenant_name.strip(),
        slug=tenant_slug(tenant_name),
    )

    first_name, last_name = split_full_name(name)
    user = User.objects.create_user(
        email=email,
        password=password,
        first_name=first_name,
        last_name=last_name,
        tenant=tenant,
        role=ROLE_ADMIN,
    )

    Pipeline.objects.create_default(tenant)

    logger.info(f"Tenant {tenant.slug} registered by {user.email}")
    return user


def admin_count(tenant):
    return User.objects.filter(tenant=tenant, role=ROLE_ADMIN).count()


def create_team_member(tenant, name, email, password, role):
    first_name, last_name = split_full_name(name)
    return User.objects.create_user(
        email=email,
        password=password,
        first_name=first_name,
        last_name=last_name,
        tenant=tenant,
        role=role,
    )


def update_team_member(member, name, email, role, password=None):
    """
    Update name, email, role and optionally the password.

    Raises:
        TeamManagementError: demoting the tenant's last admin
    """
    if member.role == ROLE_ADMIN and role == ROLE_MEMBER and admin_count(member.tenant) <= 1:
        raise TeamManagementError('Cannot change role: tenant must have at least one admin')

    member.first_name, member.last_name = split_full_name(name)
    member.email = email.lower()
    member.role = role
    if password:
        member.set_password(password)
    member.save()
    return member


def delete_team_member(member, acting_user):
    """
    Delete a user of the acting admin's tenant.

    Raises:
        TeamManagementError: self-deletion, last admin, or the user still
        owns contacts, companies, deals or assigned tasks
    """
    if member.pk == acting_user.pk:
        raise TeamManagementError('Cannot delete your own account')

    if member.role == ROLE_ADMIN and admin_count(member.tenant) <= 1:
        raise TeamManagementError('Cannot delete the last admin. Promote another user to admin first.')

    counts = member.get_owned_record_counts()
    if sum(counts.values()) > 0:
        raise TeamManagementError(
            f"Cannot delete user. They own {counts['contacts']} contacts, "
            f"{counts['companies']} companies, {counts['deals']} deals, "
            f"and {counts['tasks']} tasks. Reassign these first."
        )

    email = member.email
    member.delete()
    logger.info(f"User {email} deleted by {acting_user.email}")
