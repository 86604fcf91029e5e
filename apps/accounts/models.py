# Models:
# 1. User - Custom user model (replaces Django's default)


from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin, BaseUserManager
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


ROLE_ADMIN = 'admin'
ROLE_MEMBER = 'member'

ROLE_CHOICES = [
    (ROLE_ADMIN, _('Administrator')),
    (ROLE_MEMBER, _('Member')),
]


# USER MANAGER (handles user creation)
class UserManager(BaseUserManager):
    """
    Custom user manager for User model

    Provides methods to:
    - Create regular users
    - Create superusers
    - Handle email-based authentication
    """

    def create_user(self, email, password=None, **extra_fields):
        """
        Create and save a regular user

        Args:
            email (str): User's email address (required)
            password (str): User's password (required)
            **extra_fields: Additional fields (first_name, tenant, role, etc.)

        Raises:
            ValueError: If email is not provided

        Example:
            user = User.objects.create_user(
                email='rep@acme.com',
                password='securepass123',
                first_name='Dana',
                tenant=tenant,
                role='member'
            )
        """
        if not email:
            raise ValueError(_('Users must have an email address'))

        # Emails are stored lowercase so lookups stay case-insensitive
        email = self.normalize_email(email).lower()

        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)

        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)

        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """
        Create and save a superuser

        Superusers have all permissions and can access admin panel.
        They are not bound to a tenant and pick one from the tenant selector.
        """
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('role', ROLE_ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError(_('Superuser must have is_staff=True'))
        if extra_fields.get('is_superuser') is not True:
            raise ValueError(_('Superuser must have is_superuser=True'))

        return self.create_user(email, password, **extra_fields)


# USER MODEL
class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model for the CRM

    Features:
    - Email-based authentication (no username)
    - Multi-tenancy support (tenant field)
    - Role-based access (admin, member)
    """

    # Email as primary identifier (instead of username)
    email = models.EmailField(_('email address'), unique=True, max_length=255, db_index=True, help_text=_('Required. Used for login.'))
    first_name = models.CharField(_('first name'), max_length=50, blank=True)
    last_name = models.CharField(_('last name'), max_length=50, blank=True)

    # TENANT & ROLE (Multi-tenancy)
    tenant = models.ForeignKey('core.Tenant', on_delete=models.CASCADE, related_name='users',
             null=True, blank=True, verbose_name=_('tenant'), help_text=_('The organisation this user belongs to'))

    role = models.CharField(_('role'), max_length=20, choices=ROLE_CHOICES, default=ROLE_MEMBER, db_index=True,
                            help_text=_('User role: admin (full access) or member (own records)'))

    avatar = models.ImageField(_('profile picture'), upload_to='avatars/%Y/%m/', blank=True, null=True, help_text=_('Profile picture (recommended: 300x300px, max 2MB)'))
    is_active = models.BooleanField(_('active'), default=True, help_text=_('Designates whether this user should be treated as active. Unselect this instead of deleting accounts.'))
    is_staff = models.BooleanField(_('staff status'), default=False, help_text=_('Designates whether the user can log into admin site.'))
    date_joined = models.DateTimeField(_('date joined'), default=timezone.now)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['first_name', 'last_name']

    class Meta:
        verbose_name = _('user')
        verbose_name_plural = _('users')
        ordering = ['-date_joined']
        indexes = [
            models.Index(fields=['tenant', 'role'], name='user_tenant_role_idx'),
            models.Index(fields=['is_active'], name='user_active_idx'),
        ]

    def __str__(self):
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name} ({self.email})"
        return self.email

    # HELPER METHODS
    def get_full_name(self):
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        elif self.first_name:
            return self.first_name
        return self.email

    def get_short_name(self):

        return self.first_name if self.first_name else self.email

    def get_initials(self):
        if self.first_name and self.last_name:
            return f"{self.first_name[0]}{self.last_name[0]}".upper()
        elif self.first_name:
            return self.first_name[0].upper()
        return self.email[0].upper()

    # ROLE CHECKS
    def is_admin(self):

        return self.role == ROLE_ADMIN or self.is_superuser

    def is_member(self):

        return self.role == ROLE_MEMBER

    # OWNERSHIP
    def get_owned_record_counts(self):
        """
        Records that block deleting this user.

        Returns:
            dict: contacts, companies, deals and assigned tasks counts
        """
        return {
            'contacts': self.owned_contacts.count(),
            'companies': self.owned_companies.count(),
            'deals': self.owned_deals.count(),
            'tasks': self.assigned_activities.filter(type='task').count(),
        }
