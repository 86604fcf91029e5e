from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class AccountsConfig(AppConfig):
    """
    Configuration class for accounts app

    This app contains:
        - User model (email login, tenant, role)
        - Signup (creates tenant + admin + default pipeline)
        - Team management
        - Access decorators
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.accounts'
    verbose_name = _('Accounts')
