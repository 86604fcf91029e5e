from django.apps import AppConfig


class CoreConfig(AppConfig):
    """
    Configuration for Core application

    This app contains:
        - Tenant model (multi-tenancy, branding, entity labels)
        - Colour presets
        - Dashboard view
        - Tenant settings

    Every other app scopes its rows by core.Tenant.
    """
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core'
    verbose_name = 'Core'
