from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from django.shortcuts import redirect

# Main URL Configuration
# Routes all requests to appropriate apps

urlpatterns = [

    path('admin/', admin.site.urls),
    path('accounts/', include('apps.accounts.urls')),
    path('dashboard/', include('apps.core.urls')),
    path('', lambda request: redirect('core:dashboard') if request.user.is_authenticated else redirect('accounts:login')),
    path('contacts/', include('apps.contacts.urls')),
    path('deals/', include('apps.deals.urls')),
    path('activities/', include('apps.activities.urls')),
    path('analytics/', include('apps.analytics.urls')),
    path('settings/pipeline/', include('apps.pipeline.urls')),
    path('settings/automation-templates/', include('apps.automations.urls')),
    path('settings/custom-fields/', include('apps.customfields.urls')),
    path('api/custom-fields/', include('apps.customfields.api_urls')),
    path('api/', include('apps.deals.api_urls')),

]

if settings.DEBUG:
    # Media files (user uploads: avatars)
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
