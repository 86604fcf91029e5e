from django.urls import path
from . import views


app_name = 'core'

urlpatterns = [
    path('', views.dashboard_view, name='dashboard'),
    path('select-tenant/', views.tenant_selector_view, name='tenant_selector'),
    path('settings/branding/', views.branding_settings_view, name='branding'),
    path('settings/labels/', views.entity_labels_view, name='entity_labels'),
]
