from django.urls import path
from . import views

app_name = 'pipeline'

urlpatterns = [
    path('', views.pipeline_settings_view, name='settings'),
    path('stages/create/', views.stage_create_view, name='stage_create'),
    path('stages/<int:pk>/edit/', views.stage_edit_view, name='stage_edit'),
    path('stages/<int:pk>/delete/', views.stage_delete_view, name='stage_delete'),
    path('stages/<int:pk>/automations/', views.stage_automations_view, name='stage_automations'),
]
