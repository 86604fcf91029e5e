from django.urls import path
from . import views

app_name = 'automations'

urlpatterns = [
    path('', views.template_list_view, name='template_list'),
    path('create/', views.template_create_view, name='template_create'),
    path('<int:pk>/edit/', views.template_edit_view, name='template_edit'),
    path('<int:pk>/delete/', views.template_delete_view, name='template_delete'),
    path('<int:pk>/toggle/', views.template_toggle_view, name='template_toggle'),
    path('deliveries/', views.delivery_list_view, name='delivery_list'),
]
