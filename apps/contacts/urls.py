from django.urls import path
from . import views

app_name = 'contacts'

urlpatterns = [
    path('', views.contact_list_view, name='contact_list'),
    path('create/', views.contact_create_view, name='contact_create'),
    path('<int:pk>/', views.contact_detail_view, name='contact_detail'),
    path('<int:pk>/edit/', views.contact_edit_view, name='contact_edit'),
    path('<int:pk>/delete/', views.contact_delete_view, name='contact_delete'),

    path('companies/', views.company_list_view, name='company_list'),
    path('companies/create/', views.company_create_view, name='company_create'),
    path('companies/<int:pk>/', views.company_detail_view, name='company_detail'),
    path('companies/<int:pk>/edit/', views.company_edit_view, name='company_edit'),
    path('companies/<int:pk>/delete/', views.company_delete_view, name='company_delete'),
]
