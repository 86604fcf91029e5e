from django.urls import path
from . import views

app_name = 'customfields'

urlpatterns = [
    path('', views.field_list_view, name='field_list'),
    path('<int:pk>/delete/', views.field_delete_view, name='field_delete'),
]
