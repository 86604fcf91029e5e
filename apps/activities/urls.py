from django.urls import path
from . import views

app_name = 'activities'

urlpatterns = [
    path('', views.activity_list_view, name='activity_list'),
    path('tasks/', views.task_list_view, name='task_list'),
    path('new/<str:activity_type>/', views.activity_create_view, name='activity_create'),
    path('<int:pk>/edit/', views.activity_edit_view, name='activity_edit'),
    path('<int:pk>/delete/', views.activity_delete_view, name='activity_delete'),
    path('tasks/<int:pk>/status/', views.task_status_view, name='task_status'),
]
