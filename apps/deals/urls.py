from django.urls import path
from . import views

app_name = 'deals'

urlpatterns = [
    path('', views.deal_list_view, name='deal_list'),
    path('board/', views.deal_kanban_view, name='deal_kanban'),
    path('create/', views.deal_create_view, name='deal_create'),
    path('<int:pk>/', views.deal_detail_view, name='deal_detail'),
    path('<int:pk>/edit/', views.deal_edit_view, name='deal_edit'),
    path('<int:pk>/delete/', views.deal_delete_view, name='deal_delete'),
    path('<int:pk>/move/', views.deal_move_view, name='deal_move'),
]
