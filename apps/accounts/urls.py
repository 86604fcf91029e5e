from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [

    path('login/', views.login_view, name='login'),
    path('signup/', views.signup_view, name='signup'),
    path('logout/', views.logout_view, name='logout'),
    path('profile/', views.profile_view, name='profile'),
    path('team/', views.team_list_view, name='team'),
    path('team/create/', views.team_create_view, name='team_create'),
    path('team/<int:pk>/edit/', views.team_edit_view, name='team_edit'),
    path('team/<int:pk>/delete/', views.team_delete_view, name='team_delete'),
]
