from django.urls import path
from . import views

urlpatterns = [
    path('', views.field_api_view, name='custom_fields_api'),
]
