from django.urls import path
from . import views

urlpatterns = [
    path('api/submit', views.submit_registration, name='submit_registration'),
]
