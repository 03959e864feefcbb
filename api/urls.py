"""
API URLs
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from subscriptions.views import SubscriptionViewSet
from rent.views import RentViewSet

# Create router
router = DefaultRouter()
router.register(r'subscriptions', SubscriptionViewSet, basename='subscription')
router.register(r'rent', RentViewSet, basename='rent')

urlpatterns = [
    path('', include(router.urls)),
]
