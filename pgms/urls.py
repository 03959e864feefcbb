"""
URL configuration for pgms project.
"""
from django.urls import path, include

# Import health check URLs
from common.health import get_health_urls

urlpatterns = [
    path('api/', include('api.urls')),  # API routes
]

# Add health check endpoints (for load balancers, monitoring)
urlpatterns += get_health_urls()
