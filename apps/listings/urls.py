from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'listings'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.ListingViewSet, basename='listing')

urlpatterns = [
    # GET    /api/listings/              - Browse available listings
    # POST   /api/listings/              - Create listing
    # GET    /api/listings/{id}/         - Listing detail
    # PATCH  /api/listings/{id}/         - Edit listing (owner)
    # GET    /api/listings/mine/         - Current user's listings
    # GET    /api/listings/featured/     - Landing page listings
    # GET    /api/listings/categories/   - Counts per category
    path('', include(router.urls)),
]
