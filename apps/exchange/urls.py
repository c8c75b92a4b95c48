from django.urls import path
from . import views

app_name = 'exchange'

urlpatterns = [
    # Listing operations
    path('listings/<uuid:listing_id>/redeem/', views.redeem_listing, name='redeem'),
    path('listings/<uuid:listing_id>/swap/', views.request_swap, name='request-swap'),
    path('listings/<uuid:listing_id>/moderate/', views.moderate_listing, name='moderate'),

    # Swap requests
    path('swaps/', views.my_swap_requests, name='my-swaps'),
    path('swaps/incoming/', views.incoming_swap_requests, name='incoming-swaps'),
    path('swaps/<uuid:swap_id>/accept/', views.accept_swap, name='accept-swap'),
    path('swaps/<uuid:swap_id>/decline/', views.decline_swap, name='decline-swap'),
    path('swaps/<uuid:swap_id>/complete/', views.complete_swap, name='complete-swap'),
    path('swaps/<uuid:swap_id>/cancel/', views.cancel_swap, name='cancel-swap'),

    # Points
    path('points/', views.my_points, name='my-points'),
    path('points/<uuid:user_id>/credit/', views.credit_points, name='credit-points'),

    # Admin panel
    path('admin/accounts/', views.admin_accounts, name='admin-accounts'),
    path('admin/listings/', views.admin_listings, name='admin-listings'),
]
