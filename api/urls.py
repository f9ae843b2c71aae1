# api/urls.py

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView

from . import views

router = DefaultRouter()
router.register(r'donor-organs', views.DonorOrganViewSet, basename='donor-organ')
router.register(r'matches', views.MatchViewSet, basename='match')

app_name = 'api'

urlpatterns = [
    path('', include(router.urls)),

    path('match/', views.match_donor, name='match-donor'),

    path('token/', views.TokenObtainView.as_view(), name='token-obtain'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),
]

# Available endpoints:
# POST /api/match/                          - Run matching (live or simulation)
# GET  /api/donor-organs/                   - List donor organs (?organ_type=, ?status=)
# GET  /api/donor-organs/{id}/              - Get one donor organ
# GET  /api/matches/?donor_organ={id}       - Persisted matches, by rank
# POST /api/matches/{id}/override/          - Admin re-rank with reason
# POST /api/matches/{id}/status/            - Admin status change (contacted, accepted, declined)
# POST /api/token/                          - JWT pair (username or email + password)
# POST /api/token/refresh/                  - Refresh access token
