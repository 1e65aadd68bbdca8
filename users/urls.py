from django.urls import path
from rest_framework.routers import SimpleRouter

from .views import (
    OwnerProfileView, SalesmanLoginView, SalesmanLogoutView,
    SalesmanSessionView, SalesmanViewSet,
)

router = SimpleRouter()
router.register(r'salesmen', SalesmanViewSet, basename='salesman')

urlpatterns = router.urls + [
    path('auth/salesman/login/', SalesmanLoginView.as_view(), name='salesman-login'),
    path('auth/salesman/logout/', SalesmanLogoutView.as_view(), name='salesman-logout'),
    path('auth/salesman/session/', SalesmanSessionView.as_view(), name='salesman-session'),
    path('auth/owner/', OwnerProfileView.as_view(), name='owner-profile'),
]
