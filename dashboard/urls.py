from rest_framework.routers import SimpleRouter
from .views import DashboardViewSet

# Mounted at api/, so no router root view here.
router = SimpleRouter()
# The 'basename' is required because there's no queryset on the viewset
router.register(r'dashboard', DashboardViewSet, basename='dashboard')

urlpatterns = router.urls
