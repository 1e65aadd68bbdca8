from rest_framework.routers import SimpleRouter

from .views import ProductViewSet, ShopViewSet

router = SimpleRouter()
router.register(r'shops', ShopViewSet, basename='shop')
router.register(r'products', ProductViewSet, basename='product')

urlpatterns = router.urls
