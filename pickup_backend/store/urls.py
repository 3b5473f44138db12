# store/urls.py

from rest_framework.routers import SimpleRouter

from store.views import AdminStoreViewSet, PublicStoreViewSet

public_router = SimpleRouter()
public_router.register(r"stores", PublicStoreViewSet, basename="public-stores")

admin_router = SimpleRouter()
admin_router.register(r"stores", AdminStoreViewSet, basename="admin-stores")

public_urlpatterns = public_router.urls
admin_urlpatterns = admin_router.urls
