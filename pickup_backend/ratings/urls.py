# ratings/urls.py

from rest_framework.routers import SimpleRouter

from ratings.views import RatingViewSet

public_router = SimpleRouter()
public_router.register(r"ratings", RatingViewSet, basename="user-ratings")

public_urlpatterns = public_router.urls
