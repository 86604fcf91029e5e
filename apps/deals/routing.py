from django.urls import path

from . import consumers

websocket_urlpatterns = [
    path('ws/deals/board/', consumers.PipelineBoardConsumer.as_asgi()),
]
