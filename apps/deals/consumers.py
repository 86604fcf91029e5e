"""
Live deal board.

Each tenant's open boards join the group pipeline_<tenant_id>; the engine
calls broadcast_deal_moved() after every committed stage change.
"""

import logging

from asgiref.sync import async_to_sync
from channels.generic.websocket import JsonWebsocketConsumer
from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)


def board_group_name(tenant_id):
    return f'pipeline_{tenant_id}'


class PipelineBoardConsumer(JsonWebsocketConsumer):

    def connect(self):
        user = self.scope.get('user')
        if user is None or not user.is_authenticated or user.tenant_id is None:
            self.close()
            return

        self.group_name = board_group_name(user.tenant_id)
        async_to_sync(self.channel_layer.group_add)(self.group_name, self.channel_name)
        self.accept()

    def disconnect(self, code):
        if hasattr(self, 'group_name'):
            async_to_sync(self.channel_layer.group_discard)(self.group_name, self.channel_name)

    def receive_json(self, content, **kwargs):
        # The board is read-only over the socket; moves go through HTTP
        pass

    def deal_moved(self, event):
        self.send_json({'type': 'deal.moved', 'deal': event['deal']})


def broadcast_deal_moved(deal, previous_stage):
    """Notify open boards of the tenant. Errors are logged, never raised."""
    try:
        channel_layer = get_channel_layer()
        if channel_layer is None:
            return

        async_to_sync(channel_layer.group_send)(board_group_name(deal.tenant_id), {
            'type': 'deal.moved',
            'deal': {
                'id': deal.pk,
                'title': deal.title,
                'value_cents': deal.value_cents,
                'stage_id': deal.stage_id,
                'previous_stage_id': previous_stage.pk if previous_stage else None,
            },
        })
    except Exception:
        logger.exception(f"Board broadcast failed for deal {deal.pk}")
