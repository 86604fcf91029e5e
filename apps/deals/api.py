import logging

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response

from apps.automations.engine import InvalidStageTransition, move_deal_to_stage
from apps.core.utils import get_user_tenant
from apps.pipeline.models import Stage
from .models import Deal
from .serializers import AutomationDeliverySerializer, DealMoveSerializer, DealSerializer

logger = logging.getLogger(__name__)


class DealViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Deals of the current tenant.

    POST /api/deals/<id>/move/ {"stage": <id>} moves a deal and returns the
    deal plus the deliveries made by the stage's automations.
    """

    serializer_class = DealSerializer

    def get_tenant(self):
        tenant = get_user_tenant(self.request)
        if tenant is None:
            raise PermissionDenied('No tenant selected')
        return tenant

    def get_queryset(self):
        return Deal.objects.filter(tenant=self.get_tenant()).select_related(
            'stage', 'owner', 'contact', 'company'
        ).order_by('-created_at')

    @action(detail=True, methods=['post'])
    def move(self, request, pk=None):
        deal = self.get_object()

        payload = DealMoveSerializer(data=request.data)
        payload.is_valid(raise_exception=True)

        stage = Stage.objects.filter(pk=payload.validated_data['stage']).first()
        try:
            deliveries = move_deal_to_stage(deal, stage, user=request.user)
        except InvalidStageTransition as e:
            return Response({'success': False, 'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            'success': True,
            'deal': DealSerializer(deal).data,
            'deliveries': AutomationDeliverySerializer(deliveries, many=True).data,
        })
