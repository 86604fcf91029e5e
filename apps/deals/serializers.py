from rest_framework import serializers

from .models import Deal


class DealSerializer(serializers.ModelSerializer):

    stage_name = serializers.CharField(source='stage.name', read_only=True)
    owner_name = serializers.CharField(source='owner.get_full_name', read_only=True)
    contact_name = serializers.SerializerMethodField()
    company_name = serializers.SerializerMethodField()
    value_display = serializers.CharField(read_only=True)
    status = serializers.CharField(read_only=True)

    class Meta:
        model = Deal
        fields = [
            'id', 'title', 'value_cents', 'value_display', 'status',
            'pipeline', 'stage', 'stage_name', 'owner', 'owner_name',
            'contact', 'contact_name', 'company', 'company_name',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_contact_name(self, obj):
        return obj.contact.get_full_name() if obj.contact_id else None

    def get_company_name(self, obj):
        return obj.company.name if obj.company_id else None


class DealMoveSerializer(serializers.Serializer):

    stage = serializers.IntegerField()


class AutomationDeliverySerializer(serializers.Serializer):

    id = serializers.IntegerField()
    template = serializers.IntegerField(source='template_id')
    recipient = serializers.CharField()
    status = serializers.CharField()
    error = serializers.CharField()
