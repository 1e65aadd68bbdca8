from rest_framework import serializers


class SalesmanSerializer(serializers.Serializer):
    """Salesman without the password hash"""

    id = serializers.CharField(read_only=True)
    shopId = serializers.CharField(source='shop_id')
    name = serializers.CharField()
    mobile = serializers.CharField()
    username = serializers.CharField()
    commissionRate = serializers.DecimalField(source='commission_rate', max_digits=5, decimal_places=2)
    isActive = serializers.BooleanField(source='is_active')
    createdAt = serializers.CharField(source='created_at', read_only=True)
    updatedAt = serializers.CharField(source='updated_at', read_only=True)


class SalesmanSummarySerializer(serializers.Serializer):
    salesmanId = serializers.CharField(source='salesman_id')
    salesmanName = serializers.SerializerMethodField()
    saleCount = serializers.IntegerField(source='sale_count')
    completedCount = serializers.IntegerField(source='completed_count')
    pendingCount = serializers.IntegerField(source='pending_count')
    totalAmount = serializers.DecimalField(source='total_amount', max_digits=14, decimal_places=2)
    earnedCommission = serializers.DecimalField(source='earned_commission', max_digits=14, decimal_places=2)
    pendingCommission = serializers.DecimalField(source='pending_commission', max_digits=14, decimal_places=2)

    def get_salesmanName(self, obj):
        return self.context.get('salesman_names', {}).get(obj.salesman_id, 'Unassigned')


class SessionSerializer(serializers.Serializer):
    salesmanId = serializers.CharField(source='salesman_id')
    shopId = serializers.CharField(source='shop_id')
    issuedAt = serializers.DateTimeField(source='issued_at')
    expiresAt = serializers.DateTimeField(source='expires_at')


class LoginSerializer(SessionSerializer):
    """Login response; the only place the token is handed out"""

    token = serializers.CharField()


class OwnerProfileSerializer(serializers.Serializer):
    name = serializers.CharField()
    mobile = serializers.CharField()
    email = serializers.CharField(allow_null=True, required=False)
    businessName = serializers.CharField(source='business_name', allow_null=True, required=False)
