from rest_framework import serializers


class SaleSerializer(serializers.Serializer):
    """
    Sale as listed to the owner and the salesman.

    Product and salesman names come from the serializer context; a sale
    whose product or salesman was deleted shows a placeholder.
    """

    id = serializers.CharField(read_only=True)
    shopId = serializers.CharField(source='shop_id')
    productId = serializers.CharField(source='product_id')
    productName = serializers.SerializerMethodField()
    salesmanId = serializers.CharField(source='salesman_id')
    salesmanName = serializers.SerializerMethodField()
    customerName = serializers.CharField(source='customer_name')
    quantity = serializers.IntegerField()
    totalAmount = serializers.DecimalField(source='total_amount', max_digits=14, decimal_places=2)
    commission = serializers.DecimalField(max_digits=14, decimal_places=2)
    status = serializers.CharField()
    rejectionReason = serializers.CharField(source='rejection_reason', allow_null=True, required=False)
    createdAt = serializers.CharField(source='created_at', read_only=True)
    updatedAt = serializers.CharField(source='updated_at', read_only=True)

    def get_productName(self, obj):
        return self.context.get('product_names', {}).get(obj.product_id, 'Unknown Product')

    def get_salesmanName(self, obj):
        return self.context.get('salesman_names', {}).get(obj.salesman_id, 'Unassigned')


class SaleMetricsSerializer(serializers.Serializer):
    totalRevenue = serializers.DecimalField(source='total_revenue', max_digits=14, decimal_places=2)
    totalCommission = serializers.DecimalField(source='total_commission', max_digits=14, decimal_places=2)
    pendingCommission = serializers.DecimalField(source='pending_commission', max_digits=14, decimal_places=2)
    todaysSalesAmount = serializers.DecimalField(source='todays_sales_amount', max_digits=14, decimal_places=2)
    pendingCount = serializers.IntegerField(source='pending_count')
    completedCount = serializers.IntegerField(source='completed_count')
    rejectedCount = serializers.IntegerField(source='rejected_count')
    totalCount = serializers.IntegerField(source='total_count')
