from rest_framework import serializers


class ShopSerializer(serializers.Serializer):
    """Shop in its stored camelCase shape"""

    id = serializers.CharField(read_only=True)
    name = serializers.CharField()
    address = serializers.CharField()
    contactNumber = serializers.CharField(source='contact_number')
    email = serializers.CharField(allow_null=True, required=False)
    gstin = serializers.CharField(allow_null=True, required=False)
    ownerId = serializers.CharField(source='owner_id', allow_null=True, required=False)
    isActive = serializers.BooleanField(source='is_active')
    createdAt = serializers.CharField(source='created_at', read_only=True)
    updatedAt = serializers.CharField(source='updated_at', read_only=True)


class ProductSerializer(serializers.Serializer):
    """Product with its derived stock figures"""

    id = serializers.CharField(read_only=True)
    shopId = serializers.CharField(source='shop_id')
    shopName = serializers.SerializerMethodField()
    name = serializers.CharField()
    category = serializers.CharField(allow_null=True, required=False)
    description = serializers.CharField(allow_null=True, required=False)
    basePrice = serializers.DecimalField(source='base_price', max_digits=12, decimal_places=2)
    sellingPrice = serializers.DecimalField(source='selling_price', max_digits=12, decimal_places=2)
    quantity = serializers.IntegerField()
    unit = serializers.CharField(allow_null=True, required=False)
    imageUri = serializers.CharField(source='image_uri', allow_null=True, required=False)
    profitMargin = serializers.DecimalField(
        source='profit_margin',
        max_digits=12,
        decimal_places=2,
        read_only=True
    )
    stockValue = serializers.DecimalField(
        source='stock_value',
        max_digits=14,
        decimal_places=2,
        read_only=True
    )
    inStock = serializers.BooleanField(source='in_stock', read_only=True)
    createdAt = serializers.CharField(source='created_at', read_only=True)
    updatedAt = serializers.CharField(source='updated_at', read_only=True)

    def get_shopName(self, obj):
        """Name of the owning shop, or a placeholder once it was deleted"""
        shop_names = self.context.get('shop_names')
        if shop_names is None:
            return None
        return shop_names.get(obj.shop_id, 'Unknown Shop')
