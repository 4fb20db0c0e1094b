from rest_framework import serializers
from .models import Category, Product


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['id', 'nombre', 'descripcion', 'activo', 'created_at', 'updated_at']
        read_only_fields = ['activo', 'created_at', 'updated_at']


class CategoryStatusSerializer(serializers.Serializer):
    activo = serializers.BooleanField()


class ProductSerializer(serializers.ModelSerializer):
    # For writing: accept the category id
    categoria_id = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(),
        source='categoria',
    )
    categoria_nombre = serializers.CharField(read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'nombre', 'descripcion', 'precio', 'categoria_id', 'categoria_nombre',
            'imagen', 'stock', 'activo', 'created_at', 'updated_at',
        ]
        read_only_fields = ['activo', 'created_at', 'updated_at']

    def validate_precio(self, value):
        if value <= 0:
            raise serializers.ValidationError('El precio debe ser mayor a 0')
        return value
