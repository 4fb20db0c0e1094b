from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'first_name', 'last_name', 'is_active', 'is_staff', 'last_activity', 'created_at', 'updated_at']
        read_only_fields = fields


class UserCreateSerializer(serializers.ModelSerializer):
    """Self-registration: ``nombre`` fills first_name and the email doubles as username"""
    email = serializers.EmailField(max_length=254, error_messages={'invalid': 'Formato de email inválido'})
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    nombre = serializers.CharField(source='first_name', max_length=150)

    class Meta:
        model = User
        fields = ['email', 'password', 'nombre']

    def validate_email(self, value):
        value = value.strip().lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError('El email ya está registrado', code='duplicate')
        return value

    def validate(self, attrs):
        candidate = User(email=attrs['email'], username=attrs['email'], first_name=attrs['first_name'])
        try:
            validate_password(attrs['password'], user=candidate)
        except DjangoValidationError as e:
            raise serializers.ValidationError({'password': list(e.messages)})
        return attrs

    def create(self, validated_data):
        password = validated_data.pop('password')
        user = User(username=validated_data['email'][:150], is_active=True, **validated_data)
        user.set_password(password)
        user.save()
        return user
