from rest_framework import serializers


class EmailSerializer(serializers.Serializer):
    email = serializers.CharField(max_length=255, trim_whitespace=True)


class SetSecurityQuestionSerializer(EmailSerializer):
    questionType = serializers.CharField(trim_whitespace=True)
    customQuestion = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)
    answer = serializers.CharField(trim_whitespace=False)


class VerifyAnswerSerializer(serializers.Serializer):
    userId = serializers.IntegerField(required=False, allow_null=True)
    email = serializers.CharField(required=False, allow_blank=True, max_length=255)
    answer = serializers.CharField(trim_whitespace=False)

    def validate(self, attrs):
        if attrs.get('userId') is None and not attrs.get('email'):
            raise serializers.ValidationError('userId o email es requerido')
        return attrs


class ResetPasswordSerializer(VerifyAnswerSerializer):
    newPassword = serializers.CharField(trim_whitespace=False)


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField(max_length=255, trim_whitespace=False)
    password = serializers.CharField(trim_whitespace=False)
