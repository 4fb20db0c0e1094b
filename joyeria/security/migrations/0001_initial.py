import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='LoginAttempt',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('email', models.CharField(max_length=255)),
                ('ip_address', models.CharField(max_length=45)),
                ('user_agent', models.TextField(blank=True, default='')),
                ('attempt_time', models.DateTimeField(auto_now_add=True)),
                ('success', models.BooleanField()),
                ('failure_reason', models.CharField(blank=True, max_length=100, null=True)),
            ],
            options={
                'db_table': 'login_attempts',
                'ordering': ['-attempt_time'],
                'indexes': [
                    models.Index(fields=['email'], name='idx_login_attempts_email'),
                    models.Index(fields=['attempt_time'], name='idx_login_attempts_time'),
                ],
            },
        ),
        migrations.CreateModel(
            name='LoginSecurity',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('email', models.CharField(max_length=255, unique=True)),
                ('login_attempts', models.IntegerField(default=0)),
                ('last_login_attempt', models.DateTimeField(blank=True, null=True)),
                ('login_blocked_until', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'login_security',
                'verbose_name_plural': 'login security',
                'indexes': [
                    models.Index(fields=['email'], name='idx_login_security_email'),
                    models.Index(fields=['login_blocked_until'], name='idx_login_security_blocked'),
                ],
            },
        ),
        migrations.CreateModel(
            name='SecurityQuestion',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('question_text', models.CharField(max_length=500)),
                ('answer_hash', models.CharField(max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='security_question', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'security_questions',
                'indexes': [
                    models.Index(fields=['user'], name='idx_security_questions_user_id'),
                ],
            },
        ),
    ]
