from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('chama', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('notification_title', models.CharField(blank=True, max_length=100, null=True)),
                ('notification_message', models.TextField()),
                ('notification_type', models.CharField(choices=[('announcement', 'Announcement'), ('payment_success', 'Payment Successful'), ('payment_failed', 'Payment Failed'), ('join_request', 'Join Request'), ('member_joined', 'Member Joined'), ('transaction', 'Transaction')], max_length=30)),
                ('notification_priority', models.CharField(choices=[('low', 'Low'), ('normal', 'Normal'), ('high', 'High')], default='normal', max_length=10)),
                ('notification_data', models.JSONField(blank=True, default=dict)),
                ('notification_is_read', models.BooleanField(default=False)),
                ('notification_created_at', models.DateTimeField(auto_now_add=True)),
                ('notification_updated_at', models.DateTimeField(auto_now=True)),
                ('notification_chama', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, to='chama.chama')),
                ('notification_sender', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='sent_notifications', to=settings.AUTH_USER_MODEL)),
                ('notification_user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-notification_created_at'],
            },
        ),
    ]
