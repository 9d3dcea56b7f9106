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
            name='Transaction',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('transaction_reference', models.CharField(db_index=True, max_length=100, unique=True)),
                ('transaction_type', models.CharField(choices=[('paystack', 'Paystack'), ('mpesa', 'M-Pesa')], db_index=True, default='paystack', max_length=20)),
                ('transaction_purpose', models.CharField(choices=[('wallet_topup', 'Wallet Top-up'), ('other', 'Other'), ('contribution', 'Contribution')], default='wallet_topup', max_length=20)),
                ('transaction_amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('transaction_phone_number', models.CharField(blank=True, max_length=15, null=True)),
                ('transaction_status', models.CharField(choices=[('pending', 'Pending'), ('success', 'Success'), ('failed', 'Failed')], db_index=True, default='pending', max_length=20)),
                ('transaction_result_code', models.IntegerField(blank=True, null=True)),
                ('transaction_result_desc', models.TextField(blank=True, null=True)),
                ('transaction_receipt_number', models.CharField(blank=True, max_length=100, null=True)),
                ('transaction_date', models.DateTimeField(blank=True, null=True)),
                ('transaction_callback_data', models.JSONField(blank=True, null=True)),
                ('transaction_metadata', models.JSONField(blank=True, default=dict)),
                ('transaction_created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('transaction_updated_at', models.DateTimeField(auto_now=True)),
                ('transaction_chama', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='payment_transactions', to='chama.chama')),
                ('transaction_user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='payment_transactions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'mpesa_transactions',
                'indexes': [
                    models.Index(fields=['transaction_user', 'transaction_status'], name='mpesa_tx_user_status_idx'),
                    models.Index(fields=['transaction_type', 'transaction_status', 'transaction_created_at'], name='mpesa_tx_stuck_lookup_idx'),
                ],
            },
        ),
    ]
