from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Wallet',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('wallet_balance', models.DecimalField(decimal_places=6, default=0, max_digits=18)),
                ('wallet_currency', models.CharField(default='KES', max_length=3)),
                ('wallet_created_at', models.DateTimeField(auto_now_add=True)),
                ('wallet_updated_at', models.DateTimeField(auto_now=True)),
                ('wallet_user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='wallet', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='WalletTransaction',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('wallet_transaction_type', models.CharField(choices=[('deposit', 'Deposit'), ('withdrawal', 'Withdrawal'), ('fee', 'Fee')], max_length=20)),
                ('wallet_transaction_amount', models.DecimalField(decimal_places=6, max_digits=18)),
                ('wallet_transaction_description', models.CharField(blank=True, max_length=255)),
                ('wallet_transaction_status', models.CharField(choices=[('pending', 'Pending'), ('completed', 'Completed'), ('failed', 'Failed')], default='completed', max_length=20)),
                ('wallet_transaction_reference', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ('wallet_transaction_payment_method', models.CharField(blank=True, max_length=30, null=True)),
                ('wallet_transaction_currency', models.CharField(default='KES', max_length=3)),
                ('wallet_transaction_created_at', models.DateTimeField(auto_now_add=True)),
                ('wallet_transaction_user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='wallet_transactions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-wallet_transaction_created_at'],
            },
        ),
        migrations.CreateModel(
            name='PlatformFee',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('platform_fee_type', models.CharField(default='transaction', max_length=20)),
                ('platform_fee_amount', models.DecimalField(decimal_places=6, max_digits=18)),
                ('platform_fee_source_transaction_id', models.CharField(blank=True, max_length=100, null=True)),
                ('platform_fee_payment_reference', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ('platform_fee_created_at', models.DateTimeField(auto_now_add=True)),
                ('platform_fee_user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='platform_fees', to=settings.AUTH_USER_MODEL)),
            ],
        ),
    ]
